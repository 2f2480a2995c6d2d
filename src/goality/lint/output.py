"""Decode the linter's JSON report."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from ..exceptions import InvocationRuntimeError
from ..logging_config import get_logger
from ..tree.models import Issue

logger = get_logger(__name__)


@dataclass
class LintOutput:
    issues: list[Issue] = field(default_factory=list)
    enabled_linters: list[str] = field(default_factory=list)


def decode_output(raw: bytes, scope: str) -> LintOutput:
    """Parse ``{"Issues": [...], "Report": {"Linters": [...]}}``.

    Raises InvocationRuntimeError when the output is not the expected JSON.
    """
    try:
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        issues = [Issue.from_dict(item) for item in data.get("Issues") or []]
        report = data.get("Report") or {}
        enabled = sorted(
            linter["Name"] for linter in report.get("Linters") or [] if linter.get("Enabled")
        )
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        logger.error("Could not parse linter output:\n%s", raw.decode("utf-8", errors="replace"))
        raise InvocationRuntimeError(scope, f"malformed linter output: {e}") from e
    return LintOutput(issues=issues, enabled_linters=enabled)
