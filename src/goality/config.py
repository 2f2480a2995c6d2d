"""Lint options: construction, merging and discovery.

Options sources are merged in priority order:
    1. Defaults (defined in LintOptions)
    2. Global config (~/.goality.toml)
    3. Project config (./goality.toml)
    4. Explicit config file
    5. Environment variables (GOALITY_* prefix)
    6. Keyword overrides (typically CLI flags)

Several ``LintOptions`` can also be combined with ``merge_lint_options``, which
unions the list-valued fields and refuses two different linter configs.

Example:
    >>> opts = merge_lint_options(
    ...     LintOptions(linters=("govet",)),
    ...     LintOptions(linters=("unused", "govet"), exclude_dirs=("testdata",)),
    ... )
    >>> opts.linters
    ('govet', 'unused')
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from .exceptions import ConfigurationError, ConflictingConfigError, InvalidConfigError

# Flags forcing a deterministic, complete and machine-readable linter run.
BASE_ARGS = (
    "run",
    "--issues-exit-code=0",
    "--max-issues-per-linter=0",
    "--max-same-issues=0",
    "--new=false",
    "--new-from-rev=",
    "--out-format=json",
)


@dataclass(frozen=True)
class LintOptions:
    """Options for one lint phase.

    Attributes:
        linters: Linters to enable; empty means the tool's own selection
        config_path: Linter configuration file passed through to the tool
        exclude_dirs: Directory names skipped both by the scan and the tool
        executable: Linter binary to invoke
        memory_threshold: Fraction of host memory above which a run is interrupted
        sample_interval: Seconds between two memory samples
        self_retries: Extra attempts granted to an interrupted own-files run
    """

    linters: tuple[str, ...] = ()
    config_path: Optional[str] = None
    exclude_dirs: tuple[str, ...] = ()
    executable: str = "golangci-lint"
    memory_threshold: float = 0.9
    sample_interval: float = 1.0
    self_retries: int = 2

    def __post_init__(self) -> None:
        # Accept any iterable for the list-valued fields.
        object.__setattr__(self, "linters", tuple(self.linters))
        object.__setattr__(self, "exclude_dirs", tuple(self.exclude_dirs))

        if not 0.0 < self.memory_threshold <= 1.0:
            raise InvalidConfigError(
                "memory_threshold", self.memory_threshold, "must be in (0.0, 1.0]"
            )
        if self.sample_interval <= 0:
            raise InvalidConfigError("sample_interval", self.sample_interval, "must be positive")
        if self.self_retries < 0:
            raise InvalidConfigError("self_retries", self.self_retries, "must be non-negative")
        if not self.executable:
            raise InvalidConfigError("executable", self.executable, "must not be empty")

    def to_args(self) -> list[str]:
        """Tool flags for configuration, linter selection and exclusions."""
        args: list[str] = []
        if self.config_path:
            args.append(f"--config={self.config_path}")
        else:
            args.append("--no-config")

        if self.linters:
            args.extend(["--disable-all", "--enable=" + ",".join(self.linters)])

        if self.exclude_dirs:
            args.append("--skip-dirs=" + ",".join(self.exclude_dirs))
        return args

    def command(self, scope: str) -> list[str]:
        return [self.executable, *BASE_ARGS, *self.to_args(), scope]


_DEFAULTS = LintOptions()


def merge_lint_options(*options: LintOptions) -> LintOptions:
    """Merge several option sets into one.

    Linters and excluded directories are unioned, sorted and deduplicated.
    At most one non-empty config path may be given; its own skip-dirs are
    added to the exclusions. Scalar fields take the last non-default value.
    """
    linters: set[str] = set()
    exclude_dirs: set[str] = set()
    config_paths: list[str] = []
    scalars: dict[str, Any] = {}

    for opt in options:
        linters.update(opt.linters)
        exclude_dirs.update(opt.exclude_dirs)
        if opt.config_path and opt.config_path not in config_paths:
            config_paths.append(opt.config_path)
        for name in ("executable", "memory_threshold", "sample_interval", "self_retries"):
            value = getattr(opt, name)
            if value != getattr(_DEFAULTS, name):
                scalars[name] = value

    if len(config_paths) > 1:
        raise ConflictingConfigError(config_paths)

    config_path = config_paths[0] if config_paths else None
    if config_path is not None:
        exclude_dirs.update(read_tool_skip_dirs(Path(config_path)))

    return LintOptions(
        linters=tuple(sorted(linters)),
        config_path=config_path,
        exclude_dirs=tuple(sorted(exclude_dirs)),
        **scalars,
    )


def read_tool_skip_dirs(path: Path) -> list[str]:
    """Read the directories a linter configuration file asks to skip.

    Understands ``run.skip-dirs`` and ``issues.exclude-dirs`` in YAML, TOML
    and JSON configurations.
    """
    if not path.exists():
        raise ConfigurationError(f"Linter config file not found: {path}")

    try:
        suffix = path.suffix.lower()
        if suffix == ".toml":
            data = _load_toml_file(path)
        elif suffix == ".json":
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        else:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to read or parse config from '{path}': {e}")

    if not isinstance(data, dict):
        return []

    skip_dirs: list[str] = []
    for section, key in (("run", "skip-dirs"), ("issues", "exclude-dirs")):
        values = (data.get(section) or {}).get(key) or []
        skip_dirs.extend(str(v) for v in values)
    return skip_dirs


def load_config(config_file: Optional[Path] = None, **overrides) -> LintOptions:
    """Load lint options with auto-discovery and merging.

    Args:
        config_file: Optional explicit goality config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated LintOptions instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / ".goality.toml"
    if global_config.exists():
        merged.update(_read_goality_file(global_config, "global"))

    project_config = Path.cwd() / "goality.toml"
    if project_config.exists():
        merged.update(_read_goality_file(project_config, "project"))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_read_goality_file(config_file, "explicit"))

    merged.update(_load_env_vars())
    merged.update({k: v for k, v in overrides.items() if v is not None})

    known = {f.name for f in fields(LintOptions)}
    unknown = sorted(set(merged) - known)
    if unknown:
        raise ConfigurationError(f"Invalid configuration: unknown option(s) {', '.join(unknown)}")

    return replace(_DEFAULTS, **merged)


def _read_goality_file(path: Path, label: str) -> dict[str, Any]:
    try:
        data = _load_toml_file(path)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Invalid {label} config '{path}': {e}")
    # Config files use kebab-case keys; options are snake_case.
    return {key.replace("-", "_"): value for key, value in data.items()}


def _load_env_vars() -> dict[str, Any]:
    """Load options from GOALITY_* environment variables.

    List-valued options take comma-separated values, e.g.
    ``GOALITY_LINTERS=govet,unused``.
    """
    result: dict[str, Any] = {}
    for f in fields(LintOptions):
        env_key = f"GOALITY_{f.name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue
        try:
            result[f.name] = _parse_env_value(f.name, env_value)
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")
    return result


def _parse_env_value(name: str, value: str) -> Any:
    default = getattr(_DEFAULTS, name)
    if isinstance(default, tuple):
        return tuple(item.strip() for item in value.split(",") if item.strip())
    if isinstance(default, int):
        return int(value)
    if isinstance(default, float):
        return float(value)
    return value or None


def _load_toml_file(path: Path) -> dict:
    try:
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore

    with open(path, "rb") as f:
        return tomllib.load(f)
