"""Base exception for goality."""

from typing import Dict, Optional


class GoalityError(Exception):
    """Base exception for all goality errors.

    ``scope`` names the linter scope (``foo/...``, ``foo``) the error belongs
    to, if any. It is rendered first among the details so that a failure deep
    inside a subdivided run still says where it happened.
    """

    exit_code = 1

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, str]] = None,
        scope: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.scope = scope
        self.details = {"scope": scope} if scope is not None else {}
        self.details.update(details or {})

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message
