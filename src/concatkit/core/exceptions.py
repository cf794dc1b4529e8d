"""Error hierarchy shared by every concatkit layer.

Errors carry a developer-facing message plus an optional ``user_message``
and advertise whether they are recoverable, so callers can decide how to
surface them without inspecting concrete types.
"""

from __future__ import annotations

from typing import Optional


class ConcatError(Exception):
    """Base error for concatkit."""

    recoverable: bool = True
    severity: str = "error"

    def __init__(self, message: str, *, user_message: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.user_message = user_message


class PermanentError(ConcatError):
    """Failure that will not go away by trying again."""

    recoverable = False
    severity = "critical"


class ConstructionError(PermanentError):
    """An operand could not produce a segment during concatenation."""

    def __init__(
        self,
        message: str,
        *,
        operand: object = None,
        user_message: Optional[str] = None,
    ) -> None:
        if user_message is None:
            user_message = "This element cannot be combined with others."
        super().__init__(message, user_message=user_message)
        self.operand = operand


class ConfigError(PermanentError):
    """Invalid or unreadable configuration."""
