"""Outcome objects returned by every public core operation.

The core never raises past its own boundary; presentation code inspects
``success`` and ``error`` to decide between a status line and an alert.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from mol_tracker.models.enums import ErrorKind


class OperationResult(BaseModel):
    """Result of applying a user action.

    Attributes:
        success: Whether the action took effect.
        message: Status text suitable for display.
        error: Failure category, None on success.
        value: Operation-specific payload (new skill, XP gain, description...).
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    success: bool
    message: str = ""
    error: ErrorKind | None = None
    value: Any = None

    @classmethod
    def ok(cls, message: str = "", *, value: Any = None) -> OperationResult:
        return cls(success=True, message=message, value=value)

    @classmethod
    def fail(cls, error: ErrorKind, message: str, *, value: Any = None) -> OperationResult:
        return cls(success=False, message=message, error=error, value=value)

    def __bool__(self) -> bool:
        return self.success


class XPGain(BaseModel):
    """Outcome of awarding XP to a skill."""

    model_config = ConfigDict(frozen=True)

    skill_id: str
    amount: int
    leveled_up: bool = Field(default=False)
    new_level: int
    new_xp: int


__all__ = [
    "OperationResult",
    "XPGain",
]
