# cuplab_backend/app/models/validation.py
from __future__ import annotations

from typing import Optional
from pydantic import BaseModel


class ValidationOutcome(BaseModel):
    """
    Result of a configuration check that stops at the first problem.
    `error` is end-user readable and only set when `valid` is False.
    """
    valid: bool
    error: Optional[str] = None

    @classmethod
    def ok(cls) -> "ValidationOutcome":
        return cls(valid=True)

    @classmethod
    def fail(cls, error: str) -> "ValidationOutcome":
        return cls(valid=False, error=error)


__all__ = ["ValidationOutcome"]
