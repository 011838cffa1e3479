"""
Errors
======

Exception hierarchy for the sumo core.

Only configuration mistakes are errors here. Ties, knockouts and the end of a
series are ordinary outcomes reported through events and results.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = ["SumoballError", "ConfigurationError"]


class SumoballError(Exception):
    """
    Base exception for all sumoball errors.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable description.
        context: Extra values useful when debugging.
    """
    code: str = "SUMOBALL_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


class ConfigurationError(SumoballError, ValueError):
    """Invalid setup, unknown distribution, or engine used before setup."""
    code: str = "CONFIGURATION_ERROR"
