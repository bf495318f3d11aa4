"""Errors raised by the SDL parser and manifest compiler."""
from typing import Any, Dict, Optional


class SDLError(Exception):
    """Base error for SDL processing, with optional context and cause."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.cause = cause

    def describe(self) -> str:
        """Return the error with its context and cause for display.

        Returns:
            str: Multi-line description of the error.
        """
        lines = [f"{type(self).__name__}: {self.message}"]
        for key, value in self.context.items():
            lines.append(f"  {key}: {value}")
        if self.cause is not None:
            lines.append(f"Caused by: {self.cause}")
        return "\n".join(lines)


class ParseError(SDLError):
    """The document could not be turned into an SDL tree."""


class ValidationError(SDLError):
    """The document is well-formed but cannot be resolved or is incomplete."""
