"""Exceptions raised by channel handlers.

Everything a handler raises on purpose derives from `ChannelError`; the
server maps these to 400 responses. Backend and programming errors are left
to propagate as-is.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class ChannelError(Exception):
    """Base class for request-level handler failures."""


class PayloadParseError(ChannelError):
    """The request body (or a field inside it) could not be parsed."""


class TimestampParseError(PayloadParseError):
    def __init__(self, value: str) -> None:
        super().__init__(f"unable to parse date '{value}'")
        self.value = value


class PayloadValidationError(ChannelError):
    """The body parsed but is missing required fields or has bad values."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class UnknownStatusError(PayloadValidationError):
    def __init__(self, value: str, valid: List[str]) -> None:
        allowed = ", ".join(valid[:-1]) + f" or {valid[-1]}"
        super().__init__(f"unknown status '{value}', must be one of {allowed}")
        self.value = value


class ChannelConfigError(ChannelError):
    """The channel lacks configuration required to talk to its gateway."""
