"""Exception hierarchy for graph-codec."""

from __future__ import annotations

from typing import Any


class CodecError(Exception):
    """Base error raised by the codec layer."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message}: {self.cause}"


class FormatError(CodecError):
    """Raised when a decoded scalar is malformed or has the wrong type."""


class EncodeError(CodecError):
    """Raised when a value cannot be written as JSON text."""

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        *,
        key: str | None = None,
        value: Any = None,
        element: Any = None,
    ) -> None:
        super().__init__(message, cause)
        self.key = key
        self.value = value
        self.element = element


class DecodeError(CodecError):
    """Raised when JSON text cannot be turned into the requested value."""
