"""Exception types raised by the text engine core."""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Broad category attached to every engine error."""

    INPUT = "input"
    REGEX = "regex"
    DATA = "data"
    FILE = "file"
    PROCESSING = "processing"


class TextEngineError(RuntimeError):
    """Base class for errors that originate inside the engine."""

    kind: ErrorKind = ErrorKind.PROCESSING


class ValidationError(TextEngineError, ValueError):
    """Raised when a required field is empty or missing."""

    kind = ErrorKind.INPUT

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class PatternError(TextEngineError, ValueError):
    """Raised when a regular expression fails to compile.

    ``message`` and ``position`` come straight from the underlying
    :class:`re.error` so hosts can point at the offending character.
    Failures that are not ``re.error`` carry no position.
    """

    kind = ErrorKind.REGEX

    def __init__(
        self,
        pattern: str,
        message: str,
        *,
        position: Optional[int] = None,
    ) -> None:
        detail = f"Invalid pattern {pattern!r}: {message}"
        if position is not None:
            detail += f" (at position {position})"
        super().__init__(detail)
        self.pattern = pattern
        self.message = message
        self.position = position

    @classmethod
    def from_re_error(cls, pattern: str, exc: re.error) -> "PatternError":
        return cls(pattern, exc.msg, position=exc.pos)

    @classmethod
    def from_compile_failure(cls, pattern: str, exc: Exception) -> "PatternError":
        """Build from anything ``re.compile`` raised; only ``re.error`` has a position."""

        if isinstance(exc, re.error):
            return cls.from_re_error(pattern, exc)
        return cls(pattern, str(exc) or type(exc).__name__)


class NotFoundError(TextEngineError, LookupError):
    """Raised by callers that prefer an exception over a sentinel lookup result."""

    kind = ErrorKind.DATA

    def __init__(self, message: str, *, key: object = None) -> None:
        super().__init__(message)
        self.key = key


class FileAccessError(TextEngineError):
    """Wraps an ``OSError`` raised while reading or writing ``path``.

    The original exception is always chained as ``__cause__``.
    """

    kind = ErrorKind.FILE

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


__all__ = [
    "ErrorKind",
    "TextEngineError",
    "ValidationError",
    "PatternError",
    "NotFoundError",
    "FileAccessError",
]
