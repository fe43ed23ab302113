"""UI-agnostic text editing core: undo history, regex tools, and record analytics."""

from .errors import (
    ErrorKind,
    FileAccessError,
    NotFoundError,
    PatternError,
    TextEngineError,
    ValidationError,
)
from .config import EngineConfig
from .service import TextProcessingService, create_default_service

__all__ = [
    "EngineConfig",
    "ErrorKind",
    "FileAccessError",
    "NotFoundError",
    "PatternError",
    "TextEngineError",
    "TextProcessingService",
    "ValidationError",
    "create_default_service",
    "adapters",
    "buffer",
    "files",
    "patterns",
    "records",
    "runtime",
]

__version__ = "0.1.0"
