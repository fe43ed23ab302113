"""Blocking file access used by hosts for load/save and batch jobs."""

from .provider import DEFAULT_MAX_RECENT_FILES, FileMetadata, FileProvider, StringTransform

__all__ = [
    "DEFAULT_MAX_RECENT_FILES",
    "FileMetadata",
    "FileProvider",
    "StringTransform",
]
