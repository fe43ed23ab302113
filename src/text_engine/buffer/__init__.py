"""Live text buffer, bounded undo/redo history, and text statistics."""

from .buffer import Buffer, BufferView, Transaction
from .history import DEFAULT_MAX_HISTORY, EditHistory
from .statistics import TextStatistics, compute_statistics

__all__ = [
    "Buffer",
    "BufferView",
    "Transaction",
    "EditHistory",
    "DEFAULT_MAX_HISTORY",
    "TextStatistics",
    "compute_statistics",
]
