"""Named text records, word-frequency analytics, and cross-record search."""

from .models import TextRecord
from .store import DEFAULT_SOURCE, RecordStore, StoreStats, WordCount, count_words

__all__ = [
    "TextRecord",
    "RecordStore",
    "StoreStats",
    "WordCount",
    "DEFAULT_SOURCE",
    "count_words",
]
