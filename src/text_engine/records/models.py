"""Dataclasses describing stored text records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True, eq=False)
class TextRecord:
    """A named snapshot of text kept alongside the live buffer.

    ``id`` and ``created_at`` never change once assigned; ``name`` and
    ``content`` may be updated through the store.
    """

    id: int
    name: str
    content: str
    source: str
    created_at: datetime = field(default_factory=datetime.now)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TextRecord):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return (
            f"TextRecord[id={self.id}, name={self.name!r}, source={self.source!r}, "
            f"created={self.created_at.isoformat(timespec='seconds')}, "
            f"length={len(self.content)}]"
        )


__all__ = ["TextRecord"]
