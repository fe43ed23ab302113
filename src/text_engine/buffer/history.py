"""Bounded linear undo/redo history of whole-text snapshots."""

from __future__ import annotations

from typing import List, Optional, Sequence

DEFAULT_MAX_HISTORY = 20


class EditHistory:
    """Current text plus a bounded list of past snapshots.

    ``text`` always equals ``_snapshots[_position]``. A new distinct edit
    prunes everything after the position, appends the snapshot, and evicts
    from the front once the list grows past ``max_size``.
    """

    def __init__(
        self, initial_text: Optional[str] = None, *, max_size: int = DEFAULT_MAX_HISTORY
    ) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._snapshots: List[str] = [initial_text or ""]
        self._position = 0

    @property
    def text(self) -> str:
        return self._snapshots[self._position]

    @property
    def position(self) -> int:
        return self._position

    def __len__(self) -> int:
        return len(self._snapshots)

    def snapshots(self) -> Sequence[str]:
        return tuple(self._snapshots)

    def set_text(self, new_text: Optional[str]) -> bool:
        """Record ``new_text`` as a new state; returns ``False`` when unchanged."""

        new_text = new_text or ""
        if new_text == self.text:
            return False
        del self._snapshots[self._position + 1 :]
        self._snapshots.append(new_text)
        overflow = len(self._snapshots) - self.max_size
        if overflow > 0:
            del self._snapshots[:overflow]
        self._position = len(self._snapshots) - 1
        return True

    def can_undo(self) -> bool:
        return self._position > 0

    def can_redo(self) -> bool:
        return self._position < len(self._snapshots) - 1

    def undo(self) -> bool:
        if not self.can_undo():
            return False
        self._position -= 1
        return True

    def redo(self) -> bool:
        if not self.can_redo():
            return False
        self._position += 1
        return True

    def clear(self) -> bool:
        return self.set_text("")
