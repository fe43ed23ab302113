"""High-level buffer façade combining the edit history with telemetry."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import ContextManager, Optional

from text_engine.runtime import telemetry

from .history import DEFAULT_MAX_HISTORY, EditHistory


@dataclass(slots=True)
class BufferView:
    """Host-friendly snapshot describing the current buffer state."""

    name: str
    version: int
    text: str
    position: int
    depth: int
    can_undo: bool
    can_redo: bool


class Buffer:
    """The single live text buffer being edited.

    Every change (edit, undo, redo) bumps ``version`` so hosts can tell
    whether a cached rendering is stale.
    """

    def __init__(
        self,
        initial_text: Optional[str] = None,
        *,
        name: str = "default",
        max_history: int = DEFAULT_MAX_HISTORY,
        history: Optional[EditHistory] = None,
    ) -> None:
        self.name = name
        self.history = history or EditHistory(initial_text, max_size=max_history)
        self.version = 0

    @property
    def text(self) -> str:
        return self.history.text

    def snapshot(self) -> BufferView:
        return BufferView(
            name=self.name,
            version=self.version,
            text=self.history.text,
            position=self.history.position,
            depth=len(self.history),
            can_undo=self.history.can_undo(),
            can_redo=self.history.can_redo(),
        )

    def set_text(self, text: Optional[str], *, label: str = "set_text") -> bool:
        with Transaction(self, label) as tx:
            changed = self.history.set_text(text)
            tx.finish(changed)
        return changed

    def clear(self) -> bool:
        return self.set_text("", label="clear")

    def undo(self) -> bool:
        with Transaction(self, "undo") as tx:
            moved = self.history.undo()
            tx.finish(moved)
        return moved

    def redo(self) -> bool:
        with Transaction(self, "redo") as tx:
            moved = self.history.redo()
            tx.finish(moved)
        return moved


class Transaction(AbstractContextManager["Transaction"]):
    """Wraps one buffer mutation in a telemetry span."""

    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[telemetry.SpanHandle]] = None
        self._handle: Optional[telemetry.SpanHandle] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            logger_name="text_engine.buffer",
            component="buffer",
            metadata={"buffer": self.buffer.name},
        )
        self._handle = self._span_cm.__enter__()
        return self

    def finish(self, changed: bool) -> None:
        if changed:
            self.buffer.version += 1
        if self._handle is not None:
            self._handle.add_metadata("changed", changed)
            self._handle.add_metadata("position", self.buffer.history.position)

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False
