"""Minimal adapter that wires TextProcessingService calls into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from text_engine.buffer import BufferView
from text_engine.errors import PatternError, TextEngineError
from text_engine.patterns import Match
from text_engine.runtime.events import WILDCARD, EventBus
from text_engine.service import TextProcessingService


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferView], None]
    update_status: Callable[[str], None] = _noop
    show_matches: Callable[[List[Match]], None] = _noop
    handle_event: Callable[[str, Mapping[str, Any]], None] = _noop
    log: Callable[[str], None] = _noop


class TextualEditorAdapter:
    """Turns widget-level actions into service calls and surfaces the results.

    Engine errors are reported through ``update_status`` rather than raised,
    since this is the presentation boundary.
    """

    def __init__(self, service: TextProcessingService, hooks: TextualUIHooks) -> None:
        self.service = service
        self.hooks = hooks
        self._last_version: Optional[int] = None
        self._subscribe_events()
        self._refresh_buffer(force=True)

    def handle_edit(self, text: str) -> bool:
        changed = self.service.set_current_text(text)
        self._log_state("edit ->", changed=changed)
        if changed:
            self._refresh_buffer()
        return changed

    def find(self, pattern: str) -> List[Match]:
        try:
            matches = self.service.find_matches_with_positions(pattern)
        except PatternError as exc:
            self._report_error(exc)
            return []
        self.hooks.show_matches(matches)
        self.hooks.update_status(f"{len(matches)} match(es)")
        return matches

    def replace(self, pattern: str, replacement: str) -> int:
        try:
            count = self.service.replace_text(pattern, replacement)
        except PatternError as exc:
            self._report_error(exc)
            return 0
        self.hooks.update_status(f"replaced {count} occurrence(s)")
        self._refresh_buffer()
        return count

    def undo(self) -> bool:
        moved = self.service.undo()
        self.hooks.update_status("undo" if moved else "nothing to undo")
        self._refresh_buffer()
        return moved

    def redo(self) -> bool:
        moved = self.service.redo()
        self.hooks.update_status("redo" if moved else "nothing to redo")
        self._refresh_buffer()
        return moved

    def open_file(self, path: str) -> bool:
        try:
            self.service.read_from_file(path)
        except TextEngineError as exc:
            self._report_error(exc)
            return False
        self.hooks.update_status(f"opened {path}")
        self._refresh_buffer()
        return True

    def save_file(self, path: str) -> bool:
        try:
            self.service.save_to_file(path)
        except TextEngineError as exc:
            self._report_error(exc)
            return False
        self.hooks.update_status(f"saved {path}")
        return True

    def save_record(self, name: Optional[str] = None) -> int:
        record_id = self.service.save_current_text_as_record(name, "editor")
        self.hooks.update_status(f"saved record #{record_id}")
        return record_id

    def show_statistics(self) -> str:
        summary = str(self.service.text_statistics())
        self.hooks.update_status(summary)
        return summary

    def _report_error(self, exc: TextEngineError) -> None:
        self._log_state("error <-", kind=exc.kind.value, message=str(exc))
        self.hooks.update_status(f"error: {exc}")

    def _subscribe_events(self) -> None:
        bus = self.service.events
        if isinstance(bus, EventBus):
            bus.subscribe(WILDCARD, self._handle_event)

    def _handle_event(self, name: str, payload: Mapping[str, Any]) -> None:
        self._log_state("event ->", event=name)
        self.hooks.handle_event(name, payload)

    def _refresh_buffer(self, *, force: bool = False) -> None:
        view = self.service.snapshot()
        if not force and view.version == self._last_version:
            return
        self._last_version = view.version
        self.hooks.update_buffer(view)

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        view = self.service.snapshot()
        return {
            "buffer": view.name,
            "version": view.version,
            "position": view.position,
            "depth": view.depth,
        }


__all__ = ["TextualEditorAdapter", "TextualUIHooks"]
