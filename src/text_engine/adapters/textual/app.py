"""Executable Textual app that hosts the text engine."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence

try:  # pragma: no cover - imported only when the app is run
    from textual.app import App, ComposeResult
    from textual.containers import Horizontal, Vertical
    from textual.widgets import Footer, Header, Input, Static, TextArea
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use text_engine.adapters.textual.app"
    ) from exc

from text_engine.buffer import BufferView
from text_engine.config import EngineConfig
from text_engine.patterns import Match
from text_engine.runtime import telemetry
from text_engine.runtime.events import LogHistory
from text_engine.service import create_default_service

from .controller import TextualEditorAdapter, TextualUIHooks


@dataclass
class UIState:
    status_text: str = ""
    match_text: str = ""


class TextEngineApp(App[None]):  # pragma: no cover - manual demo
    """Minimal Textual UI embedding the text engine."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#editor {
		height: 1fr;
		border: round $accent;
	}

	#search-bar {
		height: 3;
	}

	#search-bar Input {
		width: 1fr;
	}

	#matches {
		height: 3;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#status-line {
		height: 1;
		background: $surface-darken-2;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
        ("ctrl+z", "undo", "Undo"),
        ("ctrl+y", "redo", "Redo"),
        ("ctrl+f", "focus_find", "Find"),
        ("ctrl+s", "save", "Save"),
        ("ctrl+r", "save_record", "Save record"),
        ("ctrl+t", "statistics", "Stats"),
    ]

    def __init__(
        self,
        *,
        path: Optional[str] = None,
        config: Optional[EngineConfig] = None,
    ) -> None:
        super().__init__()
        self._state = UIState()
        self._path = path
        self._config = config
        self.adapter: TextualEditorAdapter | None = None
        self.log_history: LogHistory | None = None
        self._editor: TextArea | None = None
        self._find_input: Input | None = None
        self._replace_input: Input | None = None
        self._matches_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical():
            self._editor = TextArea("", id="editor")
            yield self._editor
            with Horizontal(id="search-bar"):
                self._find_input = Input(placeholder="regex", id="find")
                self._replace_input = Input(placeholder="replacement", id="replace")
                yield self._find_input
                yield self._replace_input
        self._matches_widget = Static("", id="matches")
        self._status_widget = Static("", id="status-line")
        yield self._matches_widget
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        service, self.log_history = create_default_service(self._config)
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            show_matches=self._show_matches,
            handle_event=self._handle_event,
        )
        self.adapter = TextualEditorAdapter(service, hooks)
        if self._path:
            self.adapter.open_file(self._path)

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if self.adapter:
            self.adapter.handle_edit(event.text_area.text)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if not self.adapter or not self._find_input or not self._replace_input:
            return
        pattern = self._find_input.value
        if event.input is self._replace_input:
            self.adapter.replace(pattern, self._replace_input.value)
        else:
            self.adapter.find(pattern)

    def action_undo(self) -> None:
        if self.adapter:
            self.adapter.undo()

    def action_redo(self) -> None:
        if self.adapter:
            self.adapter.redo()

    def action_focus_find(self) -> None:
        if self._find_input:
            self._find_input.focus()

    def action_save(self) -> None:
        if self.adapter and self._path:
            self.adapter.save_file(self._path)
        else:
            self._update_status("no file path; start with --file")

    def action_save_record(self) -> None:
        if self.adapter:
            self.adapter.save_record()

    def action_statistics(self) -> None:
        if self.adapter:
            self.adapter.show_statistics()

    def _update_buffer(self, view: BufferView) -> None:
        if self._editor and self._editor.text != view.text:
            self._editor.load_text(view.text)

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _show_matches(self, matches: List[Match]) -> None:
        preview = ", ".join(f"{m.text!r}@{m.start}" for m in matches[:20])
        self._state.match_text = preview
        if self._matches_widget:
            self._matches_widget.update(preview)

    def _handle_event(self, name: str, payload: Mapping[str, Any]) -> None:
        if payload.get("level") == "warning":
            self._update_status(f"{name}: {payload.get('message', '')}")


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the text engine Textual editor.")
    parser.add_argument(
        "--file",
        default=os.environ.get("TEXT_ENGINE_FILE"),
        help="Text file to open on startup",
    )
    parser.add_argument(
        "--log-preset",
        choices=tuple(telemetry.PRESETS),
        default=os.environ.get("TEXT_ENGINE_LOG_PRESET"),
        help="telelog preset to configure before starting",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:  # pragma: no cover - manual demo
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    app = TextEngineApp(path=args.file, config=EngineConfig.from_env())
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
