"""Textual adapter; the runnable app lives in ``text_engine.adapters.textual.app``."""

from .controller import TextualEditorAdapter, TextualUIHooks

__all__ = ["TextualEditorAdapter", "TextualUIHooks"]
