"""Structured event plumbing between the core and its host application."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Deque, Dict, List, Mapping, Optional, Protocol

from . import telemetry

EventCallback = Callable[[str, Mapping[str, Any]], None]

WILDCARD = "*"


class EventSink(Protocol):
    """Anything the service can report structured events to."""

    def emit(
        self,
        event: str,
        payload: Optional[Mapping[str, Any]] = None,
        *,
        level: str = "info",
    ) -> None:
        ...


class EventBus:
    """Minimal event bus fanning events out to subscribed callbacks.

    Subscribers registered under ``"*"`` receive every event. Each callback
    is called with the event name and its payload mapping; the level is
    stored on the payload under ``"level"``.
    """

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[EventCallback]] = {}

    def subscribe(self, event: str, callback: EventCallback) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: EventCallback) -> bool:
        callbacks = self._subscribers.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)
            return True
        return False

    def emit(
        self,
        event: str,
        payload: Optional[Mapping[str, Any]] = None,
        *,
        level: str = "info",
    ) -> None:
        data = {"level": level, **(payload or {})}
        for callback in list(self._subscribers.get(event, [])):
            callback(event, data)
        for callback in list(self._subscribers.get(WILDCARD, [])):
            callback(event, data)


@dataclass(frozen=True, slots=True)
class LogEntry:
    timestamp: datetime
    level: str
    event: str
    data: Mapping[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        stamp = self.timestamp.strftime("%Y-%m-%d %H:%M:%S")
        details = " ".join(f"{key}={value!r}" for key, value in self.data.items())
        line = f"{stamp} [{self.level.upper()}] {self.event}"
        return f"{line} {details}" if details else line


class LogHistory:
    """Bounded in-memory log of recent events, newest last."""

    def __init__(self, limit: int = 100) -> None:
        self._entries: Deque[LogEntry] = deque(maxlen=limit)

    def attach(self, bus: EventBus) -> "LogHistory":
        bus.subscribe(WILDCARD, self.record)
        return self

    def record(self, event: str, payload: Mapping[str, Any]) -> None:
        data = dict(payload)
        level = str(data.pop("level", "info"))
        self._entries.append(
            LogEntry(timestamp=datetime.now(), level=level, event=event, data=data)
        )

    def entries(self) -> List[LogEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def forward_to_telemetry(
    bus: EventBus, *, logger_name: Optional[str] = None
) -> EventCallback:
    """Subscribe telelog to every event published on ``bus``."""

    def _forward(event: str, payload: Mapping[str, Any]) -> None:
        data = dict(payload)
        level = data.pop("level", "info")
        telemetry.record_event(
            event, level=level, data=data, logger_name=logger_name
        )

    bus.subscribe(WILDCARD, _forward)
    return _forward


__all__ = [
    "EventBus",
    "EventCallback",
    "EventSink",
    "LogEntry",
    "LogHistory",
    "WILDCARD",
    "forward_to_telemetry",
]
