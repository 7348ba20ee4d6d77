"""Event publishing for the extraction and mutation engine."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Any, Iterable, List, Optional, Protocol

from pydantic import BaseModel, Field

from .config import EventConfig

LOGGER = logging.getLogger(__name__)


class EventKind(str, Enum):
    """Events raised while resolving and applying headers."""

    TOKEN_EXTRACTED = "token.extracted"
    TOKEN_NOT_FOUND = "token.not_found"
    HEADER_APPLIED = "header.applied"
    PATTERN_INVALID = "pattern.invalid"
    RESPONSE_MISSING_BODY = "response.missing_body"
    MACRO_EMPTY = "macro.empty"
    INJECTOR_DISABLED = "injector.disabled"


class EngineEvent(BaseModel):
    """Structured record handed to event sinks."""

    event: EventKind
    level: int = logging.INFO
    message: str
    header: Optional[str] = None
    payload: dict[str, Any] = Field(default_factory=dict)


class EventSink(Protocol):
    """Sink that handles engine events."""

    def handle(self, event: EngineEvent) -> None:  # pragma: no cover - protocol
        ...


class EventPublisher:
    """Publish engine events to registered sinks."""

    def __init__(
        self,
        config: Optional[EventConfig] = None,
        *,
        sinks: Optional[Iterable[EventSink]] = None,
    ) -> None:
        self.config = config or EventConfig()
        self._sinks: List[EventSink] = list(sinks or [])

    def subscribe(self, sink: EventSink) -> None:
        self._sinks.append(sink)

    def unsubscribe(self, sink: EventSink) -> None:
        if sink in self._sinks:
            self._sinks.remove(sink)

    @contextmanager
    def subscribed(self, sink: EventSink):
        self.subscribe(sink)
        try:
            yield sink
        finally:
            self.unsubscribe(sink)

    def emit(self, event: EngineEvent) -> None:
        if not self.config.enabled:
            return
        for sink in list(self._sinks):
            try:
                sink.handle(event)
            except Exception:  # pragma: no cover - defensive logging
                LOGGER.exception("Event sink %s failed", sink)

    def info(self, kind: EventKind, message: str, *, header: Optional[str] = None, **payload: Any) -> None:
        self.emit(EngineEvent(event=kind, level=logging.INFO, message=message, header=header, payload=payload))

    def error(self, kind: EventKind, message: str, *, header: Optional[str] = None, **payload: Any) -> None:
        self.emit(EngineEvent(event=kind, level=logging.ERROR, message=message, header=header, payload=payload))

    def token_payload(self, token: str) -> dict[str, Any]:
        """Describe an extracted token, hiding the value unless configured otherwise."""

        if self.config.include_values:
            return {"length": len(token), "value": token}
        return {"length": len(token)}


class LoggingEventSink:
    """Sink that logs events with the module logger at the event's own level."""

    def handle(self, event: EngineEvent) -> None:
        LOGGER.log(event.level, "[%s] %s", event.event.value, event.message, extra={"payload": event.payload})


class InMemoryEventSink:
    """Collects events in memory for diagnostics or testing."""

    def __init__(self) -> None:
        self.events: list[EngineEvent] = []

    def handle(self, event: EngineEvent) -> None:
        self.events.append(event)

    def kinds(self) -> list[EventKind]:
        return [event.event for event in self.events]


__all__ = [
    "EngineEvent",
    "EventKind",
    "EventPublisher",
    "EventSink",
    "InMemoryEventSink",
    "LoggingEventSink",
]
