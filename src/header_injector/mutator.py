"""Apply resolved headers onto an outgoing request."""

from __future__ import annotations

from typing import Iterable, Optional

from .events import EventKind, EventPublisher
from .types import HttpRequest, ResolvedHeader


class RequestMutator:
    """Replace-based header application.

    Every configured name ends up exactly once on the request; existing occurrences
    (compared case-insensitively) are dropped before the new header is appended.
    """

    def __init__(self, events: Optional[EventPublisher] = None) -> None:
        self._events = events or EventPublisher()

    def apply(self, request: HttpRequest, resolved: Iterable[ResolvedHeader]) -> HttpRequest:
        updated = request
        for header in resolved:
            replaced = updated.has_header(header.name)
            if replaced:
                updated = updated.without_header(header.name)
            updated = updated.with_header(header.name, header.value)
            self._events.info(
                EventKind.HEADER_APPLIED,
                f"Added header '{header.name}'",
                header=header.name,
                replaced=replaced,
            )
        return updated


__all__ = ["RequestMutator"]
