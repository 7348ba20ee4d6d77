"""Entry points invoked by the request pipeline.

``StaticHeaderHandler`` runs for every outgoing request. ``DynamicHeaderAction`` runs
as a session-refresh step once a macro has been replayed and its responses captured.
Both read a fresh rule snapshot per call and hold no state between calls.
"""

from __future__ import annotations

from typing import Optional

from .events import EventKind, EventPublisher
from .mutator import RequestMutator
from .resolver import HeaderResolver
from .types import HeaderMode, HeaderRule, HttpRequest, MacroResponses, RuleSetSource


class _HeaderHandlerBase:
    mode: HeaderMode

    def __init__(
        self,
        source: RuleSetSource,
        *,
        events: Optional[EventPublisher] = None,
        resolver: Optional[HeaderResolver] = None,
        mutator: Optional[RequestMutator] = None,
    ) -> None:
        self._source = source
        self._events = events or EventPublisher()
        self._resolver = resolver or HeaderResolver(events=self._events)
        self._mutator = mutator or RequestMutator(self._events)

    def _rules(self) -> list[HeaderRule]:
        return [rule for rule in self._source.get_rule_set() if rule.mode is self.mode]


class StaticHeaderHandler(_HeaderHandlerBase):
    """Apply static rules to a request about to be sent."""

    mode = HeaderMode.STATIC

    def handle_request(self, request: HttpRequest) -> HttpRequest:
        if not self._source.is_master_enabled():
            return request
        resolved = self._resolver.resolve(self._rules())
        return self._mutator.apply(request, resolved)


class DynamicHeaderAction(_HeaderHandlerBase):
    """Apply dynamic rules using tokens extracted from macro responses."""

    mode = HeaderMode.DYNAMIC
    name = "Extract header tokens from macro responses"

    def perform(self, request: HttpRequest, responses: MacroResponses) -> HttpRequest:
        if not self._source.is_master_enabled():
            self._events.info(EventKind.INJECTOR_DISABLED, "Custom headers are disabled, skipping")
            return request
        if not responses:
            self._events.info(EventKind.MACRO_EMPTY, "No macro responses available for token extraction")
            return request
        resolved = self._resolver.resolve(self._rules(), responses)
        return self._mutator.apply(request, resolved)


__all__ = ["DynamicHeaderAction", "StaticHeaderHandler"]
