"""High level facade wiring configuration, events, handlers and sessions."""

from __future__ import annotations

from contextlib import AbstractContextManager
from pathlib import Path
from typing import Iterable, Optional

from .config import HeaderInjectorConfig, MacroRequest
from .events import EventPublisher, EventSink, LoggingEventSink
from .handlers import DynamicHeaderAction, StaticHeaderHandler
from .persistence import RuleStore
from .rule_loader import load_config
from .rule_set import RuleSetManager
from .session import AsyncHeaderSession, HeaderSession
from .types import HttpRequest, MacroResponses


class HeaderInjector(AbstractContextManager):
    """Bundle the rule set, event publisher and both application paths."""

    def __init__(
        self,
        *,
        config: Optional[HeaderInjectorConfig] = None,
        rule_set: Optional[RuleSetManager] = None,
        store: Optional[RuleStore] = None,
        event_sinks: Optional[Iterable[EventSink]] = None,
        log_events: bool = True,
    ) -> None:
        self.rule_set = rule_set or RuleSetManager(config, store=store)
        sinks: list[EventSink] = [LoggingEventSink()] if log_events else []
        sinks.extend(event_sinks or [])
        self.events = EventPublisher(self.rule_set.config.events, sinks=sinks)
        self.static_handler = StaticHeaderHandler(self.rule_set, events=self.events)
        self.dynamic_action = DynamicHeaderAction(self.rule_set, events=self.events)

    @classmethod
    def from_rule_file(cls, path: str | Path, **kwargs) -> "HeaderInjector":
        return cls(config=load_config(path), **kwargs)

    @classmethod
    def from_store(cls, store: RuleStore, **kwargs) -> "HeaderInjector":
        return cls(rule_set=RuleSetManager.from_store(store), **kwargs)

    def __enter__(self) -> "HeaderInjector":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        return None

    @property
    def macro(self) -> list[MacroRequest]:
        return list(self.rule_set.config.macro)

    def apply_static(self, request: HttpRequest) -> HttpRequest:
        return self.static_handler.handle_request(request)

    def apply_dynamic(self, request: HttpRequest, responses: MacroResponses) -> HttpRequest:
        return self.dynamic_action.perform(request, responses)

    def apply(self, request: HttpRequest, responses: MacroResponses = ()) -> HttpRequest:
        """Run the dynamic path (when responses are given) followed by the static path."""

        if responses:
            request = self.apply_dynamic(request, responses)
        return self.apply_static(request)

    def session(self, **kwargs) -> HeaderSession:
        """Create a synchronous session using the current rule set."""

        kwargs.setdefault("macro", self.macro)
        return HeaderSession(self.rule_set, events=self.events, **kwargs)

    def async_session(self, **kwargs) -> AsyncHeaderSession:
        """Create an asynchronous session."""

        kwargs.setdefault("macro", self.macro)
        return AsyncHeaderSession(self.rule_set, events=self.events, **kwargs)

    def request(
        self,
        method: str,
        url: str,
        *,
        session_kwargs: Optional[dict] = None,
        **request_kwargs,
    ):
        """Convenience helper that opens a temporary session to perform a request."""

        session_kwargs = session_kwargs or {}
        with self.session(**session_kwargs) as session:
            return session.request(method, url, **request_kwargs)


__all__ = ["HeaderInjector"]
