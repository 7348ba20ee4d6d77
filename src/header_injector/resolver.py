"""Turn configured header rules into concrete name/value pairs."""

from __future__ import annotations

from typing import Iterable, Optional

from .events import EventKind, EventPublisher
from .extractor import TokenExtractor
from .types import HeaderMode, HeaderRule, MacroResponses, ResolvedHeader


class HeaderResolver:
    """Resolve enabled rules in input order.

    Static rules resolve to their configured value, even when it is empty. Dynamic
    rules resolve through :class:`TokenExtractor` and contribute nothing when no token
    is found or when no macro responses are available.
    """

    def __init__(
        self,
        extractor: Optional[TokenExtractor] = None,
        *,
        events: Optional[EventPublisher] = None,
    ) -> None:
        self._events = events or EventPublisher()
        self._extractor = extractor or TokenExtractor(self._events)

    def resolve(
        self,
        rules: Iterable[HeaderRule],
        responses: MacroResponses = (),
    ) -> list[ResolvedHeader]:
        resolved: list[ResolvedHeader] = []
        for rule in rules:
            if not rule.enabled or not rule.name.strip():
                continue
            if rule.mode is HeaderMode.STATIC:
                resolved.append(ResolvedHeader(name=rule.name, value=rule.static_value))
                continue
            token = self._resolve_dynamic(rule, responses)
            if token is not None:
                resolved.append(ResolvedHeader(name=rule.name, value=token))
        return resolved

    def _resolve_dynamic(self, rule: HeaderRule, responses: MacroResponses) -> Optional[str]:
        if not responses or rule.extraction is None:
            return None
        token = self._extractor.extract(rule.extraction, responses, header=rule.name)
        if token is None:
            self._events.info(
                EventKind.TOKEN_NOT_FOUND,
                f"No token found for header '{rule.name}'",
                header=rule.name,
                pattern=rule.extraction.pattern,
            )
            return None
        self._events.info(
            EventKind.TOKEN_EXTRACTED,
            f"Extracted token for dynamic header '{rule.name}'",
            header=rule.name,
            match_kind=rule.extraction.match_kind.value,
            **self._events.token_payload(token),
        )
        return token


__all__ = ["HeaderResolver"]
