"""Token extraction from captured macro responses.

Two matching modes are supported:

* ``regex``: the pattern is compiled with ``re.DOTALL`` and searched in each body in
  order. The first capturing group is the token when the pattern has one, otherwise
  the whole match. Empty tokens are rejected and the search moves on.
* ``literal``: the pattern is located as a plain, case-sensitive substring and the
  token is the text that follows it, up to whitespace, ``,``, ``"``, ``}`` or ``]``.
  A match sitting at the very end of a body yields ``""`` immediately.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Sequence

from .constants import LITERAL_DELIMITERS, NON_BREAKING_SPACES, RESPONSE_SAMPLE_LENGTH
from .events import EventKind, EventPublisher
from .types import ExtractionRule, MacroResponses, MatchKind

LOGGER = logging.getLogger(__name__)

_Bodies = Sequence[tuple[int, str]]


class InvalidPatternError(ValueError):
    """Raised when a regex-mode pattern does not compile."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile ``pattern`` so that ``.`` also matches newlines."""

    try:
        return re.compile(pattern, re.DOTALL)
    except re.error as exc:
        raise InvalidPatternError(pattern, str(exc)) from exc


def is_delimiter(char: str) -> bool:
    if char in NON_BREAKING_SPACES:
        return False
    return char.isspace() or char in LITERAL_DELIMITERS


def read_token(body: str, start: int) -> str:
    """Return the characters of ``body`` from ``start`` up to the first delimiter."""

    end = start
    while end < len(body) and not is_delimiter(body[end]):
        end += 1
    return body[start:end]


def _sample(body: str) -> str:
    if not body:
        return "<empty body>"
    if len(body) > RESPONSE_SAMPLE_LENGTH:
        return body[:RESPONSE_SAMPLE_LENGTH] + "..."
    return body


class TokenExtractor:
    """Search an ordered list of macro responses for a header token."""

    def __init__(self, events: Optional[EventPublisher] = None) -> None:
        self._events = events or EventPublisher()

    def extract(
        self,
        extraction: ExtractionRule,
        responses: MacroResponses,
        *,
        header: Optional[str] = None,
    ) -> Optional[str]:
        """Return the first token found, or ``None`` when nothing usable matched."""

        compiled: Optional[re.Pattern[str]] = None
        if extraction.match_kind is MatchKind.REGEX:
            try:
                compiled = compile_pattern(extraction.pattern)
            except InvalidPatternError as exc:
                LOGGER.warning("Skipping header %r: %s", header, exc)
                self._events.error(
                    EventKind.PATTERN_INVALID,
                    f"Invalid regex pattern - {exc.reason}",
                    header=header,
                    pattern=exc.pattern,
                )
                return None

        bodies = self._usable_bodies(responses)
        if not bodies:
            self._events.info(
                EventKind.RESPONSE_MISSING_BODY,
                "No macro response with a body to extract from",
                header=header,
                responses=len(responses),
            )
            return None

        if compiled is not None:
            return self._extract_regex(compiled, bodies)
        return self._extract_literal(extraction.pattern, bodies)

    def _usable_bodies(self, responses: MacroResponses) -> _Bodies:
        bodies: list[tuple[int, str]] = []
        for position, response in enumerate(responses, start=1):
            text = response.body_as_text() if response is not None else None
            if text is None:
                LOGGER.debug("Response %d has no body, skipping", position)
                continue
            bodies.append((position, text))
        return bodies

    def _extract_regex(self, pattern: re.Pattern[str], bodies: _Bodies) -> Optional[str]:
        for position, body in bodies:
            match = pattern.search(body)
            if match is None:
                LOGGER.debug("No match in response %d; sample: %s", position, _sample(body))
                continue
            token = match.group(1) if pattern.groups else match.group(0)
            if token:
                LOGGER.debug("Matched %r in response %d", pattern.pattern, position)
                return token
        return None

    def _extract_literal(self, needle: str, bodies: _Bodies) -> Optional[str]:
        for position, body in bodies:
            index = body.find(needle)
            if index == -1:
                LOGGER.debug("Search string not found in response %d", position)
                continue
            start = index + len(needle)
            if start >= len(body):
                LOGGER.debug("Search string ends response %d, nothing to extract", position)
                return ""
            token = read_token(body, start)
            if token:
                return token
        return None


__all__ = [
    "InvalidPatternError",
    "TokenExtractor",
    "compile_pattern",
    "is_delimiter",
    "read_token",
]
