"""Common data types used across the header injector package."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Protocol, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

HeaderName = str
HeaderValue = str
HeaderTuple = tuple[HeaderName, HeaderValue]


class HeaderMode(str, Enum):
    """How a configured header obtains its value."""

    STATIC = "static"
    DYNAMIC = "dynamic"


class MatchKind(str, Enum):
    """How a dynamic header pattern is matched against macro responses."""

    REGEX = "regex"
    LITERAL = "literal"


class ExtractionRule(BaseModel):
    """Pattern used to pull a token out of captured response bodies."""

    model_config = ConfigDict(frozen=True)

    pattern: str
    match_kind: MatchKind = MatchKind.REGEX


class HeaderRule(BaseModel):
    """One configured header, either a fixed value or a value extracted per request."""

    model_config = ConfigDict(frozen=True)

    name: HeaderName = Field(default="", description="HTTP header field name.")
    static_value: HeaderValue = Field(
        default="",
        description="Value sent verbatim when the rule is static.",
    )
    enabled: bool = True
    mode: HeaderMode = HeaderMode.STATIC
    extraction: Optional[ExtractionRule] = None

    @model_validator(mode="after")
    def _check_extraction(self) -> "HeaderRule":
        if self.mode is HeaderMode.DYNAMIC and self.extraction is None:
            raise ValueError("dynamic header rules require an extraction pattern")
        if self.mode is HeaderMode.STATIC and self.extraction is not None:
            raise ValueError("static header rules cannot carry an extraction pattern")
        return self

    @classmethod
    def static(cls, name: str, value: str, *, enabled: bool = True) -> "HeaderRule":
        return cls(name=name, static_value=value, enabled=enabled, mode=HeaderMode.STATIC)

    @classmethod
    def dynamic(
        cls,
        name: str,
        pattern: str,
        *,
        match_kind: MatchKind = MatchKind.REGEX,
        enabled: bool = True,
    ) -> "HeaderRule":
        return cls(
            name=name,
            enabled=enabled,
            mode=HeaderMode.DYNAMIC,
            extraction=ExtractionRule(pattern=pattern, match_kind=match_kind),
        )

    @property
    def is_dynamic(self) -> bool:
        return self.mode is HeaderMode.DYNAMIC


class ResolvedHeader(BaseModel):
    """A concrete header produced by resolution, ready to be applied to a request."""

    model_config = ConfigDict(frozen=True)

    name: HeaderName
    value: HeaderValue


class HttpRequest(BaseModel):
    """Immutable view of an outgoing request.

    Header edits return a new instance; the original value is never touched.
    Header names compare case-insensitively, order and duplicates are preserved.
    """

    model_config = ConfigDict(frozen=True)

    method: str = "GET"
    url: str = ""
    headers: tuple[HeaderTuple, ...] = ()
    body: bytes = b""

    def has_header(self, name: str) -> bool:
        lowered = name.lower()
        return any(key.lower() == lowered for key, _ in self.headers)

    def header_values(self, name: str) -> list[str]:
        lowered = name.lower()
        return [value for key, value in self.headers if key.lower() == lowered]

    def without_header(self, name: str) -> "HttpRequest":
        lowered = name.lower()
        kept = tuple((key, value) for key, value in self.headers if key.lower() != lowered)
        return self.model_copy(update={"headers": kept})

    def with_header(self, name: str, value: str) -> "HttpRequest":
        return self.model_copy(update={"headers": (*self.headers, (name, value))})

    def header_map(self) -> dict[str, str]:
        """Collapse headers into a dict; the last occurrence of a name wins."""

        return {key: value for key, value in self.headers}


class CapturedResponse(BaseModel):
    """A response captured while replaying a macro."""

    model_config = ConfigDict(frozen=True)

    status_code: int = 200
    headers: tuple[HeaderTuple, ...] = ()
    body: Union[bytes, str, None] = None

    def body_as_text(self) -> Optional[str]:
        if self.body is None:
            return None
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8", errors="replace")
        return self.body


class ResponseLike(Protocol):
    """Anything exposing a text body, e.g. :class:`CapturedResponse`."""

    def body_as_text(self) -> Optional[str]:  # pragma: no cover - protocol definition
        ...


MacroResponses = Sequence[Optional[ResponseLike]]


class RuleSetSource(Protocol):
    """Supplies the rule snapshot and master toggle for one request cycle."""

    def get_rule_set(self) -> Sequence[HeaderRule]:  # pragma: no cover - protocol definition
        ...

    def is_master_enabled(self) -> bool:  # pragma: no cover - protocol definition
        ...


__all__ = [
    "CapturedResponse",
    "ExtractionRule",
    "HeaderMode",
    "HeaderRule",
    "HeaderTuple",
    "HttpRequest",
    "MacroResponses",
    "MatchKind",
    "ResolvedHeader",
    "ResponseLike",
    "RuleSetSource",
]
