"""Configuration models for the header injector."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from .constants import DEFAULT_HEADER_NAME, DEFAULT_HEADER_VALUE, MAX_HEADERS
from .types import HeaderRule


class EventConfig(BaseModel):
    """Controls which engine events reach the sinks."""

    enabled: bool = True
    include_values: bool = Field(
        default=False,
        description="Attach extracted token values to event payloads (tokens are usually secrets).",
    )


class MacroRequest(BaseModel):
    """A preparatory request replayed before the real one to capture fresh tokens."""

    method: str = "GET"
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    content: Optional[str] = None


class HeaderInjectorConfig(BaseModel):
    """Top-level configuration object for the package."""

    enabled: bool = Field(
        default=True,
        description="Master toggle; when off both static and dynamic paths pass requests through.",
    )
    rules: list[HeaderRule] = Field(default_factory=list, max_length=MAX_HEADERS)
    macro: list[MacroRequest] = Field(
        default_factory=list,
        description="Requests replayed, in order, to collect responses for dynamic headers.",
    )
    events: EventConfig = Field(default_factory=EventConfig)

    @classmethod
    def default(cls) -> "HeaderInjectorConfig":
        """Return the first-run configuration with a single example header."""

        return cls(rules=[HeaderRule.static(DEFAULT_HEADER_NAME, DEFAULT_HEADER_VALUE)])

    def get_rule_set(self) -> tuple[HeaderRule, ...]:
        return tuple(self.rules)

    def is_master_enabled(self) -> bool:
        return self.enabled


__all__ = [
    "EventConfig",
    "HeaderInjectorConfig",
    "MacroRequest",
]
