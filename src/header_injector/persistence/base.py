"""Storage interface for persisted header configuration."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..config import HeaderInjectorConfig


class RuleStore(ABC):
    """Load and save a whole :class:`HeaderInjectorConfig`.

    ``save`` replaces whatever was stored before; ``load`` returns ``None`` when
    nothing has been saved yet.
    """

    @abstractmethod
    def load(self) -> Optional[HeaderInjectorConfig]:
        raise NotImplementedError

    @abstractmethod
    def save(self, config: HeaderInjectorConfig) -> None:
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError
