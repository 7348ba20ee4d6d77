"""Live, thread-safe holder for the header configuration."""

from __future__ import annotations

import threading
from typing import Iterable, Optional

from .config import HeaderInjectorConfig
from .constants import MAX_HEADERS
from .persistence import MemoryRuleStore, RuleStore
from .types import HeaderRule


class RuleSetManager:
    """Configuration collaborator handing out immutable snapshots per request.

    Edits swap in a new validated config under the lock, so a reader always sees one
    consistent rule set for the duration of a call.
    """

    def __init__(
        self,
        config: Optional[HeaderInjectorConfig] = None,
        *,
        store: Optional[RuleStore] = None,
    ) -> None:
        self._lock = threading.RLock()
        self.store = store or MemoryRuleStore()
        self._config = config if config is not None else self._load_or_default()

    @classmethod
    def from_store(cls, store: RuleStore) -> "RuleSetManager":
        return cls(store=store)

    # ------------------------------------------------------------------
    # RuleSetSource protocol
    # ------------------------------------------------------------------
    def get_rule_set(self) -> tuple[HeaderRule, ...]:
        with self._lock:
            return tuple(self._config.rules)

    def is_master_enabled(self) -> bool:
        with self._lock:
            return self._config.enabled

    @property
    def config(self) -> HeaderInjectorConfig:
        with self._lock:
            return self._config.model_copy(deep=True)

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------
    def set_enabled(self, enabled: bool) -> None:
        with self._lock:
            self._config = self._config.model_copy(update={"enabled": enabled})

    def add_rule(self, rule: HeaderRule) -> None:
        with self._lock:
            if len(self._config.rules) >= MAX_HEADERS:
                raise ValueError(f"Maximum of {MAX_HEADERS} headers allowed")
            self._config = self._config.model_copy(update={"rules": [*self._config.rules, rule]})

    def remove_rule(self, index: int) -> HeaderRule:
        with self._lock:
            rules = list(self._config.rules)
            removed = rules.pop(index)
            self._config = self._config.model_copy(update={"rules": rules})
            return removed

    def replace_rules(self, rules: Iterable[HeaderRule]) -> None:
        with self._lock:
            self._config = HeaderInjectorConfig.model_validate(
                {**self._config.model_dump(), "rules": list(rules)}
            )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def save(self) -> None:
        self.store.save(self.config)

    def reload(self) -> None:
        loaded = self._load_or_default()
        with self._lock:
            self._config = loaded

    def _load_or_default(self) -> HeaderInjectorConfig:
        return self.store.load() or HeaderInjectorConfig.default()


__all__ = ["RuleSetManager"]
