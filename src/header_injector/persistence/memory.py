"""In-memory rule storage."""

from __future__ import annotations

import threading
from typing import Optional

from ..config import HeaderInjectorConfig
from .base import RuleStore


class MemoryRuleStore(RuleStore):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._payload: Optional[str] = None

    def load(self) -> Optional[HeaderInjectorConfig]:
        with self._lock:
            payload = self._payload
        if payload is None:
            return None
        return HeaderInjectorConfig.model_validate_json(payload)

    def save(self, config: HeaderInjectorConfig) -> None:
        payload = config.model_dump_json()
        with self._lock:
            self._payload = payload

    def clear(self) -> None:
        with self._lock:
            self._payload = None


__all__ = ["MemoryRuleStore"]
