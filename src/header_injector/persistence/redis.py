"""Redis-backed rule storage."""

from __future__ import annotations

from typing import Optional

try:
    import redis
except ImportError:  # pragma: no cover - optional dependency
    redis = None

from ..config import HeaderInjectorConfig
from ..constants import DEFAULT_NAMESPACE
from .base import RuleStore


class RedisRuleStore(RuleStore):
    """Rule storage backed by a single Redis string key per namespace."""

    def __init__(self, dsn: str = "redis://localhost:6379/0", *, namespace: str = DEFAULT_NAMESPACE) -> None:
        if redis is None:
            raise RuntimeError("redis-py is required for RedisRuleStore")
        self._redis = redis.Redis.from_url(dsn)
        self._key = f"{namespace}:config"

    def load(self) -> Optional[HeaderInjectorConfig]:
        payload = self._redis.get(self._key)
        if payload is None:
            return None
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")
        return HeaderInjectorConfig.model_validate_json(payload)

    def save(self, config: HeaderInjectorConfig) -> None:
        self._redis.set(self._key, config.model_dump_json())

    def clear(self) -> None:
        self._redis.delete(self._key)


__all__ = ["RedisRuleStore"]
