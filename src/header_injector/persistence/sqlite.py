"""SQLite persistence for sharing header configuration across processes."""

from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from ..config import HeaderInjectorConfig
from ..constants import DEFAULT_NAMESPACE
from .base import RuleStore


_SCHEMA = """
CREATE TABLE IF NOT EXISTS rule_sets (
    namespace TEXT PRIMARY KEY,
    config_json TEXT NOT NULL
);
"""


class SQLiteRuleStore(RuleStore):
    def __init__(self, path: str | Path = ":memory:", *, namespace: str = DEFAULT_NAMESPACE) -> None:
        self._lock = threading.RLock()
        self._namespace = namespace
        self._path, self._conn_kwargs = self._normalize_path(path)
        # Keeps a shared in-memory database alive for the lifetime of the store.
        self._keepalive: Optional[sqlite3.Connection] = None
        if self._conn_kwargs.get("uri"):
            self._keepalive = sqlite3.connect(self._path, **self._conn_kwargs)
        with self._connection() as conn:
            conn.executescript(_SCHEMA)

    def _normalize_path(self, path: str | Path) -> tuple[str, dict[str, object]]:
        path_str = str(path)
        kwargs: dict[str, object] = {"check_same_thread": False}
        if path_str == ":memory:":
            path_str = f"file:{self._namespace}_mem_{id(self)}?mode=memory&cache=shared"
            kwargs["uri"] = True
        return path_str, kwargs

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            conn = sqlite3.connect(self._path, **self._conn_kwargs)
            try:
                with conn:
                    yield conn
            finally:
                conn.close()

    def load(self) -> Optional[HeaderInjectorConfig]:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT config_json FROM rule_sets WHERE namespace = ?",
                (self._namespace,),
            ).fetchone()
        if row is None:
            return None
        return HeaderInjectorConfig.model_validate_json(row[0])

    def save(self, config: HeaderInjectorConfig) -> None:
        with self._connection() as conn:
            conn.execute(
                "REPLACE INTO rule_sets(namespace, config_json) VALUES(?, ?)",
                (self._namespace, config.model_dump_json()),
            )

    def clear(self) -> None:
        with self._connection() as conn:
            conn.execute("DELETE FROM rule_sets WHERE namespace = ?", (self._namespace,))

    def close(self) -> None:
        if self._keepalive is not None:
            self._keepalive.close()
            self._keepalive = None


__all__ = ["SQLiteRuleStore"]
