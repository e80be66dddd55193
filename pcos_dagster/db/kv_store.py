from __future__ import annotations

import logging
from typing import Protocol

import duckdb

from pcos_dagster.db.bootstrap import ensure_core_schemas, ensure_kv_store, now_utc

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """String blobs by key. Injected wherever reports or sessions are persisted."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)


class DuckDBKeyValueStore:
    """Store backed by ``main_app.kv_store`` in a DuckDB database.

    The caller owns the connection and closes it.
    """

    def __init__(self, con: duckdb.DuckDBPyConnection):
        self._con = con
        ensure_core_schemas(con)
        ensure_kv_store(con)

    def get(self, key: str) -> str | None:
        row = self._con.execute(
            "SELECT value FROM main_app.kv_store WHERE key = ?", [key]
        ).fetchone()
        logger.debug("kv get %s (%s)", key, "hit" if row else "miss")
        return None if row is None else row[0]

    def set(self, key: str, value: str) -> None:
        self._con.execute(
            "INSERT OR REPLACE INTO main_app.kv_store (key, value, updated_at) VALUES (?, ?, ?)",
            [key, value, now_utc()],
        )
        logger.debug("kv set %s (%d bytes)", key, len(value))

    def delete(self, key: str) -> None:
        self._con.execute("DELETE FROM main_app.kv_store WHERE key = ?", [key])
        logger.debug("kv delete %s", key)
