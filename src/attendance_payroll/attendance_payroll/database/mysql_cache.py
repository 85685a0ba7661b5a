from __future__ import annotations

import json
from datetime import datetime, timedelta
from typing import Any, Optional

from ..common.cache import KeyedCache
from .connection import DatabaseConnection
from .mysql_base import db_cursor, fetchone


class MySQLKeyValueCache(KeyedCache):
    """KeyedCache stored in ``cache_entries`` so all workers see the same values.

    Values must be JSON serializable.
    """

    def __init__(self, conn_factory: DatabaseConnection, *, namespace: str = ""):
        self._conn_factory = conn_factory
        self._namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}" if self._namespace else key

    def get(self, key: str) -> Optional[Any]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT cache_value FROM cache_entries WHERE cache_key=%s AND expires_at > %s",
                (self._key(key), datetime.now()),
            )
            row = fetchone(cur)
            return json.loads(row["cache_value"]) if row else None

    def set(self, key: str, value: Any, *, ttl_seconds: int) -> None:
        expires_at = datetime.now() + timedelta(seconds=int(ttl_seconds))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO cache_entries (cache_key, cache_value, expires_at)
                VALUES (%s, %s, %s)
                ON DUPLICATE KEY UPDATE cache_value=VALUES(cache_value), expires_at=VALUES(expires_at)
                """,
                (self._key(key), json.dumps(value), expires_at),
            )

    def delete(self, key: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM cache_entries WHERE cache_key=%s", (self._key(key),))
