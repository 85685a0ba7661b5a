from __future__ import annotations

import logging
from datetime import datetime
from typing import Protocol

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor

logger = logging.getLogger(__name__)


class JobLockRepository(Protocol):
    def claim(self, job_name: str, period_key: str, *, worker: str, claimed_at: datetime) -> bool:
        """True for exactly one caller per (job_name, period_key)."""

        raise NotImplementedError


class MySQLJobLockRepository(JobLockRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def claim(self, job_name: str, period_key: str, *, worker: str, claimed_at: datetime) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO job_runs (job_name, period_key, worker, claimed_at) VALUES (%s,%s,%s,%s)",
                    (job_name, period_key, worker, claimed_at),
                )
        except ConflictError:
            return False
        return True
