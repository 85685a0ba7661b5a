"""Periodic sweeps.

Every worker may start a scheduler; each run first claims its
``(job, interval)`` row in ``job_runs`` so only one worker does the work.

Guardrails:
- SCHEDULER_ENABLED setting
- coalesce=True, max_instances=1
- auto check-out keyed per minute, the daily jobs keyed per day
"""
from __future__ import annotations

import logging
import os
import socket
from datetime import timedelta
from typing import Any, Callable, Mapping, Optional

from apscheduler.schedulers.background import BackgroundScheduler

from ..attendance.service import AttendanceReconciler
from ..common.clock import Clock
from ..payroll.service import PayrollEngine
from ..shifts.service import ShiftCatalog
from .lock import JobLockRepository

logger = logging.getLogger(__name__)

AUTO_CHECKOUT_JOB = "auto_checkout"
ABSENT_SWEEP_JOB = "absent_sweep"
PAYROLL_JOB = "daily_payroll"
ASSIGNMENT_PURGE_JOB = "assignment_purge"


def default_worker_id() -> str:
    return f"{socket.gethostname()}:{os.getpid()}"


class SweepScheduler:
    def __init__(
        self,
        *,
        attendance: AttendanceReconciler,
        payroll: PayrollEngine,
        catalog: ShiftCatalog,
        locks: JobLockRepository,
        clock: Clock,
        settings: Mapping[str, Any],
        worker_id: Optional[str] = None,
    ):
        self._attendance = attendance
        self._payroll = payroll
        self._catalog = catalog
        self._locks = locks
        self._clock = clock
        self._settings = settings
        self._worker_id = worker_id or default_worker_id()
        self._scheduler: Optional[BackgroundScheduler] = None

    def _claimed(self, job_name: str, period_key: str) -> bool:
        claimed = self._locks.claim(job_name, period_key, worker=self._worker_id, claimed_at=self._clock.now())
        if not claimed:
            logger.debug("%s for %s already claimed by another worker", job_name, period_key)
        return claimed

    def _guarded(self, job_name: str, period_key: str, work: Callable[[], Any]) -> bool:
        if not self._claimed(job_name, period_key):
            return False
        try:
            work()
        except Exception:
            logger.exception("%s for %s failed", job_name, period_key)
        return True

    # ---- jobs

    def run_auto_checkout(self) -> bool:
        now = self._clock.now()
        return self._guarded(
            AUTO_CHECKOUT_JOB,
            now.strftime("%Y-%m-%dT%H:%M"),
            lambda: self._attendance.auto_checkout_sweep(now),
        )

    def run_absent_sweep(self) -> bool:
        now = self._clock.now()

        def sweep():
            # yesterday too, in case the last run was missed
            for day in (now.date() - timedelta(days=1), now.date()):
                self._attendance.absent_sweep(now, work_date=day)

        return self._guarded(ABSENT_SWEEP_JOB, now.date().isoformat(), sweep)

    def run_payroll(self) -> bool:
        today = self._clock.now().date()
        return self._guarded(PAYROLL_JOB, today.isoformat(), lambda: self._payroll.run_for_all(today))

    def run_assignment_purge(self) -> bool:
        today = self._clock.now().date()
        return self._guarded(ASSIGNMENT_PURGE_JOB, today.isoformat(), lambda: self._catalog.purge_expired(today))

    # ---- lifecycle

    def start(self) -> None:
        s = self._settings
        if not s.get("SCHEDULER_ENABLED", False):
            logger.info("Scheduler disabled (SCHEDULER_ENABLED is off)")
            return

        common = {"coalesce": True, "max_instances": 1, "replace_existing": True}
        scheduler = BackgroundScheduler(timezone=s.get("TIMEZONE") or None)
        scheduler.add_job(
            self.run_auto_checkout,
            "interval",
            seconds=int(s.get("AUTO_CHECKOUT_INTERVAL_SECONDS", 60)),
            id=AUTO_CHECKOUT_JOB,
            **common,
        )
        scheduler.add_job(
            self.run_absent_sweep,
            "cron",
            hour=int(s.get("ABSENT_SWEEP_HOUR", 23)),
            minute=int(s.get("ABSENT_SWEEP_MINUTE", 55)),
            id=ABSENT_SWEEP_JOB,
            misfire_grace_time=3600,
            **common,
        )
        scheduler.add_job(
            self.run_payroll,
            "cron",
            hour=int(s.get("PAYROLL_HOUR", 23)),
            minute=int(s.get("PAYROLL_MINUTE", 58)),
            id=PAYROLL_JOB,
            misfire_grace_time=3600,
            **common,
        )
        scheduler.add_job(
            self.run_assignment_purge,
            "cron",
            hour=int(s.get("ASSIGNMENT_PURGE_HOUR", 0)),
            minute=int(s.get("ASSIGNMENT_PURGE_MINUTE", 5)),
            id=ASSIGNMENT_PURGE_JOB,
            misfire_grace_time=3600,
            **common,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info("Scheduler started on %s", self._worker_id)

    def shutdown(self) -> None:
        if self._scheduler and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Scheduler stopped")
        self._scheduler = None

    @property
    def running(self) -> bool:
        return bool(self._scheduler and self._scheduler.running)
