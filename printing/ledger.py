"""
Job ledger

Single authoritative owner of print job records.

- Every read and write goes through this object under one lock
- Callers get snapshots, never the live records
- The backing list is unbounded; listings only show the most recent jobs
"""

import threading
from typing import Callable, List, Optional

from logging_config import get_logger
from printing.job import DEFAULT_PRINTER, PrintJob

logger = get_logger(__name__)


class JobLedger:
    def __init__(self):
        self._lock = threading.Lock()
        self._jobs: List[PrintJob] = []

    # ---------- Public API ----------

    def submit(self, filename: str, printer_name: Optional[str] = None) -> PrintJob:
        job = PrintJob(filename=filename, printer_name=printer_name or DEFAULT_PRINTER)
        with self._lock:
            self._jobs.append(job)
        logger.info("Job %s accepted: %s -> %s", job.id, job.filename, job.printer_name)
        return job.snapshot()

    def get(self, job_id: str) -> Optional[PrintJob]:
        with self._lock:
            job = self._find(job_id)
            return job.snapshot() if job else None

    def list(self, limit: int = 50) -> List[PrintJob]:
        """Most recent `limit` jobs, newest first."""
        if limit <= 0:
            return []
        with self._lock:
            recent = self._jobs[-limit:]
            return [job.snapshot() for job in reversed(recent)]

    def clear_terminal(self) -> int:
        with self._lock:
            before = len(self._jobs)
            self._jobs = [job for job in self._jobs if not job.status.is_terminal]
            removed = before - len(self._jobs)
        logger.info("Cleared %d finished job(s)", removed)
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    # ---------- Transitions ----------

    def mark_converting(self, job_id: str) -> PrintJob:
        return self._apply(job_id, lambda job: job.start_converting())

    def mark_printing(self, job_id: str) -> PrintJob:
        return self._apply(job_id, lambda job: job.start_printing())

    def mark_completed(self, job_id: str) -> PrintJob:
        return self._apply(job_id, lambda job: job.complete())

    def mark_failed(self, job_id: str, error: str) -> PrintJob:
        return self._apply(job_id, lambda job: job.fail(error))

    # ---------- Internal helpers ----------

    def _find(self, job_id: str) -> Optional[PrintJob]:
        for job in reversed(self._jobs):
            if job.id == job_id:
                return job
        return None

    def _apply(self, job_id: str, action: Callable[[PrintJob], None]) -> PrintJob:
        with self._lock:
            job = self._find(job_id)
            if job is None:
                raise KeyError(job_id)
            action(job)
            logger.info("Job %s is now %s", job.id, job.status.value)
            return job.snapshot()
