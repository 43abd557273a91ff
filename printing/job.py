"""
Print job model.

One record per accepted document. Status only moves forward:

    pending -> [converting] -> printing -> completed | error

A job may also fail straight from pending or converting, but nothing leaves
completed or error.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, UTC
from enum import Enum
from typing import Any, Dict, Optional

DEFAULT_PRINTER = "default"


class JobStatus(Enum):
    PENDING = "pending"
    CONVERTING = "converting"
    PRINTING = "printing"
    COMPLETED = "completed"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.ERROR)


ALLOWED_TRANSITIONS = {
    JobStatus.PENDING: {JobStatus.CONVERTING, JobStatus.PRINTING, JobStatus.ERROR},
    JobStatus.CONVERTING: {JobStatus.PRINTING, JobStatus.ERROR},
    JobStatus.PRINTING: {JobStatus.COMPLETED, JobStatus.ERROR},
    JobStatus.COMPLETED: set(),
    JobStatus.ERROR: set(),
}


class InvalidTransition(ValueError):
    pass


@dataclass
class PrintJob:
    filename: str
    printer_name: str = DEFAULT_PRINTER
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: JobStatus = JobStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    completed_at: Optional[datetime] = None
    error: Optional[str] = None

    def _move_to(self, status: JobStatus) -> None:
        if status not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidTransition(
                f"Job {self.id} cannot move from {self.status.value} to {status.value}"
            )
        self.status = status

    def start_converting(self) -> None:
        self._move_to(JobStatus.CONVERTING)

    def start_printing(self) -> None:
        self._move_to(JobStatus.PRINTING)

    def complete(self) -> None:
        self._move_to(JobStatus.COMPLETED)
        self.completed_at = datetime.now(UTC)

    def fail(self, error: str) -> None:
        self._move_to(JobStatus.ERROR)
        self.error = error

    def snapshot(self) -> "PrintJob":
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "filename": self.filename,
            "printer": self.printer_name,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(),
            "completedAt": self.completed_at.isoformat() if self.completed_at else None,
            "error": self.error,
        }
