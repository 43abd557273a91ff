# printing/printer_base.py

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List


class PrinterError(RuntimeError):
    """Raised when the print subsystem cannot accept a job or list its devices."""


@dataclass(frozen=True)
class PrinterInfo:
    name: str
    is_default: bool = False

    def to_dict(self) -> dict:
        return {"name": self.name, "isDefault": self.is_default}


class Printer(ABC):
    """
    Abstract print dispatcher.

    The print service owns job state and error handling. Concrete implementations
    talk to a spooler (CUPS, etc). The spooler is a black box: a call either
    succeeds or raises PrinterError.
    """

    @abstractmethod
    def print_file(self, file_path: Path, *, printer_name: str | None = None, job_name: str | None = None) -> None:
        """
        Submit `file_path` to `printer_name`, or to the system default when None.

        Implementations should raise PrinterError on failure.
        """
        raise NotImplementedError

    @abstractmethod
    def list_printers(self) -> List[PrinterInfo]:
        """Return the devices the spooler knows about."""
        raise NotImplementedError
