# tests/fakes/fake_printer.py

from pathlib import Path
from typing import List

from printing.printer_base import Printer, PrinterError, PrinterInfo


class FakePrinter(Printer):
    def __init__(self, printers=("Office", "Lobby"), default="Office"):
        self.printers = list(printers)
        self.default = default
        self.printed = []
        self.fail_with = None
        self.list_error = None

    def print_file(self, file_path: Path, *, printer_name: str | None = None, job_name: str | None = None) -> None:
        if self.fail_with:
            raise PrinterError(self.fail_with)
        if not file_path.exists():
            raise PrinterError(f"Print file does not exist: {file_path}")
        self.printed.append(
            {
                "path": file_path,
                "printer_name": printer_name,
                "job_name": job_name,
                "content": file_path.read_bytes(),
            }
        )

    def list_printers(self) -> List[PrinterInfo]:
        if self.list_error:
            raise PrinterError(self.list_error)
        return [PrinterInfo(name=n, is_default=n == self.default) for n in self.printers]
