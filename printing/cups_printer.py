# printing/cups_printer.py

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from logging_config import get_logger
from printing.printer_base import Printer, PrinterError, PrinterInfo

logger = get_logger(__name__)

DEFAULT_DESTINATION_PREFIX = "system default destination:"


class CupsPrinter(Printer):
    """
    CUPS-backed dispatcher using the `lp` and `lpstat` commands.

    Design constraints (intentional):
    - Fire-and-forget submission only; CUPS owns the spool after `lp` returns.
    - Prints an existing PDF. No rendering here.
    - Queue configuration happens in CUPS.
    """

    def __init__(
            self,
            lp_path: str = "lp",
            lpstat_path: str = "lpstat",
            extra_args: Optional[Sequence[str]] = None,
            timeout: float = 30,
    ) -> None:
        self._lp_path = lp_path
        self._lpstat_path = lpstat_path
        self._extra_args = list(extra_args or [])
        self._timeout = timeout

    def _validate(self, binary: str) -> None:
        if shutil.which(binary) is None:
            raise PrinterError(f"CUPS not available: '{binary}' not found in PATH")

    def preflight(self) -> None:
        self._validate(self._lp_path)

    def print_file(self, file_path: Path, *, printer_name: str | None = None, job_name: str | None = None) -> None:
        self._validate(self._lp_path)

        if not file_path.exists():
            raise PrinterError(f"Print file does not exist: {file_path}")
        if not file_path.is_file():
            raise PrinterError(f"Print path is not a file: {file_path}")

        cmd = [self._lp_path]
        if printer_name:
            cmd += ["-d", printer_name]
        cmd += [
            "-t", job_name or file_path.name,
            *self._extra_args,
            str(file_path),
        ]

        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise PrinterError(f"lp timed out after {self._timeout}s") from e

        if proc.returncode != 0:
            out = (proc.stdout or "") + (proc.stderr or "")
            raise PrinterError(f"lp failed (rc={proc.returncode}): {out.strip()}")

        logger.info("Submitted %s to %s: %s", file_path.name, printer_name or "default", (proc.stdout or "").strip())

    def list_printers(self) -> List[PrinterInfo]:
        self._validate(self._lpstat_path)

        names = self._lpstat(["-e"]).splitlines()
        default = None
        try:
            for line in self._lpstat(["-d"]).splitlines():
                if line.startswith(DEFAULT_DESTINATION_PREFIX):
                    default = line[len(DEFAULT_DESTINATION_PREFIX):].strip()
        except PrinterError:
            # No default destination is not an error for listing purposes
            logger.debug("lpstat -d reported no default destination")

        return [
            PrinterInfo(name=name.strip(), is_default=name.strip() == default)
            for name in names
            if name.strip()
        ]

    def _lpstat(self, args: List[str]) -> str:
        try:
            proc = subprocess.run(
                [self._lpstat_path, *args],
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise PrinterError("lpstat timed out") from e

        if proc.returncode != 0:
            raise PrinterError(f"lpstat failed (rc={proc.returncode}): {(proc.stderr or '').strip()}")
        return proc.stdout or ""
