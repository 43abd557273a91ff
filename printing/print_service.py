"""
Drives one print job from upload to spooler.

The caller submits a job and then calls `run` on the same request thread. There
is no background queue: conversion and dispatch block their own request only.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from logging_config import get_logger
from printing.converter_base import Converter, ConversionError
from printing.formats import DocumentKind
from printing.job import DEFAULT_PRINTER, PrintJob
from printing.ledger import JobLedger
from printing.printer_base import Printer, PrinterError

logger = get_logger(__name__)


@dataclass(frozen=True)
class PrintOutcome:
    job: PrintJob

    @property
    def ok(self) -> bool:
        return self.job.error is None


def remove_quietly(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Error deleting file %s: %s", path, e)


class PrintService:
    # Grace period before deleting a printed file; the spooler may still be reading it
    CLEANUP_DELAY = 5.0  # seconds

    def __init__(
            self,
            ledger: JobLedger,
            printer: Printer,
            converters: Dict[DocumentKind, Converter],
            work_dir: Path,
            cleanup_delay: float | None = None,
    ):
        self.ledger = ledger
        self.printer = printer
        self.converters = converters
        self.work_dir = work_dir
        self.cleanup_delay = self.CLEANUP_DELAY if cleanup_delay is None else cleanup_delay

    def submit(self, filename: str, printer_name: Optional[str] = None) -> PrintJob:
        return self.ledger.submit(filename, printer_name)

    def run(self, job: PrintJob, path: Path, kind: DocumentKind) -> PrintOutcome:
        working_file = path

        if kind.needs_conversion:
            self.ledger.mark_converting(job.id)
            try:
                working_file = self._convert(path, kind)
            except ConversionError as e:
                logger.error("Job %s conversion failed: %s", job.id, e)
                remove_quietly(path)
                return PrintOutcome(self.ledger.mark_failed(job.id, str(e)))
            except Exception as e:
                logger.exception("Job %s conversion crashed", job.id)
                remove_quietly(path)
                return PrintOutcome(self.ledger.mark_failed(job.id, f"Conversion failed: {e}"))
            if working_file != path:
                remove_quietly(path)

        self.ledger.mark_printing(job.id)
        try:
            self.printer.print_file(
                working_file,
                printer_name=None if job.printer_name == DEFAULT_PRINTER else job.printer_name,
                job_name=job.filename,
            )
        except PrinterError as e:
            logger.error("Job %s print failed: %s", job.id, e)
            remove_quietly(working_file)
            return PrintOutcome(self.ledger.mark_failed(job.id, str(e)))
        except Exception as e:
            logger.exception("Job %s dispatch crashed", job.id)
            remove_quietly(working_file)
            return PrintOutcome(self.ledger.mark_failed(job.id, str(e)))

        finished = self.ledger.mark_completed(job.id)
        self._schedule_cleanup(working_file)
        return PrintOutcome(finished)

    def _convert(self, path: Path, kind: DocumentKind) -> Path:
        converter = self.converters.get(kind)
        if converter is None:
            raise ConversionError(f"No converter configured for {kind.value} documents")
        return converter.convert(path, self.work_dir)

    def _schedule_cleanup(self, path: Path) -> None:
        if self.cleanup_delay <= 0:
            remove_quietly(path)
            return
        timer = threading.Timer(self.cleanup_delay, remove_quietly, args=(path,))
        timer.daemon = True
        timer.start()
