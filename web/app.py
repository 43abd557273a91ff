"""
Flask application for the print and file-transfer API.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import Dict, Optional

from flask import Flask, Response, jsonify, request, send_file, url_for
from werkzeug.datastructures import FileStorage
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from config import VERSION, get_config
from logging_config import get_logger
from printing.converter_base import Converter
from printing.cups_printer import CupsPrinter
from printing.formats import ACCEPTED_DESCRIPTION, DocumentKind, detect_kind
from printing.image_converter import ImageConverter
from printing.ledger import JobLedger
from printing.libreoffice_converter import LibreOfficeConverter
from printing.print_service import PrintService, remove_quietly
from printing.printer_base import Printer, PrinterError
from transfer.codes import is_valid_code
from transfer.entry import IncomingFile
from transfer.errors import (
    ArchiveError,
    InvalidTransferRequest,
    PayloadTooLarge,
    TransferError,
    TransferNotFound,
)
from transfer.qr import render_code_qr_png
from transfer.store import TransferStore
from transfer.sweeper import SweepWorker

logger = get_logger(__name__)

TRUTHY = {"1", "true", "yes", "on"}


def _error(message: str, status: int, **extra):
    return jsonify({"success": False, "error": message, **extra}), status


def _display_name(filename: str | None, fallback: str) -> str:
    # Some browsers send the full client path; keep only the last segment
    name = PurePosixPath((filename or "").replace("\\", "/")).name
    return name or fallback


def _first_list(source, *names):
    for name in names:
        values = source.getlist(name)
        if values:
            return values
    return []


def create_app(
        config_overrides: Optional[dict] = None,
        printer: Optional[Printer] = None,
        converters: Optional[Dict[DocumentKind, Converter]] = None,
):
    app = Flask(__name__)
    app.config.from_object(get_config())
    if config_overrides:
        app.config.update(config_overrides)

    upload_dir = Path(app.config["UPLOAD_FOLDER"])
    upload_dir.mkdir(parents=True, exist_ok=True)

    if printer is None:
        printer = CupsPrinter(
            lp_path=app.config["LP_PATH"],
            lpstat_path=app.config["LPSTAT_PATH"],
        )
    if converters is None:
        office = LibreOfficeConverter(
            soffice_path=app.config["SOFFICE_PATH"] or None,
            timeout=app.config["CONVERSION_TIMEOUT"],
        )
        logger.info("LibreOffice path: %s", office.soffice_path)
        converters = {
            DocumentKind.OFFICE: office,
            DocumentKind.IMAGE: ImageConverter(),
        }

    ledger = JobLedger()
    print_service = PrintService(
        ledger=ledger,
        printer=printer,
        converters=converters,
        work_dir=upload_dir,
        cleanup_delay=app.config["PRINT_CLEANUP_DELAY"],
    )
    store = TransferStore(
        root=Path(app.config["TRANSFER_FOLDER"]),
        max_file_size=app.config["TRANSFER_MAX_FILE_SIZE"],
        max_batch_size=app.config["TRANSFER_MAX_BATCH_SIZE"],
    )
    sweeper = SweepWorker(
        store,
        interval=app.config["TRANSFER_SWEEP_INTERVAL"],
        max_age=app.config["TRANSFER_MAX_AGE"],
    )
    if app.config["TRANSFER_SWEEP_ENABLED"]:
        sweeper.start()

    app.ledger = ledger
    app.print_service = print_service
    app.transfer_store = store
    app.sweeper = sweeper

    _register_error_handlers(app)
    _register_print_routes(app, print_service, upload_dir)
    _register_transfer_routes(app, store)

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({
            "status": "online",
            "version": VERSION,
            "jobs": len(ledger),
            "transfers": len(store),
            "sweeper": sweeper.is_running(),
        })

    return app


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(TransferNotFound)
    def transfer_not_found(e):
        return _error(str(e), 404)

    @app.errorhandler(InvalidTransferRequest)
    def invalid_transfer(e):
        return _error(str(e), 400)

    @app.errorhandler(PayloadTooLarge)
    def transfer_too_large(e):
        return _error(str(e), 413)

    @app.errorhandler(ArchiveError)
    def archive_failed(e):
        logger.error("Archive failed: %s", e)
        return _error("Failed to create archive", 500)

    @app.errorhandler(TransferError)
    def transfer_failed(e):
        logger.error("Transfer failed: %s", e)
        return _error(str(e), 500)

    @app.errorhandler(RequestEntityTooLarge)
    def request_too_large(_e):
        return _error("File size exceeds the limit", 413)

    @app.errorhandler(Exception)
    def unexpected(e):
        if isinstance(e, HTTPException):
            return _error(e.description or e.name, e.code or 500)
        logger.exception("Server error")
        return _error("Internal server error", 500)


def _register_print_routes(app: Flask, print_service: PrintService, upload_dir: Path) -> None:
    ledger = print_service.ledger

    @app.route("/api/printers", methods=["GET"])
    def list_printers():
        try:
            printers = print_service.printer.list_printers()
        except PrinterError as e:
            logger.error("Error getting printers: %s", e)
            return _error("Unable to list printers", 500)
        return jsonify({"printers": [p.to_dict() for p in printers]})

    @app.route("/api/queue", methods=["GET"])
    def queue():
        jobs = ledger.list(app.config["QUEUE_VIEW_LIMIT"])
        return jsonify({"queue": [job.to_dict() for job in jobs]})

    @app.route("/api/queue/completed", methods=["DELETE"])
    def clear_completed():
        return jsonify({"success": True, "removed": ledger.clear_terminal()})

    @app.route("/api/print", methods=["POST"])
    def print_document():
        upload: FileStorage | None = request.files.get("document")
        if upload is None or not upload.filename:
            return _error(f"Please upload a file ({ACCEPTED_DESCRIPTION})", 400)

        kind = detect_kind(upload.filename, upload.mimetype)
        if kind is None:
            return _error(f"Only {ACCEPTED_DESCRIPTION} are accepted", 400)

        max_size = app.config["PRINT_MAX_FILE_SIZE"]
        if request.content_length and request.content_length > max_size + 1024 * 1024:
            return _error("File size exceeds the limit", 400)

        display_name = _display_name(upload.filename, "document")
        suffix = PurePosixPath(display_name).suffix[:16]
        path = upload_dir / f"{int(datetime.now().timestamp() * 1000)}-{uuid.uuid4()}{suffix}"
        upload.save(path)

        if path.stat().st_size > max_size:
            remove_quietly(path)
            return _error("File size exceeds the limit", 400)

        printer_name = (request.form.get("printer") or "").strip() or None
        job = print_service.submit(display_name, printer_name)
        outcome = print_service.run(job, path, kind)

        if not outcome.ok:
            return _error(f"Print failed: {outcome.job.error}", 500, job=outcome.job.to_dict())

        return jsonify({
            "success": True,
            "message": f'"{display_name}" was sent to the printer',
            "job": outcome.job.to_dict(),
        })


def _register_transfer_routes(app: Flask, store: TransferStore) -> None:
    def require_code(code: str) -> None:
        if not is_valid_code(code):
            raise InvalidTransferRequest("Invalid code: expected 6 digits")

    def save_incoming(upload: FileStorage, relative_path: Optional[str] = None) -> IncomingFile:
        display_name = _display_name(upload.filename, "file")
        path = store.new_upload_path(display_name)
        upload.save(path)
        return IncomingFile(path=path, display_name=display_name, relative_path=relative_path)

    @app.route("/api/transfer/upload", methods=["POST"])
    def transfer_upload():
        upload: FileStorage | None = request.files.get("file")
        if upload is None or not upload.filename:
            return _error("Please upload a file", 400)

        entry = store.ingest_single(save_incoming(upload))
        return jsonify({
            "success": True,
            "code": entry.code,
            "filename": entry.label,
            "size": entry.total_size_bytes,
        })

    @app.route("/api/transfer/upload-batch", methods=["POST"])
    def transfer_upload_batch():
        uploads = [f for f in _first_list(request.files, "files", "files[]") if f and f.filename]
        if not uploads:
            return _error("Please upload at least one file", 400)

        relative_paths = _first_list(request.form, "relativePaths", "relativePaths[]")
        zip_requested = (request.form.get("createZip") or "").strip().lower() in TRUTHY
        folder_name = request.form.get("folderName") or None

        incoming = []
        try:
            for i, upload in enumerate(uploads):
                relative_path = relative_paths[i] if i < len(relative_paths) else None
                incoming.append(save_incoming(upload, relative_path))
        except OSError:
            store.discard(incoming)
            raise

        entry = store.ingest_batch(incoming, zip_requested=zip_requested, folder_name=folder_name)
        body = {
            "success": True,
            "code": entry.code,
            "files": [{"name": f.display_name, "size": f.size_bytes} for f in entry.files],
            "totalSize": entry.total_size_bytes,
            "fileCount": entry.file_count,
            "isZipped": entry.is_zipped,
        }
        if entry.is_zipped:
            body["originalFileCount"] = entry.original_file_count
        return jsonify(body)

    @app.route("/api/transfer/list", methods=["GET"])
    def transfer_list():
        return jsonify({"files": store.list()})

    @app.route("/api/transfer/info/<code>", methods=["GET"])
    def transfer_info(code: str):
        require_code(code)
        return jsonify(store.info(code))

    @app.route("/api/transfer/download/<code>", methods=["GET"])
    @app.route("/api/transfer/download/<code>/<int:index>", methods=["GET"])
    def transfer_download(code: str, index: Optional[int] = None):
        require_code(code)
        path, stored = store.resolve(code, index)
        return send_file(path, as_attachment=True, download_name=stored.display_name)

    @app.route("/api/transfer/delete/<code>", methods=["DELETE"])
    def transfer_delete(code: str):
        require_code(code)
        store.delete(code)
        return jsonify({"success": True, "message": "File deleted"})

    @app.route("/api/transfer/qr/<code>", methods=["GET"])
    def transfer_qr(code: str):
        require_code(code)
        store.info(code)
        url = url_for("transfer_download", code=code, _external=True)
        return Response(render_code_qr_png(url=url, size=app.config["QR_SIZE"]), mimetype="image/png")
