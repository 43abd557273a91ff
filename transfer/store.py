"""
Transfer store

Single authoritative owner of shared-file entries, keyed by 6-digit code.

Goals:
- Code issuance and insertion happen in one step under the lock, so live codes never collide
- Oversized or failed uploads leave nothing behind on disk
- Downloads check the file is really there and prune the record when it is not
- Disk deletion never runs while the lock is held
"""
from __future__ import annotations

import shutil
import threading
import uuid
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from logging_config import get_logger
from transfer.archiver import pack
from transfer.codes import issue_code
from transfer.entry import IncomingFile, StoredFile, TransferEntry, safe_relative_path
from transfer.errors import (
    ArchiveError,
    InvalidTransferRequest,
    PayloadTooLarge,
    TransferError,
    TransferNotFound,
)

logger = get_logger(__name__)

DEFAULT_FOLDER_NAME = "files"


def _format_size(size: int) -> str:
    for unit in ("B", "KiB", "MiB", "GiB"):
        if size < 1024 or unit == "GiB":
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size} B"


class TransferStore:
    MAX_FILE_SIZE = 100 * 1024 * 1024
    MAX_BATCH_SIZE = 10 * 1024 * 1024 * 1024

    def __init__(
            self,
            root: Path,
            max_file_size: int | None = None,
            max_batch_size: int | None = None,
    ):
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)
        self.max_file_size = max_file_size or self.MAX_FILE_SIZE
        self.max_batch_size = max_batch_size or self.MAX_BATCH_SIZE

        self._lock = threading.Lock()
        self._entries: Dict[str, TransferEntry] = {}

    # ---------- Ingestion ----------

    def new_upload_path(self, original_name: str) -> Path:
        """Where the HTTP layer should write an incoming upload."""
        suffix = Path(original_name).suffix[:16]
        return self.root / f"{int(datetime.now().timestamp() * 1000)}-{uuid.uuid4()}{suffix}"

    def ingest_single(self, incoming: IncomingFile) -> TransferEntry:
        sizes = self._measure([incoming])
        if sizes[0] > self.max_file_size:
            self.discard([incoming])
            raise PayloadTooLarge(
                f"File exceeds the {_format_size(self.max_file_size)} limit"
            )

        stored = [self._adopt(incoming, sizes[0])]
        return self._register(stored, label=incoming.display_name)

    def ingest_batch(
            self,
            incoming: Sequence[IncomingFile],
            zip_requested: bool = False,
            folder_name: Optional[str] = None,
    ) -> TransferEntry:
        if not incoming:
            raise InvalidTransferRequest("No files uploaded")

        sizes = self._measure(incoming)
        total = sum(sizes)
        if total > self.max_batch_size:
            self.discard(incoming)
            raise PayloadTooLarge(
                f"Batch of {_format_size(total)} exceeds the {_format_size(self.max_batch_size)} limit"
            )

        folder = self._folder_name(incoming, folder_name)

        if zip_requested and len(incoming) > 1:
            archive = self._zip(incoming, folder)
            return self._register(
                [archive],
                label=archive.display_name,
                is_zipped=True,
                original_file_count=len(incoming),
            )

        stored = [self._adopt(item, size) for item, size in zip(incoming, sizes)]
        label = folder if len(stored) > 1 else stored[0].display_name
        return self._register(stored, label=label)

    def discard(self, incoming: Iterable[IncomingFile]) -> None:
        for item in incoming:
            self._unlink(item.path)

    # ---------- Queries ----------

    def list(self) -> List[dict]:
        with self._lock:
            # Ties keep the later insertion first
            entries = sorted(reversed(list(self._entries.values())), key=lambda e: e.uploaded_at, reverse=True)
            return [entry.to_summary() for entry in entries]

    def info(self, code: str) -> dict:
        with self._lock:
            entry = self._entries.get(code)
            if entry is None:
                raise TransferNotFound("File does not exist or the code is wrong")
            return entry.to_summary()

    def codes(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def resolve(self, code: str, index: Optional[int] = None) -> Tuple[Path, StoredFile]:
        """
        Return the on-disk path and record of one stored file.

        A record whose file has vanished is pruned before TransferNotFound is
        raised; an entry left with no files is removed.
        """
        with self._lock:
            entry = self._entries.get(code)
            if entry is None:
                raise TransferNotFound("File does not exist or the code is wrong")

            if index is None:
                if entry.file_count != 1:
                    raise InvalidTransferRequest(
                        f"Transfer {code} holds {entry.file_count} files; choose one by index"
                    )
                index = 0
            elif not 0 <= index < entry.file_count:
                raise TransferNotFound(f"Transfer {code} has no file at index {index}")

            stored = entry.files[index]
            path = self.root / stored.stored_name
            if not path.is_file():
                del entry.files[index]
                if not entry.files:
                    del self._entries[code]
                logger.warning("Stored file for %s (%s) is missing; pruned", code, stored.display_name)
                raise TransferNotFound("File has been removed")

        logger.info("File downloaded: %s with code %s", stored.display_name, code)
        return path, stored

    # ---------- Removal ----------

    def delete(self, code: str) -> None:
        with self._lock:
            entry = self._entries.pop(code, None)
        if entry is None:
            raise TransferNotFound("File does not exist or the code is wrong")

        self._remove_files(entry)
        logger.info("Transfer %s deleted (%s)", code, entry.label)

    def sweep(self, now: datetime, max_age_seconds: float) -> List[str]:
        """Remove every entry older than `max_age_seconds`, one entry at a time."""
        with self._lock:
            expired = [
                (code, entry)
                for code, entry in self._entries.items()
                if entry.is_expired(now, max_age_seconds)
            ]

        removed = []
        for code, entry in expired:
            with self._lock:
                # The code may have been deleted and reissued since the scan
                if self._entries.get(code) is not entry:
                    continue
                del self._entries[code]
            try:
                self._remove_files(entry)
            except Exception:
                logger.exception("Error cleaning up files for expired transfer %s", code)
            removed.append(code)
            logger.info("Cleaned up old transfer %s (%s)", code, entry.label)

        return removed

    # ---------- Internal helpers ----------

    def _register(
            self,
            files: List[StoredFile],
            *,
            label: str,
            is_zipped: bool = False,
            original_file_count: Optional[int] = None,
    ) -> TransferEntry:
        with self._lock:
            code = issue_code(self._entries)
            entry = TransferEntry(
                code=code,
                files=files,
                label=label,
                is_zipped=is_zipped,
                original_file_count=original_file_count,
            )
            self._entries[code] = entry

        logger.info(
            "Transfer %s stored: %s (%d file(s), %s)",
            code, label, entry.file_count, _format_size(entry.total_size_bytes),
        )
        return entry

    def _measure(self, incoming: Sequence[IncomingFile]) -> List[int]:
        try:
            return [item.path.stat().st_size for item in incoming]
        except OSError as e:
            self.discard(incoming)
            raise TransferError(f"Uploaded file could not be read: {e}") from e

    def _adopt(self, item: IncomingFile, size: int) -> StoredFile:
        path = item.path
        if path.parent.resolve() != self.root.resolve():
            path = self.new_upload_path(item.display_name)
            shutil.move(str(item.path), path)
        return StoredFile(
            stored_name=path.name,
            display_name=item.display_name,
            relative_path=safe_relative_path(item.relative_path, item.display_name),
            size_bytes=size,
        )

    def _zip(self, incoming: Sequence[IncomingFile], folder: str) -> StoredFile:
        display_name = folder if folder.lower().endswith(".zip") else f"{folder}.zip"
        destination = self.root / f"{uuid.uuid4()}.zip"

        members = []
        seen = set()
        for item in incoming:
            arcname = safe_relative_path(item.relative_path, item.display_name)
            base, n = arcname, 1
            while arcname in seen:
                stem, dot, ext = base.rpartition(".")
                arcname = f"{stem} ({n}).{ext}" if dot else f"{base} ({n})"
                n += 1
            seen.add(arcname)
            members.append((item.path, arcname))

        try:
            pack(members, destination)
        except ArchiveError:
            logger.error("Archive %s failed; discarding %d upload(s)", display_name, len(incoming))
            self.discard(incoming)
            raise
        self.discard(incoming)

        return StoredFile(
            stored_name=destination.name,
            display_name=display_name,
            relative_path=display_name,
            size_bytes=destination.stat().st_size,
        )

    @staticmethod
    def _folder_name(incoming: Sequence[IncomingFile], folder_name: Optional[str]) -> str:
        if folder_name and folder_name.strip():
            return safe_relative_path(folder_name.strip(), DEFAULT_FOLDER_NAME).replace("/", "_")
        first = safe_relative_path(incoming[0].relative_path, "")
        if "/" in first:
            return first.split("/", 1)[0]
        return DEFAULT_FOLDER_NAME

    def _remove_files(self, entry: TransferEntry) -> None:
        for stored in entry.files:
            self._unlink(self.root / stored.stored_name)

    @staticmethod
    def _unlink(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Error deleting transfer file %s: %s", path, e)
