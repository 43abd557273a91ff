from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, UTC
from pathlib import Path, PurePosixPath
from typing import List, Optional


@dataclass(frozen=True)
class IncomingFile:
    """An upload already written to the transfer folder, not yet owned by any entry."""

    path: Path
    display_name: str
    relative_path: Optional[str] = None


@dataclass(frozen=True)
class StoredFile:
    stored_name: str
    display_name: str
    relative_path: str
    size_bytes: int

    def to_dict(self, index: int) -> dict:
        return {
            "index": index,
            "name": self.display_name,
            "relativePath": self.relative_path,
            "size": self.size_bytes,
        }


@dataclass
class TransferEntry:
    code: str
    files: List[StoredFile]
    label: str
    uploaded_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    is_zipped: bool = False
    original_file_count: Optional[int] = None

    @property
    def total_size_bytes(self) -> int:
        return sum(f.size_bytes for f in self.files)

    @property
    def file_count(self) -> int:
        return len(self.files)

    def is_expired(self, now: datetime, max_age_seconds: float) -> bool:
        return (now - self.uploaded_at).total_seconds() > max_age_seconds

    def to_summary(self) -> dict:
        summary = {
            "code": self.code,
            "filename": self.label,
            "uploadedAt": self.uploaded_at.isoformat(),
            "size": self.total_size_bytes,
            "fileCount": self.file_count,
            "isZipped": self.is_zipped,
            "files": [f.to_dict(i) for i, f in enumerate(self.files)],
        }
        if self.is_zipped:
            summary["originalFileCount"] = self.original_file_count
        return summary


def safe_relative_path(relative_path: Optional[str], fallback: str) -> str:
    """
    Normalise a client supplied relative path ("photos/2026/a.jpg").

    Drops empty, "." and ".." segments and any drive or root, so the result can
    never point outside the folder it is unpacked into.
    """
    raw = (relative_path or "").replace("\\", "/")
    parts = [p for p in PurePosixPath(raw).parts if p not in ("", ".", "..", "/")]
    if parts and parts[0].endswith(":"):
        parts = parts[1:]
    return "/".join(parts) if parts else fallback
