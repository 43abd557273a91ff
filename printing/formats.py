"""
Document kinds accepted for printing.

A kind decides which converter (if any) runs before dispatch. PDF is the only
format handed to the spooler as-is.
"""
from __future__ import annotations

from enum import Enum
from pathlib import PurePath
from typing import Optional


class DocumentKind(Enum):
    PDF = "pdf"
    OFFICE = "office"
    IMAGE = "image"

    @property
    def needs_conversion(self) -> bool:
        return self != DocumentKind.PDF


SUPPORTED_MIMETYPES = {
    "application/pdf": DocumentKind.PDF,
    "application/msword": DocumentKind.OFFICE,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": DocumentKind.OFFICE,
    "application/vnd.oasis.opendocument.text": DocumentKind.OFFICE,
    "application/rtf": DocumentKind.OFFICE,
    "text/rtf": DocumentKind.OFFICE,
    "image/jpeg": DocumentKind.IMAGE,
    "image/png": DocumentKind.IMAGE,
    "image/gif": DocumentKind.IMAGE,
    "image/bmp": DocumentKind.IMAGE,
    "image/tiff": DocumentKind.IMAGE,
}

# Browsers fall back to application/octet-stream for types they do not know
SUPPORTED_EXTENSIONS = {
    ".pdf": DocumentKind.PDF,
    ".doc": DocumentKind.OFFICE,
    ".docx": DocumentKind.OFFICE,
    ".odt": DocumentKind.OFFICE,
    ".rtf": DocumentKind.OFFICE,
    ".jpg": DocumentKind.IMAGE,
    ".jpeg": DocumentKind.IMAGE,
    ".png": DocumentKind.IMAGE,
    ".gif": DocumentKind.IMAGE,
    ".bmp": DocumentKind.IMAGE,
    ".tif": DocumentKind.IMAGE,
    ".tiff": DocumentKind.IMAGE,
}

ACCEPTED_DESCRIPTION = "PDF, Word (.doc, .docx), OpenDocument, RTF or image files"


def detect_kind(filename: str, mimetype: str | None) -> Optional[DocumentKind]:
    if mimetype:
        kind = SUPPORTED_MIMETYPES.get(mimetype.split(";")[0].strip().lower())
        if kind is not None:
            return kind
    return SUPPORTED_EXTENSIONS.get(PurePath(filename).suffix.lower())
