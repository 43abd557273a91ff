from __future__ import annotations

import os
import uuid
import zipfile
from pathlib import Path
from typing import Iterable, Tuple

from logging_config import get_logger
from transfer.errors import ArchiveError

logger = get_logger(__name__)

# Moderate deflate level: most of the size win of 9 at a fraction of the CPU
COMPRESSION_LEVEL = 6


def pack(files: Iterable[Tuple[Path, str]], destination: Path) -> Path:
    """
    Zip `(source_path, archive_path)` pairs into `destination`.

    The archive is written to a hidden temporary file in the same directory and
    renamed into place only once every member is written, so a failed pack never
    leaves a readable `destination` behind.
    """
    destination.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = destination.with_name(f".{destination.name}.{uuid.uuid4().hex}.tmp")

    try:
        with zipfile.ZipFile(
                tmp_path,
                mode="w",
                compression=zipfile.ZIP_DEFLATED,
                compresslevel=COMPRESSION_LEVEL,
        ) as archive:
            for source, archive_path in files:
                archive.write(source, arcname=archive_path)
        os.replace(tmp_path, destination)
    except (OSError, zipfile.BadZipFile, ValueError) as e:
        tmp_path.unlink(missing_ok=True)
        raise ArchiveError(f"Failed to create archive {destination.name}: {e}") from e

    logger.info("Packed archive %s (%d bytes)", destination.name, destination.stat().st_size)
    return destination
