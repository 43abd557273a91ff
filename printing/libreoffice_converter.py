import os
import subprocess
import tempfile
from pathlib import Path
from typing import Sequence

from logging_config import get_logger
from printing.converter_base import Converter, ConversionError

logger = get_logger(__name__)

# Probed in order; "soffice" means "whatever is on PATH"
SOFFICE_CANDIDATES = (
    "soffice",
    "/usr/bin/soffice",
    "/usr/bin/libreoffice",
    "/usr/lib/libreoffice/program/soffice",
    "/Applications/LibreOffice.app/Contents/MacOS/soffice",
    r"C:\Program Files\LibreOffice\program\soffice.exe",
    r"C:\Program Files (x86)\LibreOffice\program\soffice.exe",
)


def find_soffice(candidates: Sequence[str] = SOFFICE_CANDIDATES) -> str:
    for candidate in candidates:
        if candidate == "soffice" or os.path.exists(candidate):
            return candidate
    return "soffice"


class LibreOfficeConverter(Converter):
    def __init__(self, soffice_path: str | None = None, timeout: int = 60):
        self.soffice_path = soffice_path or find_soffice()
        self.timeout = timeout

    def convert(self, source: Path, output_dir: Path) -> Path:
        output_dir.mkdir(parents=True, exist_ok=True)

        logger.info("Converting %s to PDF", source.name)
        # Concurrent soffice processes sharing one profile fail, so each run gets its own
        with tempfile.TemporaryDirectory(prefix="printdrop-lo-") as profile_dir:
            cmd = [
                self.soffice_path,
                "--headless",
                "--convert-to",
                "pdf",
                "--outdir",
                str(output_dir),
                f"-env:UserInstallation={Path(profile_dir).as_uri()}",
                str(source),
            ]
            try:
                subprocess.run(
                    cmd,
                    check=True,
                    timeout=self.timeout,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                )
            except subprocess.TimeoutExpired as e:
                raise ConversionError(f"Conversion timed out after {self.timeout}s") from e
            except subprocess.CalledProcessError as e:
                raise ConversionError(
                    f"Conversion failed: {(e.stderr or b'').decode(errors='ignore').strip()}"
                ) from e
            except OSError as e:
                raise ConversionError(
                    f"Conversion failed, is LibreOffice installed? ({e})"
                ) from e

        output_path = output_dir / f"{source.stem}.pdf"
        if not output_path.exists():
            raise ConversionError("Converter reported success but no PDF was created")

        logger.info("Conversion successful: %s", output_path.name)
        return output_path
