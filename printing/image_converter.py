from __future__ import annotations

from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from printing.converter_base import Converter, ConversionError

DEFAULT_DPI = 300


class ImageConverter(Converter):
    """Renders a single image (or the frames of a multi-page TIFF/GIF) into a PDF."""

    def __init__(self, dpi: int = DEFAULT_DPI):
        self.dpi = dpi

    def convert(self, source: Path, output_dir: Path) -> Path:
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path = output_dir / f"{source.stem}.pdf"

        try:
            with Image.open(source) as img:
                pages = []
                for index in range(getattr(img, "n_frames", 1)):
                    img.seek(index)
                    # Honour camera rotation so phone photos print upright
                    pages.append(ImageOps.exif_transpose(img).convert("RGB"))
        except (UnidentifiedImageError, OSError) as e:
            raise ConversionError(f"Failed to load image: {source.name}") from e

        try:
            pages[0].save(
                output_path,
                "PDF",
                resolution=self.dpi,
                save_all=True,
                append_images=pages[1:],
            )
        except OSError as e:
            output_path.unlink(missing_ok=True)
            raise ConversionError(f"Failed to write PDF for {source.name}") from e

        return output_path
