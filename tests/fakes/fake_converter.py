# tests/fakes/fake_converter.py

from pathlib import Path

from printing.converter_base import Converter, ConversionError

FAKE_PDF = b"%PDF-1.4\n% fake\n%%EOF\n"


class FakeConverter(Converter):
    def __init__(self, fail_with: str | None = None):
        self.fail_with = fail_with
        self.converted = []

    def convert(self, source: Path, output_dir: Path) -> Path:
        if self.fail_with:
            raise ConversionError(self.fail_with)
        output_dir.mkdir(parents=True, exist_ok=True)
        output = output_dir / f"{source.stem}.pdf"
        output.write_bytes(FAKE_PDF)
        self.converted.append(source)
        return output
