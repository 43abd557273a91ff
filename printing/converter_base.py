from abc import ABC, abstractmethod
from pathlib import Path


class ConversionError(Exception):
    pass


class Converter(ABC):
    """
    Turns a document the printer cannot take directly into a PDF.

    All converter implementations (real or fake) must implement this contract.
    """

    @abstractmethod
    def convert(self, source: Path, output_dir: Path) -> Path:
        """Convert `source` and return the path of the produced PDF inside `output_dir`."""
        pass
