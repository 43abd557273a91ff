import pytest

from printing.formats import DocumentKind
from tests.fakes.fake_converter import FakeConverter
from tests.fakes.fake_printer import FakePrinter
from web.app import create_app


@pytest.fixture
def printer():
    return FakePrinter()


@pytest.fixture
def converter():
    return FakeConverter()


@pytest.fixture
def app(tmp_path, printer, converter):
    app = create_app(
        config_overrides={
            "TESTING": True,
            "UPLOAD_FOLDER": str(tmp_path / "uploads"),
            "TRANSFER_FOLDER": str(tmp_path / "transfers"),
            "PRINT_CLEANUP_DELAY": 0,
            "PRINT_MAX_FILE_SIZE": 1024 * 1024,
            "TRANSFER_MAX_FILE_SIZE": 4 * 1024 * 1024,
            "TRANSFER_MAX_BATCH_SIZE": 8 * 1024 * 1024,
            "TRANSFER_SWEEP_ENABLED": False,
        },
        printer=printer,
        converters={DocumentKind.OFFICE: converter, DocumentKind.IMAGE: converter},
    )
    yield app
    app.sweeper.stop()


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client
