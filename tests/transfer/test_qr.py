import io

from PIL import Image

from transfer.qr import render_code_qr, render_code_qr_png


def test_qr_has_requested_size():
    img = render_code_qr(url="http://192.168.1.10:3000/api/transfer/download/123456", size=200)
    assert img.size == (200, 200)
    assert img.mode == "RGB"


def test_qr_png_bytes_decode():
    data = render_code_qr_png(url="http://localhost/api/transfer/download/123456", size=128)
    assert data.startswith(b"\x89PNG")
    assert Image.open(io.BytesIO(data)).size == (128, 128)
