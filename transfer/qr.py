from __future__ import annotations

import io

import qrcode
from PIL import Image


def render_code_qr(*, url: str, size: int) -> Image.Image:
    """QR code pointing at a transfer download, so a phone can fetch it by scanning."""
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        border=2,
    )
    qr.add_data(url)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    # Deterministic size + crisp pixels (avoid antialiasing).
    img = img.resize((size, size), resample=Image.Resampling.NEAREST)
    return img.convert("RGB")


def render_code_qr_png(*, url: str, size: int) -> bytes:
    buffer = io.BytesIO()
    render_code_qr(url=url, size=size).save(buffer, format="PNG")
    return buffer.getvalue()
