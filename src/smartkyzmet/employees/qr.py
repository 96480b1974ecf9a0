from __future__ import annotations

import io
import uuid
from typing import BinaryIO, Callable, Optional

import qrcode
from PIL import Image, UnidentifiedImageError
from pyzbar.pyzbar import decode as pyzbar_decode

QR_TOKEN_PREFIX = "EMP"


def new_qr_token() -> str:
    return f"{QR_TOKEN_PREFIX}{uuid.uuid4().hex[:20].upper()}"


def generate_unique_qr_token(
    exists: Callable[[str], bool],
    *,
    token_factory: Callable[[], str] = new_qr_token,
) -> str:
    """Draw tokens until storage confirms one is unused."""

    while True:
        token = token_factory()
        if not exists(token):
            return token


def render_qr_png(data: str) -> bytes:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def decode_qr_image(stream: BinaryIO) -> Optional[str]:
    """Return the text of the first QR code found in an uploaded image, if any."""

    try:
        img = Image.open(stream).convert("RGB")
    except UnidentifiedImageError:
        return None
    decoded = pyzbar_decode(img)
    if not decoded:
        return None
    return decoded[0].data.decode("utf-8").strip()
