from __future__ import annotations

import base64
import binascii
import io
import re
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from ..core.constants import SNAPSHOT_JPEG_QUALITY
from ..core.exceptions import ValidationError

_DATA_URL = re.compile(r"^data:image/[a-zA-Z0-9.+-]+;base64,")


@dataclass(frozen=True)
class Snapshot:
    """A captured still frame, normalized to JPEG."""

    jpeg: bytes
    width: int
    height: int

    @property
    def data_url(self) -> str:
        return "data:image/jpeg;base64," + base64.b64encode(self.jpeg).decode("ascii")


def decode_data_url(value: str) -> bytes:
    """Decode a `data:image/...;base64,` URL (or bare base64) into raw bytes."""

    cleaned = _DATA_URL.sub("", (value or "").strip())
    if not cleaned:
        raise ValidationError("Foto kosong")
    try:
        return base64.b64decode(cleaned, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError("Foto tidak valid") from exc


def encode_snapshot(raw: bytes, *, quality: int = SNAPSHOT_JPEG_QUALITY) -> Snapshot:
    """Re-encode any camera frame as an RGB JPEG, like a canvas `toDataURL('image/jpeg', 0.8)`."""

    try:
        with Image.open(io.BytesIO(raw)) as img:
            img = img.convert("RGB")
            out = io.BytesIO()
            img.save(out, format="JPEG", quality=int(quality))
            return Snapshot(jpeg=out.getvalue(), width=img.width, height=img.height)
    except (UnidentifiedImageError, OSError) as exc:
        raise ValidationError("Foto tidak dapat dibaca") from exc
