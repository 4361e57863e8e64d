from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Optional

_DATA_URL = re.compile(r"^data:([A-Za-z\-+/]+);base64,(.+)$", re.DOTALL)


@dataclass(frozen=True)
class PhotoUpload:
    data: bytes
    filename: str = "photo.png"
    mimetype: str = "image/png"


def photo_from_data_url(value: Optional[str]) -> Optional[PhotoUpload]:
    """Decode a ``data:image/...;base64,`` URL. Anything else yields None."""
    if not value or not value.startswith("data:image"):
        return None
    m = _DATA_URL.match(value)
    if not m:
        return None
    try:
        data = base64.b64decode(m.group(2), validate=False)
    except (binascii.Error, ValueError):
        return None
    return PhotoUpload(data=data, filename="photo.png", mimetype=m.group(1))


def photo_from_file(file_storage) -> Optional[PhotoUpload]:
    """Wrap a werkzeug ``FileStorage`` (multipart field)."""
    if file_storage is None or not file_storage.filename:
        return None
    data = file_storage.read()
    if not data:
        return None
    return PhotoUpload(data=data, filename=file_storage.filename, mimetype=file_storage.mimetype or "image/jpeg")
