from __future__ import annotations

import io
import logging
import uuid
from pathlib import Path
from typing import Optional, Protocol

from PIL import Image, UnidentifiedImageError
from werkzeug.utils import secure_filename

from ..attendance.model import Evidence
from ..common.datetime_utils import now_utc
from ..common.validators import blank_to_none
from ..core.enums import EvidenceAction
from ..core.exceptions import ValidationError
from .photo import PhotoUpload

logger = logging.getLogger(__name__)


class FileStore(Protocol):
    def save_image(self, photo: PhotoUpload, *, folder: str, prefix: str) -> str:
        """Persist an image and return its public reference."""

        raise NotImplementedError


class EvidenceStore(Protocol):
    def save(self, photo: PhotoUpload, *, action: EvidenceAction, employee_name: str) -> str:
        raise NotImplementedError


class LocalFileStore(FileStore):
    """Stores images under ``root`` and serves them from ``url_prefix``.

    Every image is opened with Pillow first, so only decodable pictures are kept;
    they are re-encoded as JPEG without metadata.
    """

    def __init__(self, root: str | Path, *, url_prefix: str = "/uploads", max_side: int = 1600):
        self._root = Path(root)
        self._url_prefix = url_prefix.rstrip("/")
        self._max_side = int(max_side)

    @property
    def root(self) -> Path:
        return self._root

    def _normalize(self, photo: PhotoUpload) -> bytes:
        try:
            with Image.open(io.BytesIO(photo.data)) as candidate:
                candidate.verify()
            img = Image.open(io.BytesIO(photo.data))
            img = img.convert("RGB")
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise ValidationError("File foto tidak valid") from e

        img.thumbnail((self._max_side, self._max_side))
        out = io.BytesIO()
        img.save(out, format="JPEG", quality=85)
        return out.getvalue()

    def save_image(self, photo: PhotoUpload, *, folder: str, prefix: str) -> str:
        payload = self._normalize(photo)

        stem = Path(secure_filename(photo.filename) or "photo").stem or "photo"
        filename = f"{secure_filename(prefix)}-{uuid.uuid4().hex[:12]}-{stem}.jpg"
        target_dir = self._root / folder
        target_dir.mkdir(parents=True, exist_ok=True)
        (target_dir / filename).write_bytes(payload)

        return f"{self._url_prefix}/{folder}/{filename}"


class LocalEvidenceStore(EvidenceStore):
    def __init__(self, files: FileStore, *, folder: str = "attendance"):
        self._files = files
        self._folder = folder

    def save(self, photo: PhotoUpload, *, action: EvidenceAction, employee_name: str) -> str:
        ts = now_utc().strftime("%Y%m%d%H%M%S")
        ref = self._files.save_image(photo, folder=self._folder, prefix=f"attendance-{action.value}-{ts}")
        logger.info("stored %s photo for %s: %s", action.value, employee_name, ref)
        return ref


def capture(
    store: EvidenceStore,
    photo: Optional[PhotoUpload],
    location: Optional[str],
    *,
    action: EvidenceAction,
    employee_name: str,
) -> Evidence:
    """Store the photo (if any) and pair it with the reported location."""
    photo_ref = None
    if photo is not None:
        photo_ref = store.save(photo, action=action, employee_name=employee_name)
    else:
        logger.warning("no photo data in request for %s by %s", action.value, employee_name)
    return Evidence(photo_ref=photo_ref, location=blank_to_none(location))
