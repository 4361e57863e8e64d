from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_utc
from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..evidence.photo import PhotoUpload
from ..evidence.store import FileStore
from .model import Announcement
from .repository import AnnouncementRepository


class AnnouncementService:
    def __init__(self, announcements: AnnouncementRepository, files: FileStore):
        self._announcements = announcements
        self._files = files

    def list_active(self, *, now: datetime | None = None) -> list[Announcement]:
        now = now or now_utc()
        return [a for a in self._announcements.list_all() if a.is_active(now)]

    def create(
        self,
        *,
        current_role: Role,
        author_id: int,
        title: str,
        content: str,
        expires_at: Optional[datetime] = None,
        image: Optional[PhotoUpload] = None,
    ) -> Announcement:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Anda tidak memiliki akses")

        title = require_non_empty(title, "Judul")
        content = require_non_empty(content, "Isi pengumuman")

        image_url = None
        if image is not None:
            image_url = self._files.save_image(image, folder="announcements", prefix="announcement")

        return self._announcements.create(
            title=title,
            content=content,
            image_url=image_url,
            expires_at=expires_at,
            author_id=author_id,
        )

    def delete(self, *, current_role: Role, announcement_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Anda tidak memiliki akses")
        if not self._announcements.delete_by_id(announcement_id):
            raise NotFoundError("Pengumuman tidak ditemukan")
