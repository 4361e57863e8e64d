from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import blank_to_none, require_non_empty
from ..core.constants import MAX_COMPLAINT_PHOTOS
from ..core.enums import ComplaintStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..evidence.photo import PhotoUpload
from ..evidence.store import FileStore
from .model import Complaint, ComplaintPhoto
from .repository import ComplaintRepository

logger = logging.getLogger(__name__)


class ComplaintService:
    def __init__(self, complaints: ComplaintRepository, files: FileStore):
        self._complaints = complaints
        self._files = files

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Anda tidak memiliki akses")

    def create(
        self,
        *,
        user_id: int,
        title: str,
        description: str,
        photos: Sequence[PhotoUpload] = (),
        captions: Sequence[Optional[str]] = (),
    ) -> Complaint:
        title = require_non_empty(title, "Judul")
        description = require_non_empty(description, "Deskripsi")
        if len(photos) > MAX_COMPLAINT_PHOTOS:
            raise ValidationError(f"Maksimal {MAX_COMPLAINT_PHOTOS} foto")

        complaint = self._complaints.create(user_id=user_id, title=title, description=description)

        for i, photo in enumerate(photos):
            url = self._files.save_image(photo, folder="complaints", prefix=f"complaint-{complaint.complaint_id}-{i}")
            caption = blank_to_none(captions[i]) if i < len(captions) else None
            self._complaints.add_photo(complaint_id=complaint.complaint_id, photo_url=url, caption=caption)

        logger.info("user %s filed complaint %s with %d photos", user_id, complaint.complaint_id, len(photos))
        return complaint

    def list_for_user(self, user_id: int) -> Sequence[Complaint]:
        return self._complaints.list_for_user(user_id)

    def list_all(self, *, current_role: Role) -> Sequence[Complaint]:
        self._require_admin(current_role)
        return self._complaints.list_all()

    def photos(self, *, complaint_id: int, user_id: int, current_role: Role) -> Sequence[ComplaintPhoto]:
        complaint = self._complaints.get_by_id(complaint_id)
        if not complaint:
            raise NotFoundError("Pengaduan tidak ditemukan")
        if current_role != Role.ADMIN and complaint.user_id != user_id:
            raise AuthorizationError("Anda tidak memiliki akses")
        return self._complaints.list_photos(complaint_id)

    def update_status(self, *, current_role: Role, complaint_id: int, status: str) -> Complaint:
        self._require_admin(current_role)
        try:
            new_status = ComplaintStatus(status)
        except ValueError:
            raise ValidationError("Status pengaduan tidak valid")

        updated = self._complaints.update_status(complaint_id, new_status)
        if not updated:
            raise NotFoundError("Pengaduan tidak ditemukan")
        return updated

    def pending_count(self, *, current_role: Role) -> int:
        self._require_admin(current_role)
        return self._complaints.count_by_status(ComplaintStatus.PENDING)
