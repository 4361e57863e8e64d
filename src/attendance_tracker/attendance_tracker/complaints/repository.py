from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import ComplaintStatus
from .model import Complaint, ComplaintPhoto


class ComplaintRepository(Protocol):
    def create(self, *, user_id: int, title: str, description: str) -> Complaint:
        raise NotImplementedError

    def add_photo(self, *, complaint_id: int, photo_url: str, caption: Optional[str]) -> ComplaintPhoto:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[Complaint]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Complaint]:
        raise NotImplementedError

    def list_photos(self, complaint_id: int) -> Sequence[ComplaintPhoto]:
        raise NotImplementedError

    def get_by_id(self, complaint_id: int) -> Optional[Complaint]:
        raise NotImplementedError

    def update_status(self, complaint_id: int, status: ComplaintStatus) -> Optional[Complaint]:
        raise NotImplementedError

    def count_by_status(self, status: ComplaintStatus) -> int:
        raise NotImplementedError
