from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Announcement


class AnnouncementRepository(Protocol):
    def list_all(self) -> Sequence[Announcement]:
        """Newest first."""

        raise NotImplementedError

    def create(
        self,
        *,
        title: str,
        content: str,
        image_url: Optional[str],
        expires_at: Optional[datetime],
        author_id: int,
    ) -> Announcement:
        raise NotImplementedError

    def delete_by_id(self, announcement_id: int) -> bool:
        raise NotImplementedError
