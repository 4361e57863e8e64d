from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Announcement:
    announcement_id: int
    title: str
    content: str
    created_at: datetime
    image_url: Optional[str] = None
    expires_at: Optional[datetime] = None
    author_id: Optional[int] = None

    def is_active(self, now: datetime) -> bool:
        return self.expires_at is None or self.expires_at > now

    def to_dict(self) -> dict:
        return {
            "id": self.announcement_id,
            "title": self.title,
            "content": self.content,
            "imageUrl": self.image_url,
            "expiresAt": self.expires_at.isoformat() if self.expires_at else None,
            "createdAt": self.created_at.isoformat(),
            "authorId": self.author_id,
        }
