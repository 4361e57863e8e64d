from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ComplaintStatus


@dataclass(frozen=True)
class Complaint:
    complaint_id: int
    user_id: int
    title: str
    description: str
    status: ComplaintStatus
    created_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.complaint_id,
            "userId": self.user_id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class ComplaintPhoto:
    photo_id: int
    complaint_id: int
    photo_url: str
    caption: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.photo_id,
            "complaintId": self.complaint_id,
            "photoUrl": self.photo_url,
            "caption": self.caption,
        }
