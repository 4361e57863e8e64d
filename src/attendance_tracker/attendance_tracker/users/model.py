from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an employee or admin account.

    Note: plain data object, no database access here.
    """

    user_id: int
    username: Optional[str]
    password_hash: str
    full_name: str
    role: Role = Role.EMPLOYEE
    nik: Optional[str] = None
    email: Optional[str] = None
    branch: Optional[str] = None
    position: Optional[str] = None
    shift: Optional[str] = None
    photo_url: Optional[str] = None
    phone_number: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "username": self.username,
            "fullName": self.full_name,
            "role": self.role.value,
            "nik": self.nik,
            "email": self.email,
            "branch": self.branch,
            "position": self.position,
            "shift": self.shift,
            "photoUrl": self.photo_url,
            "phoneNumber": self.phone_number,
            "isAdmin": self.role == Role.ADMIN,
        }


# Editable profile columns (everything but id and password).
PROFILE_FIELDS = (
    "username",
    "full_name",
    "role",
    "nik",
    "email",
    "branch",
    "position",
    "shift",
    "photo_url",
    "phone_number",
)
