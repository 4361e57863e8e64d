from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import User


class DuplicateUserError(Exception):
    """Raised by repositories when username or NIK is already taken."""


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def create_user(self, *, password_hash: str, fields: Mapping[str, Any]) -> User:
        """Insert a user; ``fields`` keys are taken from ``PROFILE_FIELDS``."""

        raise NotImplementedError

    def update_user(self, user_id: int, *, fields: Mapping[str, Any], password_hash: Optional[str] = None) -> Optional[User]:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError
