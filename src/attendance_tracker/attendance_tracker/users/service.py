from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import blank_to_none, clean_optional_fields, require_non_empty
from ..core.constants import DEFAULT_EMPLOYEE_PASSWORD
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..evidence.photo import PhotoUpload
from ..evidence.store import FileStore
from .model import PROFILE_FIELDS, User
from .repository import DuplicateUserError, UserRepository

logger = logging.getLogger(__name__)

_OPTIONAL_FIELDS = ("username", "nik", "email", "branch", "position", "shift", "phone_number")


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    full_name: str
    role: Role
    shift: Optional[str]


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        user = self._users.get_by_username((username or "").strip())
        if not user:
            raise AuthenticationError("Username atau password salah")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Username atau password salah")

        return SessionUser(user_id=user.user_id, full_name=user.full_name, role=user.role, shift=user.shift)


def _parse_role(value: Any) -> Role:
    if isinstance(value, Role):
        return value
    try:
        return Role(str(value or Role.EMPLOYEE.value))
    except ValueError:
        raise ValidationError("Role tidak valid")


class EmployeeService:
    """Use case: manage employees (admin)."""

    def __init__(self, users: UserRepository, files: FileStore):
        self._users = users
        self._files = files

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Anda tidak memiliki akses")

    def _store_photo(self, user_id: int, photo: PhotoUpload) -> str:
        return self._files.save_image(photo, folder="employees", prefix=f"emp-{user_id}")

    def list_employees(self, *, current_role: Role) -> Sequence[User]:
        self._require_admin(current_role)
        return self._users.list_all()

    def create_employee(
        self,
        *,
        current_role: Role,
        data: Mapping[str, Any],
        photo: Optional[PhotoUpload] = None,
    ) -> User:
        self._require_admin(current_role)

        cleaned = clean_optional_fields(data, _OPTIONAL_FIELDS)
        full_name = require_non_empty(str(cleaned.get("full_name") or ""), "Nama lengkap")
        role = _parse_role(cleaned.get("role"))

        username = cleaned.get("username")
        if role == Role.EMPLOYEE and not username and cleaned.get("nik"):
            username = cleaned["nik"]
        if not username:
            raise ValidationError("Username atau NIK wajib diisi")

        fields = {k: cleaned.get(k) for k in _OPTIONAL_FIELDS}
        fields.update(username=username, full_name=full_name, role=role)

        password = data.get("password") or DEFAULT_EMPLOYEE_PASSWORD
        try:
            user = self._users.create_user(password_hash=generate_password_hash(password), fields=fields)
        except DuplicateUserError:
            raise ValidationError("NIK atau Username sudah digunakan")

        if photo is not None:
            url = self._store_photo(user.user_id, photo)
            user = self._users.update_user(user.user_id, fields={"photo_url": url}) or user

        logger.info("created %s account %s (id=%s)", role.value, username, user.user_id)
        return user

    def update_employee(
        self,
        *,
        current_role: Role,
        user_id: int,
        data: Mapping[str, Any],
        photo: Optional[PhotoUpload] = None,
    ) -> User:
        self._require_admin(current_role)

        if not self._users.get_by_id(user_id):
            raise NotFoundError("Karyawan tidak ditemukan")

        cleaned = clean_optional_fields(data, _OPTIONAL_FIELDS)
        fields: dict[str, Any] = {k: cleaned[k] for k in PROFILE_FIELDS if k in cleaned and k != "photo_url"}
        if "full_name" in fields:
            fields["full_name"] = require_non_empty(str(fields["full_name"] or ""), "Nama lengkap")
        if "role" in fields:
            fields["role"] = _parse_role(fields["role"])

        password = blank_to_none(data.get("password"))
        password_hash = generate_password_hash(password) if password else None

        if photo is not None:
            fields["photo_url"] = self._store_photo(user_id, photo)

        try:
            user = self._users.update_user(user_id, fields=fields, password_hash=password_hash)
        except DuplicateUserError:
            raise ValidationError("NIK atau Username sudah digunakan")
        if not user:
            raise NotFoundError("Karyawan tidak ditemukan")
        return user

    def delete_employee(self, *, current_role: Role, user_id: int) -> None:
        self._require_admin(current_role)

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("Karyawan tidak ditemukan")
        if user.role == Role.ADMIN:
            raise ValidationError("Tidak dapat menghapus akun Admin")

        if not self._users.delete_by_id(user_id):
            raise ValidationError("Gagal menghapus karyawan")
        logger.info("deleted user %s", user_id)
