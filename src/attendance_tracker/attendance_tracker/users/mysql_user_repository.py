from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PROFILE_FIELDS, User
from .repository import DuplicateUserError, UserRepository

_COLUMNS = "id, username, password_hash, full_name, role, nik, email, branch, position, shift, photo_url, phone_number"


def _row_to_user(row: dict) -> User:
    return User(
        user_id=int(row["id"]),
        username=row.get("username"),
        password_hash=row["password_hash"],
        full_name=row["full_name"],
        role=Role(row["role"]),
        nik=row.get("nik"),
        email=row.get("email"),
        branch=row.get("branch"),
        position=row.get("position"),
        shift=row.get("shift"),
        photo_url=row.get("photo_url"),
        phone_number=row.get("phone_number"),
    )


def _db_value(value: Any) -> Any:
    return value.value if isinstance(value, Role) else value


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE id=%s", (int(user_id),))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE username=%s", (username,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY id DESC")
            return [_row_to_user(r) for r in fetchall(cur)]

    def create_user(self, *, password_hash: str, fields: Mapping[str, Any]) -> User:
        cols = [c for c in PROFILE_FIELDS if c in fields]
        values = [_db_value(fields[c]) for c in cols]
        placeholders = ",".join(["%s"] * (len(cols) + 1))

        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO users(password_hash, {', '.join(cols)}) VALUES({placeholders})",
                    (password_hash, *values),
                )
                new_id = int(cur.lastrowid)
                cur.execute(f"SELECT {_COLUMNS} FROM users WHERE id=%s", (new_id,))
                return _row_to_user(fetchone(cur))
        except mysql.connector.IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise DuplicateUserError(str(e)) from e
            raise

    def update_user(self, user_id: int, *, fields: Mapping[str, Any], password_hash: Optional[str] = None) -> Optional[User]:
        sets: list[str] = []
        params: list[Any] = []
        for c in PROFILE_FIELDS:
            if c in fields:
                sets.append(f"{c}=%s")
                params.append(_db_value(fields[c]))
        if password_hash:
            sets.append("password_hash=%s")
            params.append(password_hash)

        try:
            with db_cursor(self._conn_factory) as (_, cur):
                if sets:
                    cur.execute(f"UPDATE users SET {', '.join(sets)} WHERE id=%s", (*params, int(user_id)))
                cur.execute(f"SELECT {_COLUMNS} FROM users WHERE id=%s", (int(user_id),))
                row = fetchone(cur)
                return _row_to_user(row) if row else None
        except mysql.connector.IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise DuplicateUserError(str(e)) from e
            raise

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE id=%s", (int(user_id),))
            return cur.rowcount > 0
