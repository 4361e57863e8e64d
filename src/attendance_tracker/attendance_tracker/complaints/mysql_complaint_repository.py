from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import now_utc, to_naive_utc
from ..core.enums import ComplaintStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, utc_or_none
from .model import Complaint, ComplaintPhoto
from .repository import ComplaintRepository

_COLUMNS = "id, user_id, title, description, status, created_at"


def _row_to_complaint(r: dict) -> Complaint:
    return Complaint(
        complaint_id=int(r["id"]),
        user_id=int(r["user_id"]),
        title=r["title"],
        description=r["description"],
        status=ComplaintStatus(r["status"]),
        created_at=utc_or_none(r["created_at"]),
    )


def _row_to_photo(r: dict) -> ComplaintPhoto:
    return ComplaintPhoto(
        photo_id=int(r["id"]),
        complaint_id=int(r["complaint_id"]),
        photo_url=r["photo_url"],
        caption=r.get("caption"),
    )


class MySQLComplaintRepository(ComplaintRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, user_id: int, title: str, description: str) -> Complaint:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO complaints(user_id, title, description, status, created_at)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(user_id), title, description, ComplaintStatus.PENDING.value, to_naive_utc(now_utc())),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM complaints WHERE id=%s", (int(cur.lastrowid),))
            return _row_to_complaint(fetchone(cur))

    def add_photo(self, *, complaint_id: int, photo_url: str, caption: Optional[str]) -> ComplaintPhoto:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO complaint_photos(complaint_id, photo_url, caption) VALUES(%s,%s,%s)",
                (int(complaint_id), photo_url, caption),
            )
            return ComplaintPhoto(
                photo_id=int(cur.lastrowid),
                complaint_id=int(complaint_id),
                photo_url=photo_url,
                caption=caption,
            )

    def list_for_user(self, user_id: int) -> Sequence[Complaint]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM complaints WHERE user_id=%s ORDER BY created_at DESC, id DESC",
                (int(user_id),),
            )
            return [_row_to_complaint(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Complaint]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM complaints ORDER BY created_at DESC, id DESC")
            return [_row_to_complaint(r) for r in fetchall(cur)]

    def list_photos(self, complaint_id: int) -> Sequence[ComplaintPhoto]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, complaint_id, photo_url, caption FROM complaint_photos WHERE complaint_id=%s ORDER BY id",
                (int(complaint_id),),
            )
            return [_row_to_photo(r) for r in fetchall(cur)]

    def get_by_id(self, complaint_id: int) -> Optional[Complaint]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM complaints WHERE id=%s", (int(complaint_id),))
            r = fetchone(cur)
            return _row_to_complaint(r) if r else None

    def update_status(self, complaint_id: int, status: ComplaintStatus) -> Optional[Complaint]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE complaints SET status=%s WHERE id=%s", (status.value, int(complaint_id)))
            cur.execute(f"SELECT {_COLUMNS} FROM complaints WHERE id=%s", (int(complaint_id),))
            r = fetchone(cur)
            return _row_to_complaint(r) if r else None

    def count_by_status(self, status: ComplaintStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM complaints WHERE status=%s", (status.value,))
            r = fetchone(cur)
            return int(r["n"]) if r else 0
