from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_utc, to_naive_utc
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, utc_or_none
from .model import Announcement
from .repository import AnnouncementRepository

_COLUMNS = "id, title, content, image_url, expires_at, created_at, author_id"


def _row_to_announcement(r: dict) -> Announcement:
    return Announcement(
        announcement_id=int(r["id"]),
        title=r["title"],
        content=r["content"],
        image_url=r.get("image_url"),
        expires_at=utc_or_none(r.get("expires_at")),
        created_at=utc_or_none(r["created_at"]),
        author_id=r.get("author_id"),
    )


class MySQLAnnouncementRepository(AnnouncementRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Announcement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM announcements ORDER BY created_at DESC, id DESC")
            return [_row_to_announcement(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        title: str,
        content: str,
        image_url: Optional[str],
        expires_at: Optional[datetime],
        author_id: int,
    ) -> Announcement:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO announcements(title, content, image_url, expires_at, created_at, author_id)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (title, content, image_url, to_naive_utc(expires_at), to_naive_utc(now_utc()), int(author_id)),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM announcements WHERE id=%s", (int(cur.lastrowid),))
            return _row_to_announcement(fetchone(cur))

    def delete_by_id(self, announcement_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM announcements WHERE id=%s", (int(announcement_id),))
            return cur.rowcount > 0
