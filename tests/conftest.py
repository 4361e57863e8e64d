from __future__ import annotations

import threading
from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional

import pytest
from werkzeug.security import generate_password_hash

from src.attendance_tracker.attendance_tracker.announcements.model import Announcement
from src.attendance_tracker.attendance_tracker.attendance.model import NO_EVIDENCE, AttendanceSession, NewSession, SessionUpdate
from src.attendance_tracker.attendance_tracker.common.datetime_utils import BusinessClock
from src.attendance_tracker.attendance_tracker.complaints.model import Complaint, ComplaintPhoto
from src.attendance_tracker.attendance_tracker.container import assemble
from src.attendance_tracker.attendance_tracker.core.enums import ComplaintStatus, Role, WORKING_STATUSES
from src.attendance_tracker.attendance_tracker.core.exceptions import NotFoundError
from src.attendance_tracker.attendance_tracker.evidence.photo import PhotoUpload
from src.attendance_tracker.attendance_tracker.users.model import User
from src.attendance_tracker.attendance_tracker.users.repository import DuplicateUserError

ADMIN_ID = 1
EMPLOYEE_ID = 2
OTHER_EMPLOYEE_ID = 3


class InMemoryUsers:
    def __init__(self, users: list[User] | None = None):
        self._by_id: dict[int, User] = {u.user_id: u for u in users or []}
        self._id = max(self._by_id, default=0)

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._by_id.values() if u.username == username), None)

    def list_all(self):
        return sorted(self._by_id.values(), key=lambda u: u.user_id)

    def _check_unique(self, fields_: Mapping[str, Any], *, skip: Optional[int] = None) -> None:
        for u in self._by_id.values():
            if u.user_id == skip:
                continue
            if fields_.get("username") and u.username == fields_["username"]:
                raise DuplicateUserError(fields_["username"])
            if fields_.get("nik") and u.nik == fields_["nik"]:
                raise DuplicateUserError(fields_["nik"])

    def create_user(self, *, password_hash: str, fields: Mapping[str, Any]) -> User:
        self._check_unique(fields)
        self._id += 1
        user = User(user_id=self._id, password_hash=password_hash, **dict(fields))
        self._by_id[user.user_id] = user
        return user

    def update_user(self, user_id: int, *, fields: Mapping[str, Any], password_hash: Optional[str] = None) -> Optional[User]:
        user = self._by_id.get(user_id)
        if not user:
            return None
        self._check_unique(fields, skip=user_id)
        changes = dict(fields)
        if password_hash:
            changes["password_hash"] = password_hash
        user = replace(user, **changes)
        self._by_id[user_id] = user
        return user

    def delete_by_id(self, user_id: int) -> bool:
        return self._by_id.pop(user_id, None) is not None


class InMemoryAttendance:
    """Keeps the check-and-insert of ``create_if_no_open`` atomic with a plain lock."""

    def __init__(self):
        self._rows: dict[int, AttendanceSession] = {}
        self._id = 0
        self._mutex = threading.Lock()

    def add(self, session: AttendanceSession) -> AttendanceSession:
        with self._mutex:
            self._id = max(self._id, session.session_id)
            self._rows[session.session_id] = session
        return session

    def list_for_user_and_date(self, user_id: int, business_date: date):
        return sorted(
            (s for s in self._rows.values() if s.user_id == user_id and s.business_date == business_date),
            key=lambda s: s.session_number,
        )

    def get_by_id(self, session_id: int) -> Optional[AttendanceSession]:
        return self._rows.get(session_id)

    def create_if_no_open(self, new: NewSession, *, max_sessions: int) -> Optional[AttendanceSession]:
        with self._mutex:
            day = [s for s in self._rows.values() if s.user_id == new.user_id and s.business_date == new.business_date]
            if any(s.is_open for s in day) or len(day) >= max_sessions:
                return None
            self._id += 1
            session = AttendanceSession(
                session_id=self._id,
                user_id=new.user_id,
                business_date=new.business_date,
                session_number=len(day) + 1,
                status=new.status,
                check_in=new.check_in,
                shift=new.shift,
                notes=new.notes,
                check_in_evidence=new.check_in_evidence,
            )
            self._rows[session.session_id] = session
            return session

    def update_session(self, session_id: int, changes: SessionUpdate) -> AttendanceSession:
        with self._mutex:
            current = self._rows.get(session_id)
            if current is None:
                raise NotFoundError("Sesi tidak ditemukan")
            values = {f.name: getattr(changes, f.name) for f in fields(SessionUpdate) if f.name != "clear_break_end"}
            updated = replace(current, **{k: v for k, v in values.items() if v is not None})
            if changes.clear_break_end:
                updated = replace(updated, break_end=None, break_end_evidence=NO_EVIDENCE)
            self._rows[session_id] = updated
            return updated

    def list_history(self, *, user_id=None, start_date=None, end_date=None, limit: int = 500):
        items = [
            s
            for s in self._rows.values()
            if (user_id is None or s.user_id == user_id)
            and (start_date is None or s.business_date >= start_date)
            and (end_date is None or s.business_date <= end_date)
        ]
        items.sort(key=lambda s: (s.business_date, s.session_number), reverse=True)
        return items[:limit]

    def count_users_working_on(self, business_date: date) -> int:
        return len({s.user_id for s in self._rows.values() if s.business_date == business_date and s.status in WORKING_STATUSES})


class InMemoryAnnouncements:
    def __init__(self):
        self._rows: dict[int, Announcement] = {}
        self._id = 0

    def list_all(self):
        return sorted(self._rows.values(), key=lambda a: a.created_at, reverse=True)

    def create(self, *, title, content, image_url, expires_at, author_id) -> Announcement:
        self._id += 1
        a = Announcement(
            announcement_id=self._id,
            title=title,
            content=content,
            created_at=datetime(2025, 1, 1, tzinfo=timezone.utc).replace(minute=self._id),
            image_url=image_url,
            expires_at=expires_at,
            author_id=author_id,
        )
        self._rows[a.announcement_id] = a
        return a

    def delete_by_id(self, announcement_id: int) -> bool:
        return self._rows.pop(announcement_id, None) is not None


class InMemoryComplaints:
    def __init__(self):
        self._rows: dict[int, Complaint] = {}
        self._photos: list[ComplaintPhoto] = []
        self._id = 0

    def create(self, *, user_id: int, title: str, description: str) -> Complaint:
        self._id += 1
        c = Complaint(
            complaint_id=self._id,
            user_id=user_id,
            title=title,
            description=description,
            status=ComplaintStatus.PENDING,
            created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
        )
        self._rows[c.complaint_id] = c
        return c

    def add_photo(self, *, complaint_id: int, photo_url: str, caption: Optional[str]) -> ComplaintPhoto:
        p = ComplaintPhoto(photo_id=len(self._photos) + 1, complaint_id=complaint_id, photo_url=photo_url, caption=caption)
        self._photos.append(p)
        return p

    def list_for_user(self, user_id: int):
        return [c for c in self._rows.values() if c.user_id == user_id]

    def list_all(self):
        return list(self._rows.values())

    def list_photos(self, complaint_id: int):
        return [p for p in self._photos if p.complaint_id == complaint_id]

    def get_by_id(self, complaint_id: int) -> Optional[Complaint]:
        return self._rows.get(complaint_id)

    def update_status(self, complaint_id: int, status: ComplaintStatus) -> Optional[Complaint]:
        c = self._rows.get(complaint_id)
        if not c:
            return None
        c = replace(c, status=status)
        self._rows[complaint_id] = c
        return c

    def count_by_status(self, status: ComplaintStatus) -> int:
        return sum(1 for c in self._rows.values() if c.status == status)


@dataclass
class FakeFileStore:
    """Records saved images instead of writing them."""

    saved: list[tuple[str, str]] = field(default_factory=list)

    def save_image(self, photo: PhotoUpload, *, folder: str, prefix: str) -> str:
        self.saved.append((folder, prefix))
        return f"/uploads/{folder}/{prefix}.jpg"


@pytest.fixture
def users_repo():
    return InMemoryUsers(
        [
            User(
                user_id=ADMIN_ID,
                username="admin",
                password_hash=generate_password_hash("admin123"),
                full_name="Administrator",
                role=Role.ADMIN,
            ),
            User(
                user_id=EMPLOYEE_ID,
                username="3201001",
                password_hash=generate_password_hash("password123"),
                full_name="Budi Santoso",
                nik="3201001",
                shift="Shift 1",
            ),
            User(
                user_id=OTHER_EMPLOYEE_ID,
                username="3201002",
                password_hash=generate_password_hash("password123"),
                full_name="Siti Aminah",
                nik="3201002",
                shift="Shift 2",
            ),
        ]
    )


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def files():
    return FakeFileStore()


@pytest.fixture
def clock():
    return BusinessClock()


@pytest.fixture
def container(users_repo, attendance_repo, files, clock):
    return assemble(
        conn=None,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        announcements_repo=InMemoryAnnouncements(),
        complaints_repo=InMemoryComplaints(),
        files=files,
        clock=clock,
    )


@pytest.fixture
def attendance_service(container):
    return container.attendance_service


@pytest.fixture
def photo():
    return PhotoUpload(data=b"not-decoded-by-the-fake-store", filename="selfie.png")
