from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .announcements.mysql_announcement_repository import MySQLAnnouncementRepository
from .announcements.service import AnnouncementService
from .attendance.factory import LatenessStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import BusinessClock
from .complaints.mysql_complaint_repository import MySQLComplaintRepository
from .complaints.service import ComplaintService
from .core.constants import BUSINESS_TIMEZONE, DAY_CUTOVER_HOUR, MAX_SESSIONS_PER_DAY
from .database.connection import DBConfig, DatabaseConnection
from .evidence.store import LocalEvidenceStore, LocalFileStore
from .reports.service import ReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, EmployeeService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: Any
    attendance_repo: Any
    announcements_repo: Any
    complaints_repo: Any

    files: Any
    evidence_store: Any

    auth_service: AuthService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    announcement_service: AnnouncementService
    complaint_service: ComplaintService
    report_service: ReportService


def assemble(
    *,
    conn: Optional[DatabaseConnection],
    users_repo,
    attendance_repo,
    announcements_repo,
    complaints_repo,
    files,
    evidence_store=None,
    clock: Optional[BusinessClock] = None,
    max_sessions: int = MAX_SESSIONS_PER_DAY,
) -> Container:
    """Wire services on top of whatever repositories are given (MySQL or in-memory)."""

    clock = clock or BusinessClock()
    evidence_store = evidence_store or LocalEvidenceStore(files)

    return Container(
        conn=conn,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        announcements_repo=announcements_repo,
        complaints_repo=complaints_repo,
        files=files,
        evidence_store=evidence_store,
        auth_service=AuthService(users_repo),
        employee_service=EmployeeService(users_repo, files),
        attendance_service=AttendanceService(
            attendance_repo,
            users_repo,
            evidence_store,
            clock=clock,
            strategy_factory=LatenessStrategyFactory(),
            max_sessions=max_sessions,
        ),
        announcement_service=AnnouncementService(announcements_repo, files),
        complaint_service=ComplaintService(complaints_repo, files),
        report_service=ReportService(attendance_repo, users_repo, clock=clock),
    )


def build_container(
    *,
    db_config: dict,
    upload_dir: str,
    tz_name: str = BUSINESS_TIMEZONE,
    cutover_hour: int = DAY_CUTOVER_HOUR,
    max_sessions: int = MAX_SESSIONS_PER_DAY,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        announcements_repo=MySQLAnnouncementRepository(conn),
        complaints_repo=MySQLComplaintRepository(conn),
        files=LocalFileStore(upload_dir),
        clock=BusinessClock(tz_name=tz_name, cutover_hour=int(cutover_hour)),
        max_sessions=max_sessions,
    )
