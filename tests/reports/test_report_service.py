import csv
import io
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from src.attendance_tracker.attendance_tracker.reports.service import CSV_FIELDS

JKT = ZoneInfo("Asia/Jakarta")


def _jkt(*args) -> datetime:
    return datetime(*args, tzinfo=JKT).astimezone(timezone.utc)


def _work_day(service, user_id, day, start=9, end=17):
    service.clock_in(user_id, now=_jkt(2025, 3, day, start, 0))
    service.break_start(user_id, now=_jkt(2025, 3, day, 12, 0))
    service.break_end(user_id, now=_jkt(2025, 3, day, 13, 0))
    service.clock_out(user_id, now=_jkt(2025, 3, day, end, 0))


def test_monthly_report_groups_by_business_date(container, attendance_service):
    _work_day(attendance_service, 2, 3)
    _work_day(attendance_service, 2, 4)
    attendance_service.resume(2, now=_jkt(2025, 3, 4, 19, 0))
    attendance_service.clock_out(2, now=_jkt(2025, 3, 5, 1, 0))

    data = container.report_service.monthly_report(user_id=2, month="2025-03")

    assert [r["date"] for r in data.rows] == ["2025-03-03", "2025-03-04"]
    first, second = data.rows
    assert first["first_check_in"] == "09:00"
    assert first["last_check_out"] == "17:00"
    assert first["net_work"] == "7j 0m"
    assert second["sessions"] == 2
    assert second["statuses"] == "present,late"
    assert second["last_check_out"] == "01:00"
    assert second["net_work_mins"] == 420 + 360
    assert data.summary["days"] == 2
    assert data.summary["total_net_work_mins"] == 420 + 780


def test_report_csv_has_bom_and_header(container, attendance_service):
    _work_day(attendance_service, 2, 3)
    data = container.report_service.monthly_report(user_id=2, month="2025-03")

    payload = container.report_service.to_csv(data)

    assert payload.startswith(b"\xef\xbb\xbf")
    rows = list(csv.DictReader(io.StringIO(payload.decode("utf-8-sig"))))
    assert list(rows[0].keys()) == CSV_FIELDS
    assert rows[0]["net_work_mins"] == "420"


def test_dashboard_stats_counts_distinct_workers(container, attendance_service):
    attendance_service.clock_in(2, now=_jkt(2025, 3, 10, 6, 0))
    attendance_service.clock_out(2, now=_jkt(2025, 3, 10, 8, 0))
    attendance_service.clock_in(2, now=_jkt(2025, 3, 10, 9, 0))
    attendance_service.permit(3, permit_type="sick", now=_jkt(2025, 3, 10, 6, 0))

    stats = container.report_service.dashboard_stats(now=_jkt(2025, 3, 10, 10, 0))

    assert stats == {"totalEmployees": 2, "presentToday": 1}
