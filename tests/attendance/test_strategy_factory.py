from src.attendance_tracker.attendance_tracker.attendance.factory import LatenessStrategyFactory
from src.attendance_tracker.attendance_tracker.attendance.strategies.present_strategy import PresentStrategy
from src.attendance_tracker.attendance_tracker.attendance.strategies.threshold_strategy import ThresholdStrategy
from src.attendance_tracker.attendance_tracker.core.enums import AttendanceStatus
from src.attendance_tracker.attendance_tracker.shifts.model import ShiftRule


def test_shift_1_on_time_until_0700():
    strategy = LatenessStrategyFactory().for_clock_in(shift="Shift 1")

    assert isinstance(strategy, ThresholdStrategy)
    assert strategy.decide(minutes_of_day=6 * 60).status == AttendanceStatus.PRESENT
    assert strategy.decide(minutes_of_day=7 * 60).status == AttendanceStatus.PRESENT
    assert strategy.decide(minutes_of_day=7 * 60 + 1).status == AttendanceStatus.LATE


def test_shift_2_late_after_1200():
    strategy = LatenessStrategyFactory().for_clock_in(shift="Shift 2")

    assert strategy.decide(minutes_of_day=8 * 60).status == AttendanceStatus.PRESENT
    assert strategy.decide(minutes_of_day=12 * 60 + 5).status == AttendanceStatus.LATE


def test_other_shifts_are_always_present():
    factory = LatenessStrategyFactory()

    for shift in ("Management", "Shift 3", "Long Shift", "Unknown", None):
        strategy = factory.for_clock_in(shift=shift)
        assert isinstance(strategy, PresentStrategy)
        assert strategy.decide(minutes_of_day=23 * 60).status == AttendanceStatus.PRESENT


def test_resume_uses_0700_threshold():
    strategy = LatenessStrategyFactory().for_resume()

    assert strategy.decide(minutes_of_day=6 * 60 + 30).status == AttendanceStatus.PRESENT
    assert strategy.decide(minutes_of_day=13 * 60).status == AttendanceStatus.LATE


def test_custom_shift_rules():
    factory = LatenessStrategyFactory(shift_rules={"Night": ShiftRule("Night", 22 * 60)})

    strategy = factory.for_clock_in(shift="Night")
    assert strategy.decide(minutes_of_day=22 * 60 + 1).status == AttendanceStatus.LATE
