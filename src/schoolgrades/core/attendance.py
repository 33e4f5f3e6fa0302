import calendar
from datetime import date
from typing import Iterable, Optional, Tuple

from schoolgrades.core.grades import round_half_up
from schoolgrades.core.models import AttendanceRecord, AttendanceSummary


PRESENT_STATUSES = ("Present", "Late")


def month_bounds(day: date) -> Tuple[date, date]:
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def summarize_attendance(
    records: Iterable[AttendanceRecord],
    *,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> AttendanceSummary:
    """
    Attendance rate over the recorded days in [start, end].

    Late counts as present, Excused does not. With no records the rate is 100.
    """
    total = 0
    present = 0
    for record in records:
        if start is not None and record.date < start:
            continue
        if end is not None and record.date > end:
            continue
        total += 1
        if record.status in PRESENT_STATUSES:
            present += 1

    rate = round_half_up((present / total) * 100) if total > 0 else 100
    return AttendanceSummary(rate=rate, absences=total - present, total_days=total)
