"""
Attendance calendar math.

Pure functions of (attendance day-set, records, calendar window) so they can be
tested without a database. Weekday indices follow the roster convention:
0 = Sunday .. 6 = Saturday. An empty or missing day-set means every day.
"""

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Set

from churchecker.core.timeutils import month_bounds


def weekday_index(day: date) -> int:
    """0 = Sunday .. 6 = Saturday"""
    return (day.weekday() + 1) % 7


def is_eligible(attendance_days: Optional[Sequence[int]], day: date) -> bool:
    if not attendance_days:
        return True
    return weekday_index(day) in attendance_days


def _as_date(value) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def counted_window(year: int, month: int, today: date) -> Optional[tuple]:
    """(first, last) days of the month that have elapsed by today, or None if none have"""
    first, last = month_bounds(year, month)
    if today < first:
        return None
    return first, min(last, today)


def expected_days(attendance_days: Optional[Sequence[int]], year: int, month: int, today: date) -> int:
    """Eligible days of the month up to and including today"""
    window = counted_window(year, month, today)
    if window is None:
        return 0
    first, last = window
    return sum(
        1 for offset in range((last - first).days + 1)
        if is_eligible(attendance_days, date.fromordinal(first.toordinal() + offset))
    )


def attended_dates(records: Iterable, year: int, month: int, today: date) -> List[date]:
    """Distinct check-in days inside the counted window, ascending"""
    window = counted_window(year, month, today)
    if window is None:
        return []
    first, last = window
    days: Set[date] = set()
    for record in records:
        day = _as_date(record["date"] if isinstance(record, dict) else record)
        if first <= day <= last:
            days.add(day)
    return sorted(days)


def attendance_rate(
    attendance_days: Optional[Sequence[int]],
    records: Iterable,
    year: int,
    month: int,
    today: date
) -> float:
    """
    Attended eligible days / expected days for the month, between 0.0 and 1.0.
    Check-ins on days outside attendance_days do not count; 0.0 when nothing was expected.
    """
    expected = expected_days(attendance_days, year, month, today)
    if expected == 0:
        return 0.0
    attended = [day for day in attended_dates(records, year, month, today) if is_eligible(attendance_days, day)]
    return len(attended) / expected


def daily_counts(people: Iterable[Dict], records: Iterable[Dict], year: int, month: int) -> List[Dict]:
    """Check-ins per day of the month split by person type"""
    person_types = {p["id"]: p.get("type") or "student" for p in people}
    first, last = month_bounds(year, month)
    counts = defaultdict(lambda: {"students": 0, "teachers": 0})
    for record in records:
        day = _as_date(record["date"])
        if not first <= day <= last:
            continue
        if person_types.get(record["student_id"]) == "teacher":
            counts[day]["teachers"] += 1
        else:
            counts[day]["students"] += 1

    days = []
    for offset in range((last - first).days + 1):
        day = date.fromordinal(first.toordinal() + offset)
        entry = counts.get(day, {"students": 0, "teachers": 0})
        days.append({
            "date": day,
            "students": entry["students"],
            "teachers": entry["teachers"],
            "total": entry["students"] + entry["teachers"],
        })
    return days
