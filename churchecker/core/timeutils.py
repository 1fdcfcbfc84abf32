import calendar
from datetime import date, datetime, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from pydantic import TypeAdapter

from churchecker.config.settings import settings

# PostgREST trims trailing zeros of fractional seconds, which datetime.fromisoformat rejects before 3.11
_DATETIME = TypeAdapter(datetime)


def local_tz() -> ZoneInfo:
    return ZoneInfo(settings.timezone)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def today_local() -> date:
    """Today's calendar day in the configured church timezone"""
    return datetime.now(local_tz()).date()


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a month"""
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def resolve_month(year: Optional[int], month: Optional[int]) -> Tuple[int, int]:
    """Fill a missing year/month from today"""
    today = today_local()
    return year or today.year, month or today.month


def parse_timestamp(value) -> Optional[datetime]:
    """Parse a timestamptz coming back from PostgREST (ISO string) into an aware datetime"""
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = _DATETIME.validate_python(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
