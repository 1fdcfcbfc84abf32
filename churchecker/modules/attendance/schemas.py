from pydantic import BaseModel, Field
from typing import Optional, List
import datetime as dt
from churchecker.modules.people.schemas import PersonResponse


class CheckInRequest(BaseModel):
    person_id: str
    date: Optional[dt.date] = None  # defaults to today in the church timezone


class AttendanceResponse(BaseModel):
    id: str
    student_id: str
    church_id: str
    date: dt.date
    checked_by: Optional[str] = None
    created_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True


class RosterEntry(PersonResponse):
    checked_in: bool = False


class DayAttendanceResponse(BaseModel):
    date: dt.date
    weekday: int  # 0 = Sunday
    records: List[AttendanceResponse] = []
    eligible: List[RosterEntry] = []
    ineligible: List[RosterEntry] = []
    checked_in_count: int = 0


class DailyCount(BaseModel):
    date: dt.date
    students: int = 0
    teachers: int = 0
    total: int = 0


class CalendarResponse(BaseModel):
    year: int
    month: int
    days: List[DailyCount]


class PersonStatsResponse(BaseModel):
    person_id: str
    year: int
    month: int = Field(ge=1, le=12)
    expected_days: int
    attended_days: int
    rate: float
    attended_dates: List[dt.date] = []
