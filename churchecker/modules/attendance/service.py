from supabase import Client
from datetime import date
from churchecker.core.db_utils import first_row, is_unique_violation
from churchecker.core.dependencies import ChurchAccess
from churchecker.core.timeutils import month_bounds, resolve_month, today_local
from churchecker.modules.attendance import calendar
from churchecker.modules.attendance.schemas import (
    AttendanceResponse, RosterEntry, DayAttendanceResponse, DailyCount, CalendarResponse, PersonStatsResponse
)
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

ALREADY_CHECKED_IN = "Already checked in for this date"
NOT_CHECKED_IN = "Not checked in for this date"


class AttendanceService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _get_person(self, church_id: str, person_id: str) -> dict:
        person = first_row(
            self.supabase.table("students")
            .select("*")
            .eq("id", person_id)
            .eq("church_id", church_id)
            .limit(1)
            .execute()
        )
        if not person:
            raise HTTPException(status_code=404, detail="Person not found in this church")
        return person

    def _find_record(self, person_id: str, day: date) -> Optional[dict]:
        return first_row(
            self.supabase.table("attendance")
            .select("*")
            .eq("student_id", person_id)
            .eq("date", day.isoformat())
            .limit(1)
            .execute()
        )

    def check_in(self, access: ChurchAccess, person_id: str, day: Optional[date] = None) -> AttendanceResponse:
        """Record one check-in per person per day; a second one is 409"""
        day = day or today_local()
        try:
            self._get_person(access.church_id, person_id)
            if self._find_record(person_id, day):
                raise HTTPException(status_code=409, detail=ALREADY_CHECKED_IN)

            result = self.supabase.table("attendance").insert({
                "student_id": person_id,
                "church_id": access.church_id,
                "date": day.isoformat(),
                "checked_by": access.user_id,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to record attendance")

            logger.info(f"Person {person_id} checked in on {day} by {access.user_id}")
            return AttendanceResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            # Concurrent check-in won the unique (student_id, date) constraint
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail=ALREADY_CHECKED_IN)
            logger.error(f"Error checking in person {person_id} on {day}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def cancel_check_in(self, church_id: str, person_id: str, day: Optional[date] = None) -> bool:
        day = day or today_local()
        try:
            result = self.supabase.table("attendance")\
                .delete()\
                .eq("student_id", person_id)\
                .eq("church_id", church_id)\
                .eq("date", day.isoformat())\
                .execute()
        except Exception as e:
            logger.error(f"Error cancelling check-in of {person_id} on {day}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail=NOT_CHECKED_IN)
        logger.info(f"Check-in of person {person_id} on {day} cancelled")
        return True

    def get_day(self, church_id: str, day: Optional[date] = None, person_type: Optional[str] = None) -> DayAttendanceResponse:
        """The day's check-ins and the roster split into eligible and ineligible people"""
        day = day or today_local()
        try:
            query = self.supabase.table("students")\
                .select("*")\
                .eq("church_id", church_id)
            if person_type:
                query = query.eq("type", person_type)
            people = query.order("name").execute().data or []

            records = self.supabase.table("attendance")\
                .select("*")\
                .eq("church_id", church_id)\
                .eq("date", day.isoformat())\
                .execute().data or []
        except Exception as e:
            logger.error(f"Error loading attendance of church {church_id} on {day}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        checked_ids = {r["student_id"] for r in records}
        eligible, ineligible = [], []
        for person in people:
            entry = RosterEntry(**person, checked_in=person["id"] in checked_ids)
            if calendar.is_eligible(person.get("attendance_days"), day):
                eligible.append(entry)
            else:
                ineligible.append(entry)

        person_ids = {p["id"] for p in people}
        day_records = [AttendanceResponse(**r) for r in records if r["student_id"] in person_ids]
        return DayAttendanceResponse(
            date=day,
            weekday=calendar.weekday_index(day),
            records=day_records,
            eligible=eligible,
            ineligible=ineligible,
            checked_in_count=len(day_records),
        )

    def get_calendar(self, church_id: str, year: Optional[int] = None, month: Optional[int] = None) -> CalendarResponse:
        """Per-day check-in counts for a month"""
        year, month = resolve_month(year, month)
        first, last = month_bounds(year, month)
        try:
            people = self.supabase.table("students")\
                .select("id, type")\
                .eq("church_id", church_id)\
                .execute().data or []
            records = self.supabase.table("attendance")\
                .select("student_id, date")\
                .eq("church_id", church_id)\
                .gte("date", first.isoformat())\
                .lte("date", last.isoformat())\
                .execute().data or []
        except Exception as e:
            logger.error(f"Error loading attendance calendar of church {church_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        days = calendar.daily_counts(people, records, year, month)
        return CalendarResponse(year=year, month=month, days=[DailyCount(**d) for d in days])

    def get_person_stats(
        self,
        church_id: str,
        person_id: str,
        year: Optional[int] = None,
        month: Optional[int] = None
    ) -> PersonStatsResponse:
        """Expected days, attended days and rate of one person for a month"""
        year, month = resolve_month(year, month)
        first, last = month_bounds(year, month)
        try:
            person = self._get_person(church_id, person_id)
            records = self.supabase.table("attendance")\
                .select("date")\
                .eq("student_id", person_id)\
                .gte("date", first.isoformat())\
                .lte("date", last.isoformat())\
                .execute().data or []
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error loading attendance stats of {person_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        today = today_local()
        days = person.get("attendance_days")
        attended = calendar.attended_dates(records, year, month, today)
        return PersonStatsResponse(
            person_id=person_id,
            year=year,
            month=month,
            expected_days=calendar.expected_days(days, year, month, today),
            attended_days=len(attended),
            rate=calendar.attendance_rate(days, records, year, month, today),
            attended_dates=attended,
        )
