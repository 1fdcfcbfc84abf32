from fastapi import APIRouter, Depends, Query
import datetime as dt
from churchecker.database.supabase_client import get_supabase
from churchecker.modules.attendance.schemas import (
    CheckInRequest, AttendanceResponse, DayAttendanceResponse, CalendarResponse, PersonStatsResponse
)
from churchecker.modules.attendance.service import AttendanceService
from churchecker.modules.people.schemas import PersonType
from churchecker.core.dependencies import ChurchAccess, require_church_member, require_church_capability
from supabase import Client
from typing import Optional

router = APIRouter(prefix="/churches/{church_id}/attendance", tags=["attendance"])


def get_attendance_service(supabase: Client = Depends(get_supabase)) -> AttendanceService:
    return AttendanceService(supabase)


@router.post("", response_model=AttendanceResponse, status_code=201)
async def check_in(
    check_in_data: CheckInRequest,
    access: ChurchAccess = Depends(require_church_capability("attendance:check")),
    service: AttendanceService = Depends(get_attendance_service)
):
    """Check a person in (admin or teacher); defaults to today"""
    return service.check_in(access, check_in_data.person_id, check_in_data.date)


@router.get("", response_model=DayAttendanceResponse)
async def get_day(
    date: Optional[dt.date] = None,
    type: Optional[PersonType] = None,
    access: ChurchAccess = Depends(require_church_member),
    service: AttendanceService = Depends(get_attendance_service)
):
    """Attendance of a day with the roster split by eligibility"""
    return service.get_day(access.church_id, date, type)


@router.get("/calendar", response_model=CalendarResponse)
async def get_calendar(
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    access: ChurchAccess = Depends(require_church_member),
    service: AttendanceService = Depends(get_attendance_service)
):
    """Daily check-in counts for a month"""
    return service.get_calendar(access.church_id, year, month)


@router.get("/people/{person_id}/stats", response_model=PersonStatsResponse)
async def get_person_stats(
    person_id: str,
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    access: ChurchAccess = Depends(require_church_member),
    service: AttendanceService = Depends(get_attendance_service)
):
    """Monthly attendance rate of one person"""
    return service.get_person_stats(access.church_id, person_id, year, month)


@router.delete("/{person_id}", status_code=204)
async def cancel_check_in(
    person_id: str,
    date: Optional[dt.date] = None,
    access: ChurchAccess = Depends(require_church_capability("attendance:check")),
    service: AttendanceService = Depends(get_attendance_service)
):
    """Cancel a check-in (admin or teacher); defaults to today"""
    service.cancel_check_in(access.church_id, person_id, date)
    return None
