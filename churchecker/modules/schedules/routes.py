from fastapi import APIRouter, Depends, Query
from churchecker.database.supabase_client import get_supabase
from churchecker.modules.schedules.schemas import (
    ScheduleCreate, ScheduleUpdate, ScheduleStatusUpdate, ScheduleResponse, ScheduleSummaryResponse, ScheduleStatus
)
from churchecker.modules.schedules.service import ScheduleService
from churchecker.core.dependencies import ChurchAccess, require_church_member, require_church_capability
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/churches/{church_id}/schedules", tags=["schedules"])


def get_schedule_service(supabase: Client = Depends(get_supabase)) -> ScheduleService:
    return ScheduleService(supabase)


@router.get("", response_model=List[ScheduleResponse])
async def list_schedules(
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    status: Optional[ScheduleStatus] = None,
    access: ChurchAccess = Depends(require_church_member),
    service: ScheduleService = Depends(get_schedule_service)
):
    """List service-duty schedules by date"""
    return service.list_schedules(access.church_id, year, month, status)


@router.get("/summary", response_model=ScheduleSummaryResponse)
async def get_schedule_summary(
    year: Optional[int] = Query(default=None, ge=2000, le=2100),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    access: ChurchAccess = Depends(require_church_member),
    service: ScheduleService = Depends(get_schedule_service)
):
    return service.get_summary(access.church_id, year, month)


@router.post("", response_model=ScheduleResponse, status_code=201)
async def create_schedule(
    schedule_data: ScheduleCreate,
    access: ChurchAccess = Depends(require_church_capability("schedules:write")),
    service: ScheduleService = Depends(get_schedule_service)
):
    """Assign a service duty (church admin)"""
    return service.create_schedule(access.church_id, schedule_data, access.user_id)


@router.get("/{schedule_id}", response_model=ScheduleResponse)
async def get_schedule(
    schedule_id: str,
    access: ChurchAccess = Depends(require_church_member),
    service: ScheduleService = Depends(get_schedule_service)
):
    return service.get_record(access.church_id, schedule_id)


@router.put("/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule(
    schedule_id: str,
    schedule_data: ScheduleUpdate,
    access: ChurchAccess = Depends(require_church_capability("schedules:write")),
    service: ScheduleService = Depends(get_schedule_service)
):
    return service.update_schedule(access.church_id, schedule_id, schedule_data)


@router.put("/{schedule_id}/status", response_model=ScheduleResponse)
async def set_schedule_status(
    schedule_id: str,
    status_data: ScheduleStatusUpdate,
    access: ChurchAccess = Depends(require_church_capability("schedules:write")),
    service: ScheduleService = Depends(get_schedule_service)
):
    """Mark a duty completed or cancelled"""
    return service.set_status(access.church_id, schedule_id, status_data.status)


@router.delete("/{schedule_id}", status_code=204)
async def delete_schedule(
    schedule_id: str,
    access: ChurchAccess = Depends(require_church_capability("schedules:write")),
    service: ScheduleService = Depends(get_schedule_service)
):
    service.delete_record(access.church_id, schedule_id)
    return None
