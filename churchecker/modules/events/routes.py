from fastapi import APIRouter, Depends
from datetime import datetime
from churchecker.database.supabase_client import get_supabase
from churchecker.modules.events.schemas import EventCreate, EventUpdate, EventResponse, EventType
from churchecker.modules.events.service import EventService
from churchecker.core.dependencies import ChurchAccess, require_church_member, require_church_capability
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/churches/{church_id}/events", tags=["events"])


def get_event_service(supabase: Client = Depends(get_supabase)) -> EventService:
    return EventService(supabase)


@router.get("", response_model=List[EventResponse])
async def list_events(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    event_type: Optional[EventType] = None,
    access: ChurchAccess = Depends(require_church_member),
    service: EventService = Depends(get_event_service)
):
    """List calendar events in start order"""
    return service.list_events(access.church_id, start, end, event_type)


@router.post("", response_model=EventResponse, status_code=201)
async def create_event(
    event_data: EventCreate,
    access: ChurchAccess = Depends(require_church_capability("events:write")),
    service: EventService = Depends(get_event_service)
):
    """Add a calendar event (church admin)"""
    return service.create_event(access.church_id, event_data, access.user_id)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: str,
    access: ChurchAccess = Depends(require_church_member),
    service: EventService = Depends(get_event_service)
):
    return service.get_record(access.church_id, event_id)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    event_data: EventUpdate,
    access: ChurchAccess = Depends(require_church_capability("events:write")),
    service: EventService = Depends(get_event_service)
):
    return service.update_event(access.church_id, event_id, event_data)


@router.delete("/{event_id}", status_code=204)
async def delete_event(
    event_id: str,
    access: ChurchAccess = Depends(require_church_capability("events:write")),
    service: EventService = Depends(get_event_service)
):
    service.delete_record(access.church_id, event_id)
    return None
