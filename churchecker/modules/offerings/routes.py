from fastapi import APIRouter, Depends
from datetime import date
from churchecker.database.supabase_client import get_supabase
from churchecker.modules.offerings.schemas import (
    OfferingCreate, OfferingUpdate, OfferingResponse, OfferingSummaryResponse, OfferingType
)
from churchecker.modules.offerings.service import OfferingService
from churchecker.core.dependencies import ChurchAccess, require_church_member, require_church_capability
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/churches/{church_id}/offerings", tags=["offerings"])


def get_offering_service(supabase: Client = Depends(get_supabase)) -> OfferingService:
    return OfferingService(supabase)


@router.get("", response_model=List[OfferingResponse])
async def list_offerings(
    offering_type: Optional[OfferingType] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    access: ChurchAccess = Depends(require_church_member),
    service: OfferingService = Depends(get_offering_service)
):
    """List offerings, newest first"""
    return service.list_offerings(access.church_id, offering_type, start, end)


@router.get("/summary", response_model=OfferingSummaryResponse)
async def get_offering_summary(
    access: ChurchAccess = Depends(require_church_member),
    service: OfferingService = Depends(get_offering_service)
):
    """Overall and this-month totals by offering type"""
    return service.get_summary(access.church_id)


@router.post("", response_model=OfferingResponse, status_code=201)
async def create_offering(
    offering_data: OfferingCreate,
    access: ChurchAccess = Depends(require_church_capability("ledger:write")),
    service: OfferingService = Depends(get_offering_service)
):
    """Record an offering (church admin)"""
    return service.create_offering(access.church_id, offering_data, access.user_id)


@router.get("/{offering_id}", response_model=OfferingResponse)
async def get_offering(
    offering_id: str,
    access: ChurchAccess = Depends(require_church_member),
    service: OfferingService = Depends(get_offering_service)
):
    return service.get_record(access.church_id, offering_id)


@router.put("/{offering_id}", response_model=OfferingResponse)
async def update_offering(
    offering_id: str,
    offering_data: OfferingUpdate,
    access: ChurchAccess = Depends(require_church_capability("ledger:write")),
    service: OfferingService = Depends(get_offering_service)
):
    return service.update_offering(access.church_id, offering_id, offering_data)


@router.delete("/{offering_id}", status_code=204)
async def delete_offering(
    offering_id: str,
    access: ChurchAccess = Depends(require_church_capability("ledger:write")),
    service: OfferingService = Depends(get_offering_service)
):
    service.delete_record(access.church_id, offering_id)
    return None
