from fastapi import APIRouter, Depends
from churchecker.database.supabase_client import get_supabase
from churchecker.modules.prayers.schemas import (
    PrayerCreate, PrayerUpdate, PrayerAnswerUpdate, PrayerStatusUpdate, PrayerResponse,
    PrayerCommentCreate, PrayerCommentResponse, PrayerCategory, PrayerStatus
)
from churchecker.modules.prayers.service import PrayerService, PrayerCommentService
from churchecker.core.dependencies import ChurchAccess, require_church_member, require_church_capability
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/churches/{church_id}/prayers", tags=["prayers"])


def get_prayer_service(supabase: Client = Depends(get_supabase)) -> PrayerService:
    return PrayerService(supabase)


def get_prayer_comment_service(supabase: Client = Depends(get_supabase)) -> PrayerCommentService:
    return PrayerCommentService(supabase)


@router.get("", response_model=List[PrayerResponse])
async def list_prayers(
    status: Optional[PrayerStatus] = None,
    category: Optional[PrayerCategory] = None,
    access: ChurchAccess = Depends(require_church_member),
    service: PrayerService = Depends(get_prayer_service)
):
    """List prayer requests, newest first"""
    return service.list_prayers(access, status, category)


@router.post("", response_model=PrayerResponse, status_code=201)
async def create_prayer(
    prayer_data: PrayerCreate,
    access: ChurchAccess = Depends(require_church_capability("prayers:write")),
    service: PrayerService = Depends(get_prayer_service)
):
    return service.create_prayer(access, prayer_data)


@router.get("/{prayer_id}", response_model=PrayerResponse)
async def get_prayer(
    prayer_id: str,
    access: ChurchAccess = Depends(require_church_member),
    service: PrayerService = Depends(get_prayer_service)
):
    return service.get_prayer(access, prayer_id)


@router.put("/{prayer_id}", response_model=PrayerResponse)
async def update_prayer(
    prayer_id: str,
    prayer_data: PrayerUpdate,
    access: ChurchAccess = Depends(require_church_member),
    service: PrayerService = Depends(get_prayer_service)
):
    """Edit a prayer request (author or church admin)"""
    return service.update_prayer(access, prayer_id, prayer_data)


@router.delete("/{prayer_id}", status_code=204)
async def delete_prayer(
    prayer_id: str,
    access: ChurchAccess = Depends(require_church_member),
    service: PrayerService = Depends(get_prayer_service)
):
    """Delete a prayer request (author or church admin)"""
    service.delete_prayer(access, prayer_id)
    return None


@router.post("/{prayer_id}/answer", response_model=PrayerResponse)
async def set_answered(
    prayer_id: str,
    answer_data: PrayerAnswerUpdate,
    access: ChurchAccess = Depends(require_church_member),
    service: PrayerService = Depends(get_prayer_service)
):
    """Mark a prayer request answered or unanswered"""
    return service.set_answered(access, prayer_id, answer_data)


@router.put("/{prayer_id}/status", response_model=PrayerResponse)
async def set_status(
    prayer_id: str,
    status_data: PrayerStatusUpdate,
    access: ChurchAccess = Depends(require_church_member),
    service: PrayerService = Depends(get_prayer_service)
):
    return service.set_status(access, prayer_id, status_data.status)


@router.get("/{prayer_id}/comments", response_model=List[PrayerCommentResponse])
async def list_comments(
    prayer_id: str,
    access: ChurchAccess = Depends(require_church_member),
    service: PrayerCommentService = Depends(get_prayer_comment_service)
):
    return service.list_comments(access.church_id, prayer_id)


@router.post("/{prayer_id}/comments", response_model=PrayerCommentResponse, status_code=201)
async def add_comment(
    prayer_id: str,
    comment_data: PrayerCommentCreate,
    access: ChurchAccess = Depends(require_church_capability("prayers:write")),
    service: PrayerCommentService = Depends(get_prayer_comment_service)
):
    return service.add_comment(access, prayer_id, comment_data)


@router.delete("/{prayer_id}/comments/{comment_id}", status_code=204)
async def delete_comment(
    prayer_id: str,
    comment_id: str,
    access: ChurchAccess = Depends(require_church_member),
    service: PrayerCommentService = Depends(get_prayer_comment_service)
):
    """Delete a comment (author or church admin)"""
    service.delete_comment(access, prayer_id, comment_id)
    return None
