from fastapi import APIRouter, Depends, File, UploadFile
from churchecker.database.supabase_client import get_supabase
from churchecker.modules.announcements.schemas import (
    AnnouncementCreate, AnnouncementUpdate, AnnouncementResponse, CommentCreate, CommentResponse
)
from churchecker.modules.announcements.service import AnnouncementService, AnnouncementCommentService
from churchecker.core.dependencies import ChurchAccess, require_church_member, require_church_capability
from supabase import Client
from typing import List

router = APIRouter(prefix="/churches/{church_id}/announcements", tags=["announcements"])


def get_announcement_service(supabase: Client = Depends(get_supabase)) -> AnnouncementService:
    return AnnouncementService(supabase)


def get_comment_service(supabase: Client = Depends(get_supabase)) -> AnnouncementCommentService:
    return AnnouncementCommentService(supabase)


@router.get("", response_model=List[AnnouncementResponse])
async def list_announcements(
    access: ChurchAccess = Depends(require_church_member),
    service: AnnouncementService = Depends(get_announcement_service)
):
    """List announcements: pinned, then important, then newest"""
    return service.list_announcements(access.church_id)


@router.post("", response_model=AnnouncementResponse, status_code=201)
async def create_announcement(
    announcement_data: AnnouncementCreate,
    access: ChurchAccess = Depends(require_church_capability("announcements:write")),
    service: AnnouncementService = Depends(get_announcement_service)
):
    """Post an announcement (church admin)"""
    return service.create_announcement(access, announcement_data)


@router.get("/{announcement_id}", response_model=AnnouncementResponse)
async def get_announcement(
    announcement_id: str,
    access: ChurchAccess = Depends(require_church_member),
    service: AnnouncementService = Depends(get_announcement_service)
):
    return service.get_record(access.church_id, announcement_id)


@router.put("/{announcement_id}", response_model=AnnouncementResponse)
async def update_announcement(
    announcement_id: str,
    announcement_data: AnnouncementUpdate,
    access: ChurchAccess = Depends(require_church_capability("announcements:write")),
    service: AnnouncementService = Depends(get_announcement_service)
):
    return service.update_announcement(access.church_id, announcement_id, announcement_data)


@router.delete("/{announcement_id}", status_code=204)
async def delete_announcement(
    announcement_id: str,
    access: ChurchAccess = Depends(require_church_capability("announcements:write")),
    service: AnnouncementService = Depends(get_announcement_service)
):
    """Delete an announcement with its comments and image"""
    service.delete_announcement(access.church_id, announcement_id)
    return None


@router.post("/{announcement_id}/image", response_model=AnnouncementResponse)
async def upload_image(
    announcement_id: str,
    file: UploadFile = File(...),
    access: ChurchAccess = Depends(require_church_capability("announcements:write")),
    service: AnnouncementService = Depends(get_announcement_service)
):
    content = await file.read()
    return service.upload_image(access.church_id, announcement_id, content, file.content_type or "")


@router.delete("/{announcement_id}/image", response_model=AnnouncementResponse)
async def delete_image(
    announcement_id: str,
    access: ChurchAccess = Depends(require_church_capability("announcements:write")),
    service: AnnouncementService = Depends(get_announcement_service)
):
    return service.delete_image(access.church_id, announcement_id)


@router.get("/{announcement_id}/comments", response_model=List[CommentResponse])
async def list_comments(
    announcement_id: str,
    access: ChurchAccess = Depends(require_church_member),
    service: AnnouncementCommentService = Depends(get_comment_service)
):
    return service.list_comments(access.church_id, announcement_id)


@router.post("/{announcement_id}/comments", response_model=CommentResponse, status_code=201)
async def add_comment(
    announcement_id: str,
    comment_data: CommentCreate,
    access: ChurchAccess = Depends(require_church_capability("announcements:comment")),
    service: AnnouncementCommentService = Depends(get_comment_service)
):
    """Comment on an announcement (any member)"""
    return service.add_comment(access, announcement_id, comment_data)


@router.delete("/{announcement_id}/comments/{comment_id}", status_code=204)
async def delete_comment(
    announcement_id: str,
    comment_id: str,
    access: ChurchAccess = Depends(require_church_member),
    service: AnnouncementCommentService = Depends(get_comment_service)
):
    """Delete a comment (author or church admin)"""
    service.delete_comment(access, announcement_id, comment_id)
    return None
