from fastapi import APIRouter, Depends
from churchecker.database.supabase_client import get_supabase
from churchecker.modules.churches.schemas import MemberResponse
from churchecker.modules.invites.schemas import (
    InviteCreate, InviteResponse, InviteCreateResponse, InvitePreviewResponse
)
from churchecker.modules.invites.service import InviteService
from churchecker.core.dependencies import ChurchAccess, get_current_user, require_church_capability
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/churches/{church_id}/invites", tags=["invites"])
public_router = APIRouter(prefix="/invites", tags=["invites"])


def get_invite_service(supabase: Client = Depends(get_supabase)) -> InviteService:
    return InviteService(supabase)


@router.post("", response_model=InviteCreateResponse, status_code=201)
async def create_invite(
    invite_data: InviteCreate,
    access: ChurchAccess = Depends(require_church_capability("invites:manage")),
    service: InviteService = Depends(get_invite_service)
):
    """Create an invite link (church admin)"""
    return service.create_invite(access, invite_data)


@router.get("", response_model=List[InviteResponse])
async def list_invites(
    access: ChurchAccess = Depends(require_church_capability("invites:manage")),
    service: InviteService = Depends(get_invite_service)
):
    """List invite links that can still be used (church admin)"""
    return service.list_active_invites(access.church_id)


@router.delete("/{invite_id}", status_code=204)
async def revoke_invite(
    invite_id: str,
    access: ChurchAccess = Depends(require_church_capability("invites:manage")),
    service: InviteService = Depends(get_invite_service)
):
    """Revoke an invite link (church admin)"""
    service.revoke_invite(access.church_id, invite_id)
    return None


@public_router.get("/{token}", response_model=InvitePreviewResponse)
async def preview_invite(
    token: str,
    user_data: Dict = Depends(get_current_user),
    service: InviteService = Depends(get_invite_service)
):
    """Check an invite link before accepting it"""
    return service.preview_invite(token, user_data["id"])


@public_router.post("/{token}/redeem", response_model=MemberResponse, status_code=201)
async def redeem_invite(
    token: str,
    user_data: Dict = Depends(get_current_user),
    service: InviteService = Depends(get_invite_service)
):
    """Accept an invite link and join the church"""
    return service.redeem_invite(token, user_data["id"])
