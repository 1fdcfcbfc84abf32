from fastapi import APIRouter, Depends
from churchecker.database.supabase_client import get_supabase
from churchecker.modules.churches.schemas import (
    ChurchCreate, ChurchUpdate, ChurchResponse, ChurchWithRoleResponse, ChurchDetailResponse,
    MemberResponse, MemberRoleUpdate, MemberHistoryResponse, MembershipRole
)
from churchecker.modules.churches.service import ChurchService
from churchecker.core.dependencies import (
    ChurchAccess, get_current_user, require_church_member, require_church_capability
)
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/churches", tags=["churches"])


def get_church_service(supabase: Client = Depends(get_supabase)) -> ChurchService:
    return ChurchService(supabase)


@router.post("", response_model=ChurchResponse, status_code=201)
async def create_church(
    church_data: ChurchCreate,
    user_data: Dict = Depends(get_current_user),
    service: ChurchService = Depends(get_church_service)
):
    """Create a new church; the creator becomes its owner and admin"""
    return service.create_church(church_data, user_data["id"])


@router.get("", response_model=List[ChurchWithRoleResponse])
async def list_churches(
    user_data: Dict = Depends(get_current_user),
    service: ChurchService = Depends(get_church_service)
):
    """List churches the caller owns or belongs to"""
    return service.list_churches(user_data["id"])


@router.get("/{church_id}", response_model=ChurchDetailResponse)
async def get_church(
    access: ChurchAccess = Depends(require_church_member),
    service: ChurchService = Depends(get_church_service)
):
    """Get church by ID (only if user is a member)"""
    return service.get_church_detail(access)


@router.put("/{church_id}", response_model=ChurchResponse)
async def update_church(
    church_data: ChurchUpdate,
    access: ChurchAccess = Depends(require_church_capability("church:manage")),
    service: ChurchService = Depends(get_church_service)
):
    """Update church (church admin)"""
    return service.update_church(access.church_id, church_data)


@router.delete("/{church_id}", status_code=204)
async def delete_church(
    access: ChurchAccess = Depends(require_church_capability("church:manage")),
    service: ChurchService = Depends(get_church_service)
):
    """Delete church and all of its records (church admin)"""
    service.delete_church(access.church_id)
    return None


@router.post("/{church_id}/leave", status_code=204)
async def leave_church(
    access: ChurchAccess = Depends(require_church_member),
    service: ChurchService = Depends(get_church_service)
):
    """Leave a church (not available to the owner)"""
    service.leave_church(access)
    return None


@router.get("/{church_id}/members", response_model=List[MemberResponse])
async def list_members(
    role: Optional[MembershipRole] = None,
    access: ChurchAccess = Depends(require_church_member),
    service: ChurchService = Depends(get_church_service)
):
    """List all members of a church (only if user is a member)"""
    return service.list_members(access, role)


@router.put("/{church_id}/members/{member_id}", response_model=MemberResponse)
async def update_member_role(
    member_id: str,
    role_data: MemberRoleUpdate,
    access: ChurchAccess = Depends(require_church_capability("members:manage")),
    service: ChurchService = Depends(get_church_service)
):
    """Change a member's role (church admin)"""
    return service.update_member_role(access, member_id, role_data.role)


@router.delete("/{church_id}/members/{member_id}", status_code=204)
async def remove_member(
    member_id: str,
    access: ChurchAccess = Depends(require_church_capability("members:manage")),
    service: ChurchService = Depends(get_church_service)
):
    """Remove a member from the church (church admin)"""
    service.remove_member(access, member_id)
    return None


@router.get("/{church_id}/members/{member_id}/history", response_model=MemberHistoryResponse)
async def get_member_history(
    member_id: str,
    access: ChurchAccess = Depends(require_church_capability("members:manage")),
    service: ChurchService = Depends(get_church_service)
):
    """Role-change history and stats of a member (church admin)"""
    return service.get_member_history(access, member_id)
