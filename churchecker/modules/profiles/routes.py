from fastapi import APIRouter, Depends, HTTPException, status
from churchecker.database.supabase_client import get_supabase
from churchecker.modules.profiles.schemas import ProfileUpsert, ProfileResponse
from churchecker.modules.profiles.service import ProfileService
from churchecker.core.dependencies import get_current_user
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Get the caller's profile (404 until profile setup is done)"""
    return service.get_profile(user_data["id"])


@router.put("/me", response_model=ProfileResponse)
async def upsert_my_profile(
    profile_data: ProfileUpsert,
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Create or update the caller's profile"""
    return service.upsert_profile(user_data["id"], profile_data)


@router.get("/{user_id}", response_model=ProfileResponse)
async def get_profile(
    user_id: str,
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Get a profile (only if same user or shares a church)"""
    if not service.can_view_profile(user_data["id"], user_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Profile not accessible")
    return service.get_profile(user_id)
