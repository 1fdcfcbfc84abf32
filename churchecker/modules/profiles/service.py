from supabase import Client
from churchecker.core.db_utils import first_row
from churchecker.core.timeutils import now_utc
from churchecker.modules.profiles.schemas import ProfileUpsert, ProfileResponse
from typing import Dict, Iterable, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def find_profile(self, user_id: str) -> Optional[ProfileResponse]:
        """Profile by user ID, or None"""
        try:
            row = first_row(
                self.supabase.table("profiles")
                .select("*")
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
            return ProfileResponse(**row) if row else None
        except Exception as e:
            logger.error(f"Error loading profile {user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_profile(self, user_id: str) -> ProfileResponse:
        """Profile by user ID"""
        profile = self.find_profile(user_id)
        if not profile:
            raise HTTPException(status_code=404, detail="Profile not found")
        return profile

    def upsert_profile(self, user_id: str, profile_data: ProfileUpsert) -> ProfileResponse:
        """Create the profile on first setup, update it afterwards"""
        try:
            existing = self.find_profile(user_id)
            update_data = profile_data.model_dump(exclude_unset=True)
            if "name" in update_data:
                name = (update_data["name"] or "").strip()
                if not name:
                    raise HTTPException(status_code=400, detail="Name is required")
                update_data["name"] = name

            if existing is None:
                if "name" not in update_data:
                    raise HTTPException(status_code=400, detail="Name is required")
                result = self.supabase.table("profiles").insert({
                    "id": user_id,
                    **update_data,
                }).execute()
            else:
                update_data["updated_at"] = now_utc().isoformat()
                result = self.supabase.table("profiles")\
                    .update(update_data)\
                    .eq("id", user_id)\
                    .execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save profile")

            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error saving profile {user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_names(self, user_ids: Iterable[str]) -> Dict[str, str]:
        """Map user_id -> display name for the given users"""
        ids = list({uid for uid in user_ids if uid})
        if not ids:
            return {}
        result = self.supabase.table("profiles")\
            .select("id, name")\
            .in_("id", ids)\
            .execute()
        return {row["id"]: row["name"] for row in (result.data or [])}

    def get_display_name(self, user_data: dict, default: str = "익명") -> str:
        """Profile name of a user, falling back to the auth metadata nickname"""
        name = self.get_names([user_data["id"]]).get(user_data["id"])
        if name:
            return name
        metadata = user_data.get("user_metadata") or {}
        return metadata.get("name") or metadata.get("nickname") or metadata.get("full_name") or default

    def get_church_ids(self, user_id: str) -> List[str]:
        """IDs of churches the user owns or belongs to"""
        owned = self.supabase.table("churches")\
            .select("id")\
            .eq("owner_id", user_id)\
            .execute()
        joined = self.supabase.table("church_members")\
            .select("church_id")\
            .eq("user_id", user_id)\
            .execute()
        ids = {c["id"] for c in (owned.data or [])}
        ids.update(m["church_id"] for m in (joined.data or []))
        return list(ids)

    def can_view_profile(self, current_user_id: str, target_user_id: str) -> bool:
        """True if target is self or shares at least one church with current user"""
        if current_user_id == target_user_id:
            return True
        try:
            mine = set(self.get_church_ids(current_user_id))
            if not mine:
                return False
            return bool(mine.intersection(self.get_church_ids(target_user_id)))
        except Exception as e:
            logger.error(f"Error checking profile visibility: {e}")
            raise HTTPException(status_code=500, detail=str(e))
