from supabase import Client
from churchecker.config.roles_config import ROLE_ADMIN
from churchecker.config.settings import settings
from churchecker.core.db_utils import first_row, is_unique_violation
from churchecker.core.dependencies import ChurchAccess
from churchecker.core.timeutils import now_utc, parse_timestamp, today_local
from churchecker.database.storage import ImageStorage
from churchecker.modules.churches.schemas import (
    ChurchCreate, ChurchUpdate, ChurchResponse, ChurchWithRoleResponse, ChurchDetailResponse,
    MemberResponse, MemberHistoryResponse, RoleHistoryEntry
)
from churchecker.modules.profiles.service import ProfileService
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

# Church-scoped tables removed before the church row itself (children first)
CHURCH_SCOPED_TABLES = (
    "attendance",
    "announcement_comments",
    "announcements",
    "prayer_requests",
    "offerings",
    "expenses",
    "church_events",
    "service_schedules",
    "church_invite_tokens",
    "member_role_history",
    "church_members",
    "students",
)


class ChurchService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_church(self, church_data: ChurchCreate, user_id: str) -> ChurchResponse:
        """Create a church and the owner's admin membership in a single transaction"""
        try:
            result = self.supabase.rpc("create_church_with_owner", {
                "p_name": church_data.name.strip(),
                "p_description": church_data.description,
                "p_owner_id": user_id,
            }).execute()

            church = first_row(result)
            if not church:
                raise HTTPException(status_code=500, detail="Failed to create church")

            logger.info(f"Church {church['id']} created by {user_id}")
            return ChurchResponse(**church)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating church: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def list_churches(self, user_id: str) -> List[ChurchWithRoleResponse]:
        """Churches the user owns or belongs to, newest first"""
        try:
            members_result = self.supabase.table("church_members")\
                .select("church_id, role")\
                .eq("user_id", user_id)\
                .execute()
            roles = {m["church_id"]: m["role"] for m in (members_result.data or [])}

            owned_result = self.supabase.table("churches")\
                .select("id")\
                .eq("owner_id", user_id)\
                .execute()
            church_ids = set(roles) | {c["id"] for c in (owned_result.data or [])}
            if not church_ids:
                return []

            result = self.supabase.table("churches")\
                .select("*")\
                .in_("id", list(church_ids))\
                .order("created_at", desc=True)\
                .execute()

            churches = []
            for church in result.data or []:
                is_owner = church["owner_id"] == user_id
                churches.append(ChurchWithRoleResponse(
                    **church,
                    my_role=ROLE_ADMIN if is_owner else roles.get(church["id"]),
                    is_owner=is_owner,
                ))
            return churches
        except Exception as e:
            logger.error(f"Error listing churches for {user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_church_detail(self, access: ChurchAccess) -> ChurchDetailResponse:
        """Church with the caller's access summary and headline counts"""
        try:
            people_result = self.supabase.table("students")\
                .select("id, type")\
                .eq("church_id", access.church_id)\
                .execute()
            people = people_result.data or []

            today_result = self.supabase.table("attendance")\
                .select("id")\
                .eq("church_id", access.church_id)\
                .eq("date", today_local().isoformat())\
                .execute()

            return ChurchDetailResponse(
                **access.church,
                my_role=access.effective_role,
                is_owner=access.is_owner,
                is_admin=access.is_admin,
                capabilities=sorted(access.capabilities),
                people_count=len(people),
                student_count=sum(1 for p in people if p.get("type") == "student"),
                teacher_count=sum(1 for p in people if p.get("type") == "teacher"),
                today_attendance_count=len(today_result.data or []),
            )
        except Exception as e:
            logger.error(f"Error loading church {access.church_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def update_church(self, church_id: str, church_data: ChurchUpdate) -> ChurchResponse:
        """Update church"""
        try:
            update_data = {"updated_at": now_utc().isoformat()}
            if church_data.name:
                update_data["name"] = church_data.name.strip()
            if church_data.description is not None:
                update_data["description"] = church_data.description

            result = self.supabase.table("churches")\
                .update(update_data)\
                .eq("id", church_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Church not found")

            return ChurchResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating church {church_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def delete_church(self, church_id: str) -> bool:
        """Delete church and every row scoped to it"""
        try:
            photos = self.supabase.table("students")\
                .select("photo_url")\
                .eq("church_id", church_id)\
                .execute()

            prayers = self.supabase.table("prayer_requests")\
                .select("id")\
                .eq("church_id", church_id)\
                .execute()
            prayer_ids = [p["id"] for p in (prayers.data or [])]
            if prayer_ids:
                self.supabase.table("prayer_comments")\
                    .delete()\
                    .in_("prayer_id", prayer_ids)\
                    .execute()

            for table in CHURCH_SCOPED_TABLES:
                self.supabase.table(table)\
                    .delete()\
                    .eq("church_id", church_id)\
                    .execute()

            result = self.supabase.table("churches")\
                .delete()\
                .eq("id", church_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting church {church_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        storage = ImageStorage(self.supabase, settings.storage_bucket_photos)
        keys = [storage.key_from_url(p.get("photo_url")) for p in (photos.data or [])]
        storage.delete_files([k for k in keys if k])
        logger.info(f"Church {church_id} deleted")
        return len(result.data) > 0

    # Membership

    def _get_member(self, church_id: str, member_id: str) -> dict:
        member = first_row(
            self.supabase.table("church_members")
            .select("*")
            .eq("id", member_id)
            .eq("church_id", church_id)
            .limit(1)
            .execute()
        )
        if not member:
            raise HTTPException(status_code=404, detail="Member not found")
        return member

    def _member_response(self, member: dict, owner_id: str, names: dict) -> MemberResponse:
        return MemberResponse(
            **member,
            name=names.get(member["user_id"]),
            is_owner=member["user_id"] == owner_id,
        )

    def list_members(self, access: ChurchAccess, role: Optional[str] = None) -> List[MemberResponse]:
        """Members with display names, newest first, optionally filtered by role"""
        try:
            query = self.supabase.table("church_members")\
                .select("*")\
                .eq("church_id", access.church_id)
            if role:
                query = query.eq("role", role)
            result = query.order("joined_at", desc=True).execute()
            members = result.data or []
            names = ProfileService(self.supabase).get_names(m["user_id"] for m in members)
            owner_id = access.church["owner_id"]
            return [self._member_response(m, owner_id, names) for m in members]
        except Exception as e:
            logger.error(f"Error listing members of {access.church_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def add_member(self, church_id: str, user_id: str, role: str) -> MemberResponse:
        """Insert a membership row; duplicate membership is 409"""
        try:
            result = self.supabase.table("church_members").insert({
                "church_id": church_id,
                "user_id": user_id,
                "role": role,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to add member")
            return MemberResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="Already a member of this church")
            logger.error(f"Error adding member to {church_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def update_member_role(self, access: ChurchAccess, member_id: str, new_role: str) -> MemberResponse:
        """Change a member's role and record the change"""
        try:
            member = self._get_member(access.church_id, member_id)
            if member["user_id"] == access.church["owner_id"] and new_role != ROLE_ADMIN:
                raise HTTPException(status_code=400, detail="The church owner is always an admin")
            old_role = member["role"]
            if old_role == new_role:
                return self._member_response(member, access.church["owner_id"], {})

            result = self.supabase.table("church_members")\
                .update({"role": new_role})\
                .eq("id", member_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Member not found")

            self.supabase.table("member_role_history").insert({
                "church_id": access.church_id,
                "member_id": member_id,
                "user_id": member["user_id"],
                "old_role": old_role,
                "new_role": new_role,
                "changed_by": access.user_id,
            }).execute()

            logger.info(f"Member {member_id} of {access.church_id}: {old_role} -> {new_role} by {access.user_id}")
            return self._member_response(result.data[0], access.church["owner_id"], {})
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating member {member_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def remove_member(self, access: ChurchAccess, member_id: str) -> bool:
        """Remove a member (never the owner)"""
        try:
            member = self._get_member(access.church_id, member_id)
            if member["user_id"] == access.church["owner_id"]:
                raise HTTPException(status_code=400, detail="The church owner cannot be removed")
            result = self.supabase.table("church_members")\
                .delete()\
                .eq("id", member_id)\
                .execute()
            return len(result.data) > 0
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error removing member {member_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def leave_church(self, access: ChurchAccess) -> bool:
        """Remove the caller's own membership"""
        if access.is_owner:
            raise HTTPException(status_code=400, detail="The church owner cannot leave the church")
        try:
            result = self.supabase.table("church_members")\
                .delete()\
                .eq("church_id", access.church_id)\
                .eq("user_id", access.user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error leaving church {access.church_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Not a member of this church")
        return True

    def get_member_history(self, access: ChurchAccess, member_id: str) -> MemberHistoryResponse:
        """Role-change history of a member plus activity stats"""
        try:
            member = self._get_member(access.church_id, member_id)
            result = self.supabase.table("member_role_history")\
                .select("*")\
                .eq("member_id", member_id)\
                .order("changed_at", desc=True)\
                .execute()
            rows = result.data or []
            names = ProfileService(self.supabase).get_names(
                [r["changed_by"] for r in rows] + [member["user_id"]]
            )
            joined_at = parse_timestamp(member["joined_at"])
            return MemberHistoryResponse(
                member=self._member_response(member, access.church["owner_id"], names),
                days_since_joined=max((now_utc() - joined_at).days, 0),
                role_changes=len(rows),
                history=[
                    RoleHistoryEntry(**row, changed_by_name=names.get(row["changed_by"]))
                    for row in rows
                ],
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error loading history of member {member_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
