from supabase import Client
from datetime import timedelta
from churchecker.config.settings import settings
from churchecker.core.db_utils import first_row
from churchecker.core.dependencies import ChurchAccess
from churchecker.core.timeutils import now_utc, parse_timestamp
from churchecker.modules.churches.schemas import MemberResponse
from churchecker.modules.churches.service import ChurchService
from churchecker.modules.invites.schemas import (
    InviteCreate, InviteResponse, InviteCreateResponse, InvitePreviewResponse
)
from churchecker.modules.invites.tokens import generate_invite_token
from churchecker.modules.profiles.service import ProfileService
from typing import List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

INVALID_INVITE = "Invalid invite link"
EXPIRED_INVITE = "Invite link has expired"
EXHAUSTED_INVITE = "Invite link has no uses left"
ALREADY_MEMBER = "Already a member of this church"


class InviteService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_invite(self, access: ChurchAccess, invite_data: InviteCreate) -> InviteCreateResponse:
        """Create an invite link for a church"""
        try:
            token = generate_invite_token(access.church_id)
            expires_at = now_utc() + timedelta(days=invite_data.expires_in_days)
            result = self.supabase.table("church_invite_tokens").insert({
                "church_id": access.church_id,
                "token": token,
                "role": invite_data.role,
                "created_by": access.user_id,
                "expires_at": expires_at.isoformat(),
                "max_uses": invite_data.max_uses,
                "used_count": 0,
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create invite link")

            invite = InviteResponse(**result.data[0])
            logger.info(f"Invite created for church {access.church_id} by {access.user_id} (role={invite.role}, max_uses={invite.max_uses})")
            return InviteCreateResponse(
                token=invite.token,
                invite_url=f"{settings.base_url}/invite/{invite.token}",
                expires_at=invite.expires_at,
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating invite for {access.church_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create invite link")

    def list_active_invites(self, church_id: str) -> List[InviteResponse]:
        """Invites that are neither expired nor used up, newest first"""
        try:
            result = self.supabase.table("church_invite_tokens")\
                .select("*")\
                .eq("church_id", church_id)\
                .gte("expires_at", now_utc().isoformat())\
                .order("created_at", desc=True)\
                .execute()
            return [
                InviteResponse(**invite) for invite in (result.data or [])
                if invite["used_count"] < invite["max_uses"]
            ]
        except Exception as e:
            logger.error(f"Error listing invites for {church_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to list invite links")

    def revoke_invite(self, church_id: str, invite_id: str) -> bool:
        try:
            result = self.supabase.table("church_invite_tokens")\
                .delete()\
                .eq("id", invite_id)\
                .eq("church_id", church_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error revoking invite {invite_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Invite not found")
        return True

    def _load_valid_invite(self, token: str) -> dict:
        """Invite row for a token; 404 if unknown, 400 if expired or used up"""
        invite = first_row(
            self.supabase.table("church_invite_tokens")
            .select("*")
            .eq("token", token)
            .limit(1)
            .execute()
        )
        if not invite:
            raise HTTPException(status_code=404, detail=INVALID_INVITE)
        if parse_timestamp(invite["expires_at"]) < now_utc():
            raise HTTPException(status_code=400, detail=EXPIRED_INVITE)
        if invite["used_count"] >= invite["max_uses"]:
            raise HTTPException(status_code=400, detail=EXHAUSTED_INVITE)
        return invite

    def _ensure_not_member(self, invite: dict, user_id: str) -> dict:
        """Return the invite's church; 409 if the user already owns or belongs to it"""
        church = first_row(
            self.supabase.table("churches")
            .select("*")
            .eq("id", invite["church_id"])
            .limit(1)
            .execute()
        )
        if not church:
            raise HTTPException(status_code=404, detail=INVALID_INVITE)
        if church["owner_id"] == user_id:
            raise HTTPException(status_code=409, detail=ALREADY_MEMBER)
        existing = first_row(
            self.supabase.table("church_members")
            .select("id")
            .eq("church_id", invite["church_id"])
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if existing:
            raise HTTPException(status_code=409, detail=ALREADY_MEMBER)
        return church

    def _claim_use(self, invite: dict) -> bool:
        """Compare-and-set increment of used_count; False if another redeemer got there first"""
        result = self.supabase.table("church_invite_tokens")\
            .update({"used_count": invite["used_count"] + 1})\
            .eq("id", invite["id"])\
            .eq("used_count", invite["used_count"])\
            .execute()
        return bool(result.data)

    def _release_use(self, invite_id: str) -> None:
        current = first_row(
            self.supabase.table("church_invite_tokens")
            .select("used_count")
            .eq("id", invite_id)
            .limit(1)
            .execute()
        )
        if not current or current["used_count"] <= 0:
            return
        result = self.supabase.table("church_invite_tokens")\
            .update({"used_count": current["used_count"] - 1})\
            .eq("id", invite_id)\
            .eq("used_count", current["used_count"])\
            .execute()
        if not result.data:
            logger.warning(f"Could not release claimed use of invite {invite_id}")

    def preview_invite(self, token: str, user_id: str) -> InvitePreviewResponse:
        """What accepting this invite would do, after the same checks as redemption"""
        try:
            invite = self._load_valid_invite(token)
            church = self._ensure_not_member(invite, user_id)
            names = ProfileService(self.supabase).get_names([invite["created_by"]])
            return InvitePreviewResponse(
                church_id=church["id"],
                church_name=church["name"],
                role=invite["role"],
                expires_at=invite["expires_at"],
                created_by_name=names.get(invite["created_by"], "관리자"),
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error checking invite: {e}")
            raise HTTPException(status_code=500, detail="Failed to check invite link")

    def redeem_invite(self, token: str, user_id: str) -> MemberResponse:
        """Join the invite's church with the invite's role"""
        try:
            invite = self._load_valid_invite(token)
            self._ensure_not_member(invite, user_id)

            if not self._claim_use(invite):
                # Lost a race with another redeemer: re-read and try once more.
                invite = self._load_valid_invite(token)
                if not self._claim_use(invite):
                    raise HTTPException(status_code=409, detail="Invite link is busy, please try again")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error redeeming invite: {e}")
            raise HTTPException(status_code=500, detail="Failed to accept invite")

        try:
            member = ChurchService(self.supabase).add_member(invite["church_id"], user_id, invite["role"])
        except HTTPException:
            try:
                self._release_use(invite["id"])
            except Exception as e:
                logger.error(f"Error releasing claimed use of invite {invite['id']}: {e}")
            raise

        logger.info(f"User {user_id} joined church {invite['church_id']} as {invite['role']} via invite {invite['id']}")
        return member
