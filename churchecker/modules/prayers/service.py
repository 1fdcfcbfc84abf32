from supabase import Client
from churchecker.core.crud import ChurchRecordService
from churchecker.core.db_utils import first_row
from churchecker.core.dependencies import ChurchAccess
from churchecker.core.timeutils import now_utc
from churchecker.modules.prayers.schemas import (
    PrayerCreate, PrayerUpdate, PrayerAnswerUpdate, PrayerResponse,
    PrayerCommentCreate, PrayerCommentResponse, STATUS_ANSWERED, STATUS_IN_PROGRESS
)
from churchecker.modules.profiles.service import ProfileService
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

HIDDEN_WHEN_ANONYMOUS = ("created_by", "created_by_name", "student_id", "student_name")


class PrayerService(ChurchRecordService):
    table = "prayer_requests"
    response_model = PrayerResponse
    order_by = (("created_at", True),)
    person_columns = ("student_id",)
    not_found_detail = "Prayer request not found"

    def decorate(self, church_id: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        student_names = self.person_names(church_id, rows, "student_id")
        author_names = ProfileService(self.supabase).get_names(row.get("created_by") for row in rows)
        return [{
            **row,
            "student_name": student_names.get(row.get("student_id")),
            "created_by_name": author_names.get(row.get("created_by")),
        } for row in rows]

    def present(self, access: ChurchAccess, prayer: PrayerResponse) -> PrayerResponse:
        """Hide who asked for an anonymous request unless the caller wrote it or is an admin"""
        if not prayer.is_anonymous or access.is_admin or prayer.created_by == access.user_id:
            return prayer
        return prayer.model_copy(update={field: None for field in HIDDEN_WHEN_ANONYMOUS})

    def _ensure_can_edit(self, access: ChurchAccess, row: Dict[str, Any]) -> None:
        if row.get("created_by") != access.user_id and not access.is_admin:
            raise HTTPException(status_code=403, detail="Only the author or a church admin can change this prayer request")

    def list_prayers(
        self,
        access: ChurchAccess,
        status: Optional[str] = None,
        category: Optional[str] = None
    ) -> List[PrayerResponse]:
        """Newest first, optionally filtered by status and category"""
        prayers = self.list_records(access.church_id, filters={"status": status, "category": category})
        return [self.present(access, p) for p in prayers]

    def get_prayer(self, access: ChurchAccess, prayer_id: str) -> PrayerResponse:
        return self.present(access, self.get_record(access.church_id, prayer_id))

    def create_prayer(self, access: ChurchAccess, prayer_data: PrayerCreate) -> PrayerResponse:
        data = prayer_data.model_dump()
        if data["is_anonymous"]:
            data["student_id"] = None
        if data["status"] == STATUS_ANSWERED:
            data["is_answered"] = True
            data["answered_at"] = now_utc().isoformat()
        return self.create_record(access.church_id, data, access.user_id)

    def update_prayer(self, access: ChurchAccess, prayer_id: str, prayer_data: PrayerUpdate) -> PrayerResponse:
        row = self.get_row(access.church_id, prayer_id)
        self._ensure_can_edit(access, row)
        update_data = prayer_data.model_dump(exclude_unset=True)
        for field in ("title", "content", "is_anonymous", "category", "status"):
            if field in update_data and update_data[field] is None:
                del update_data[field]
        if update_data.get("is_anonymous"):
            update_data["student_id"] = None
        if not update_data:
            return self.get_prayer(access, prayer_id)
        update_data["updated_at"] = now_utc().isoformat()
        return self.present(access, self.update_record(access.church_id, prayer_id, update_data))

    def delete_prayer(self, access: ChurchAccess, prayer_id: str) -> bool:
        row = self.get_row(access.church_id, prayer_id)
        self._ensure_can_edit(access, row)
        try:
            self.supabase.table("prayer_comments")\
                .delete()\
                .eq("prayer_id", prayer_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting comments of prayer {prayer_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        return self.delete_record(access.church_id, prayer_id)

    def set_answered(self, access: ChurchAccess, prayer_id: str, answer_data: PrayerAnswerUpdate) -> PrayerResponse:
        """Mark a prayer answered (stamping answered_at) or take the mark back"""
        row = self.get_row(access.church_id, prayer_id)
        self._ensure_can_edit(access, row)
        if answer_data.answered:
            update_data = {
                "is_answered": True,
                "answered_at": now_utc().isoformat(),
                "status": STATUS_ANSWERED,
            }
            if answer_data.testimony is not None:
                update_data["answer_testimony"] = answer_data.testimony
        else:
            update_data = {
                "is_answered": False,
                "answered_at": None,
                "answer_testimony": None,
                "status": STATUS_IN_PROGRESS if row.get("status") == STATUS_ANSWERED else row.get("status"),
            }
        update_data["updated_at"] = now_utc().isoformat()
        return self.present(access, self.update_record(access.church_id, prayer_id, update_data))

    def set_status(self, access: ChurchAccess, prayer_id: str, status: str) -> PrayerResponse:
        row = self.get_row(access.church_id, prayer_id)
        self._ensure_can_edit(access, row)
        update_data = {"status": status, "updated_at": now_utc().isoformat()}
        if status == STATUS_ANSWERED and not row.get("is_answered"):
            update_data["is_answered"] = True
            update_data["answered_at"] = now_utc().isoformat()
        return self.present(access, self.update_record(access.church_id, prayer_id, update_data))


class PrayerCommentService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _ensure_prayer(self, church_id: str, prayer_id: str) -> None:
        PrayerService(self.supabase).get_row(church_id, prayer_id)

    def list_comments(self, church_id: str, prayer_id: str) -> List[PrayerCommentResponse]:
        """Comments on a prayer request, oldest first"""
        try:
            self._ensure_prayer(church_id, prayer_id)
            result = self.supabase.table("prayer_comments")\
                .select("*")\
                .eq("prayer_id", prayer_id)\
                .order("created_at")\
                .execute()
            return [PrayerCommentResponse(**c) for c in (result.data or [])]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing comments of prayer {prayer_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def add_comment(self, access: ChurchAccess, prayer_id: str, comment_data: PrayerCommentCreate) -> PrayerCommentResponse:
        try:
            self._ensure_prayer(access.church_id, prayer_id)
            content = comment_data.content.strip()
            if not content:
                raise HTTPException(status_code=400, detail="Comment must not be empty")
            result = self.supabase.table("prayer_comments").insert({
                "prayer_id": prayer_id,
                "content": content,
                "created_by": access.user_id,
                "created_by_name": ProfileService(self.supabase).get_display_name(access.user or {"id": access.user_id}),
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to add comment")
            return PrayerCommentResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error adding comment to prayer {prayer_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def delete_comment(self, access: ChurchAccess, prayer_id: str, comment_id: str) -> bool:
        """Author or church admin may delete a comment"""
        try:
            self._ensure_prayer(access.church_id, prayer_id)
            comment = first_row(
                self.supabase.table("prayer_comments")
                .select("*")
                .eq("id", comment_id)
                .eq("prayer_id", prayer_id)
                .limit(1)
                .execute()
            )
            if not comment:
                raise HTTPException(status_code=404, detail="Comment not found")
            if comment.get("created_by") != access.user_id and not access.is_admin:
                raise HTTPException(status_code=403, detail="Only the author or a church admin can delete this comment")
            self.supabase.table("prayer_comments")\
                .delete()\
                .eq("id", comment_id)\
                .execute()
            return True
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting comment {comment_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
