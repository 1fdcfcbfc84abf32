from supabase import Client
from collections import Counter
from churchecker.config.roles_config import role_label
from churchecker.config.settings import settings
from churchecker.core.crud import ChurchRecordService
from churchecker.core.db_utils import compact, first_row
from churchecker.core.dependencies import ChurchAccess
from churchecker.core.timeutils import now_utc
from churchecker.database.storage import ImageStorage, image_extension
from churchecker.modules.announcements.schemas import (
    AnnouncementCreate, AnnouncementUpdate, AnnouncementResponse, CommentCreate, CommentResponse
)
from churchecker.modules.profiles.service import ProfileService
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class AnnouncementService(ChurchRecordService):
    table = "announcements"
    response_model = AnnouncementResponse
    order_by = (("is_pinned", True), ("is_important", True), ("created_at", True))
    author_column = "author_id"
    not_found_detail = "Announcement not found"

    def __init__(self, supabase: Client, storage: Optional[ImageStorage] = None):
        super().__init__(supabase)
        self.storage = storage or ImageStorage(supabase, settings.storage_bucket_images)

    def decorate(self, church_id: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        ids = [row["id"] for row in rows]
        if not ids:
            return rows
        result = self.supabase.table("announcement_comments")\
            .select("announcement_id")\
            .in_("announcement_id", ids)\
            .execute()
        counts = Counter(c["announcement_id"] for c in (result.data or []))
        return [{**row, "comment_count": counts.get(row["id"], 0)} for row in rows]

    def list_announcements(self, church_id: str) -> List[AnnouncementResponse]:
        """Pinned first, then important, then newest"""
        return self.list_records(church_id)

    def create_announcement(self, access: ChurchAccess, announcement_data: AnnouncementCreate) -> AnnouncementResponse:
        author_name = ProfileService(self.supabase).get_display_name(access.user or {"id": access.user_id})
        return self.create_record(access.church_id, {
            **announcement_data.model_dump(),
            "author_name": author_name,
        }, access.user_id)

    def update_announcement(self, church_id: str, announcement_id: str, announcement_data: AnnouncementUpdate) -> AnnouncementResponse:
        update_data = compact(announcement_data.model_dump(exclude_unset=True))
        if not update_data:
            return self.get_record(church_id, announcement_id)
        update_data["updated_at"] = now_utc().isoformat()
        return self.update_record(church_id, announcement_id, update_data)

    def delete_announcement(self, church_id: str, announcement_id: str) -> bool:
        announcement = self.get_row(church_id, announcement_id)
        try:
            self.supabase.table("announcement_comments")\
                .delete()\
                .eq("announcement_id", announcement_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting comments of announcement {announcement_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        self.delete_record(church_id, announcement_id)
        if announcement.get("image_url"):
            self.storage.delete_by_url(announcement["image_url"])
        return True

    def upload_image(self, church_id: str, announcement_id: str, content: bytes, content_type: str) -> AnnouncementResponse:
        """Attach an image, replacing any previous one"""
        extension = image_extension(content_type)
        if extension is None:
            raise HTTPException(status_code=400, detail="Image must be a JPEG, PNG, WebP or GIF file")
        if not content:
            raise HTTPException(status_code=400, detail="Image file is empty")
        if len(content) > settings.max_upload_bytes:
            raise HTTPException(status_code=413, detail="Image is too large")

        announcement = self.get_row(church_id, announcement_id)
        key = f"{church_id}/{announcement_id}.{extension}"
        try:
            public_url = self.storage.upload_file(content, key, content_type)
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to upload image: {e}")

        old_key = self.storage.key_from_url(announcement.get("image_url"))
        if old_key and old_key != key:
            self.storage.delete_files([old_key])

        return self.update_record(church_id, announcement_id, {
            "image_url": public_url,
            "updated_at": now_utc().isoformat(),
        })

    def delete_image(self, church_id: str, announcement_id: str) -> AnnouncementResponse:
        announcement = self.get_row(church_id, announcement_id)
        if announcement.get("image_url"):
            self.storage.delete_by_url(announcement["image_url"])
        return self.update_record(church_id, announcement_id, {
            "image_url": None,
            "updated_at": now_utc().isoformat(),
        })


class AnnouncementCommentService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _ensure_announcement(self, church_id: str, announcement_id: str) -> None:
        AnnouncementService(self.supabase).get_row(church_id, announcement_id)

    def list_comments(self, church_id: str, announcement_id: str) -> List[CommentResponse]:
        """Comments of an announcement, oldest first"""
        try:
            self._ensure_announcement(church_id, announcement_id)
            result = self.supabase.table("announcement_comments")\
                .select("*")\
                .eq("announcement_id", announcement_id)\
                .order("created_at")\
                .execute()
            return [CommentResponse(**c) for c in (result.data or [])]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing comments of announcement {announcement_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def add_comment(self, access: ChurchAccess, announcement_id: str, comment_data: CommentCreate) -> CommentResponse:
        try:
            self._ensure_announcement(access.church_id, announcement_id)
            content = comment_data.content.strip()
            if not content:
                raise HTTPException(status_code=400, detail="Comment must not be empty")
            result = self.supabase.table("announcement_comments").insert({
                "announcement_id": announcement_id,
                "church_id": access.church_id,
                "content": content,
                "created_by": access.user_id,
                "author_name": ProfileService(self.supabase).get_display_name(access.user or {"id": access.user_id}),
                "author_role_label": role_label(access.effective_role),
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to add comment")
            return CommentResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error adding comment to announcement {announcement_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def delete_comment(self, access: ChurchAccess, announcement_id: str, comment_id: str) -> bool:
        """Author or church admin may delete a comment"""
        try:
            comment = first_row(
                self.supabase.table("announcement_comments")
                .select("*")
                .eq("id", comment_id)
                .eq("announcement_id", announcement_id)
                .eq("church_id", access.church_id)
                .limit(1)
                .execute()
            )
            if not comment:
                raise HTTPException(status_code=404, detail="Comment not found")
            if comment.get("created_by") != access.user_id and not access.is_admin:
                raise HTTPException(status_code=403, detail="Only the author or a church admin can delete this comment")
            self.supabase.table("announcement_comments")\
                .delete()\
                .eq("id", comment_id)\
                .execute()
            return True
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting comment {comment_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
