from supabase import Client
from churchecker.config.settings import settings
from churchecker.core.crud import ChurchRecordService
from churchecker.core.timeutils import now_utc
from churchecker.database.storage import ImageStorage, image_extension
from churchecker.modules.people.schemas import PersonCreate, PersonUpdate, PersonResponse
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

# (table, column) pairs that optionally point at a person and survive its deletion
NULLABLE_PERSON_LINKS = (
    ("offerings", "student_id"),
    ("prayer_requests", "student_id"),
    ("service_schedules", "assigned_student_id"),
)


class PeopleService(ChurchRecordService):
    table = "students"
    response_model = PersonResponse
    order_by = (("registered_at", True),)
    author_column = "registered_by"
    not_found_detail = "Person not found"

    def __init__(self, supabase: Client, storage: Optional[ImageStorage] = None):
        super().__init__(supabase)
        self.storage = storage or ImageStorage(supabase, settings.storage_bucket_photos)

    def list_people(self, church_id: str, person_type: Optional[str] = None) -> List[PersonResponse]:
        """Roster of a church, most recently registered first"""
        return self.list_records(church_id, filters={"type": person_type})

    def create_person(self, church_id: str, person_data: PersonCreate, user_id: str) -> PersonResponse:
        return self.create_record(church_id, person_data.model_dump(), user_id)

    def update_person(self, church_id: str, person_id: str, person_data: PersonUpdate) -> PersonResponse:
        update_data = person_data.model_dump(exclude_unset=True)
        for field in ("name", "type"):
            if field in update_data and update_data[field] is None:
                raise HTTPException(status_code=400, detail=f"{field} cannot be empty")
        if "attendance_days" in update_data and update_data["attendance_days"] is None:
            update_data["attendance_days"] = []
        if not update_data:
            return self.get_record(church_id, person_id)
        update_data["updated_at"] = now_utc().isoformat()
        return self.update_record(church_id, person_id, update_data)

    def delete_person(self, church_id: str, person_id: str) -> bool:
        """Delete a person with their attendance; ledger rows keep existing without the link"""
        try:
            person = self.get_row(church_id, person_id)

            self.supabase.table("attendance")\
                .delete()\
                .eq("student_id", person_id)\
                .execute()

            for table, column in NULLABLE_PERSON_LINKS:
                self.supabase.table(table)\
                    .update({column: None})\
                    .eq(column, person_id)\
                    .execute()

            self.supabase.table("students")\
                .delete()\
                .eq("id", person_id)\
                .execute()
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting person {person_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        if person.get("photo_url"):
            self.storage.delete_by_url(person["photo_url"])
        logger.info(f"Person {person_id} deleted from church {church_id}")
        return True

    def upload_photo(self, church_id: str, person_id: str, content: bytes, content_type: str) -> PersonResponse:
        """Store a photo at <church_id>/<person_id>.<ext> and point photo_url at it"""
        extension = image_extension(content_type)
        if extension is None:
            raise HTTPException(status_code=400, detail="Photo must be a JPEG, PNG, WebP or GIF image")
        if not content:
            raise HTTPException(status_code=400, detail="Photo file is empty")
        if len(content) > settings.max_upload_bytes:
            raise HTTPException(status_code=413, detail="Photo is too large")

        person = self.get_row(church_id, person_id)
        key = f"{church_id}/{person_id}.{extension}"
        try:
            public_url = self.storage.upload_file(content, key, content_type)
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to upload photo: {e}")

        old_key = self.storage.key_from_url(person.get("photo_url"))
        if old_key and old_key != key:
            self.storage.delete_files([old_key])

        return self.update_record(church_id, person_id, {
            "photo_url": public_url,
            "updated_at": now_utc().isoformat(),
        })

    def delete_photo(self, church_id: str, person_id: str) -> PersonResponse:
        person = self.get_row(church_id, person_id)
        if not person.get("photo_url"):
            raise HTTPException(status_code=404, detail="Person has no photo")
        self.storage.delete_by_url(person["photo_url"])
        return self.update_record(church_id, person_id, {
            "photo_url": None,
            "updated_at": now_utc().isoformat(),
        })
