"""
Base service for church-scoped record collections (announcements, prayers,
offerings, expenses, events, service schedules).

Every collection is a Supabase table with a church_id column and follows the
same list / create / update / delete contract; subclasses declare the table,
response model, ordering, and which columns link to a roster person.
"""

from supabase import Client
from churchecker.core.db_utils import first_row
from fastapi import HTTPException
from pydantic import BaseModel
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type
import logging

logger = logging.getLogger(__name__)


class ChurchRecordService:
    table: str = ""
    response_model: Type[BaseModel] = BaseModel
    # (column, descending) pairs applied in order
    order_by: Sequence[Tuple[str, bool]] = (("created_at", True),)
    author_column: Optional[str] = "created_by"
    person_columns: Sequence[str] = ()
    not_found_detail: str = "Record not found"

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def to_response(self, row: Dict[str, Any]) -> BaseModel:
        return self.response_model(**row)

    def fetch_rows(
        self,
        church_id: str,
        filters: Optional[Dict[str, Any]] = None,
        ranges: Optional[Dict[str, Tuple[Any, Any]]] = None
    ) -> List[Dict[str, Any]]:
        """Raw rows of a church, filtered by equality and inclusive ranges, in list order"""
        query = self.supabase.table(self.table)\
            .select("*")\
            .eq("church_id", church_id)
        for column, value in (filters or {}).items():
            if value is not None:
                query = query.eq(column, value)
        for column, (low, high) in (ranges or {}).items():
            if low is not None:
                query = query.gte(column, low)
            if high is not None:
                query = query.lte(column, high)
        for column, desc in self.order_by:
            query = query.order(column, desc=desc)
        return query.execute().data or []

    def list_records(
        self,
        church_id: str,
        filters: Optional[Dict[str, Any]] = None,
        ranges: Optional[Dict[str, Tuple[Any, Any]]] = None
    ) -> List[BaseModel]:
        try:
            rows = self.fetch_rows(church_id, filters, ranges)
            return [self.to_response(row) for row in self.decorate(church_id, rows)]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing {self.table} for church {church_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def decorate(self, church_id: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Hook for adding derived fields (e.g. linked person names) before serialization"""
        return rows

    def get_row(self, church_id: str, record_id: str) -> Dict[str, Any]:
        row = first_row(
            self.supabase.table(self.table)
            .select("*")
            .eq("id", record_id)
            .eq("church_id", church_id)
            .limit(1)
            .execute()
        )
        if not row:
            raise HTTPException(status_code=404, detail=self.not_found_detail)
        return row

    def get_record(self, church_id: str, record_id: str) -> BaseModel:
        try:
            row = self.get_row(church_id, record_id)
            return self.to_response(self.decorate(church_id, [row])[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error loading {self.table} {record_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def ensure_people_in_church(self, church_id: str, data: Dict[str, Any]) -> None:
        """Linked roster people must belong to the same church"""
        for column in self.person_columns:
            person_id = data.get(column)
            if not person_id:
                continue
            person = first_row(
                self.supabase.table("students")
                .select("id")
                .eq("id", person_id)
                .eq("church_id", church_id)
                .limit(1)
                .execute()
            )
            if not person:
                raise HTTPException(status_code=404, detail="Person not found in this church")

    def create_record(self, church_id: str, data: Dict[str, Any], user_id: str) -> BaseModel:
        try:
            self.ensure_people_in_church(church_id, data)
            insert_data = {**data, "church_id": church_id}
            if self.author_column:
                insert_data[self.author_column] = user_id
            result = self.supabase.table(self.table).insert(insert_data).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail=f"Failed to create {self.table} record")
            row = result.data[0]
            return self.to_response(self.decorate(church_id, [row])[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating {self.table} record for church {church_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def update_record(self, church_id: str, record_id: str, data: Dict[str, Any]) -> BaseModel:
        try:
            if not data:
                return self.get_record(church_id, record_id)
            self.ensure_people_in_church(church_id, data)
            result = self.supabase.table(self.table)\
                .update(data)\
                .eq("id", record_id)\
                .eq("church_id", church_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail=self.not_found_detail)
            row = result.data[0]
            return self.to_response(self.decorate(church_id, [row])[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating {self.table} {record_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def delete_record(self, church_id: str, record_id: str) -> bool:
        try:
            result = self.supabase.table(self.table)\
                .delete()\
                .eq("id", record_id)\
                .eq("church_id", church_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting {self.table} {record_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail=self.not_found_detail)
        return True

    def person_names(self, church_id: str, rows: List[Dict[str, Any]], column: str) -> Dict[str, str]:
        """Map person id -> name for the people linked from `column` in rows"""
        ids = list({row[column] for row in rows if row.get(column)})
        if not ids:
            return {}
        result = self.supabase.table("students")\
            .select("id, name")\
            .eq("church_id", church_id)\
            .in_("id", ids)\
            .execute()
        return {p["id"]: p["name"] for p in (result.data or [])}
