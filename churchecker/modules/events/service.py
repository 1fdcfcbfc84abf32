from churchecker.core.crud import ChurchRecordService
from churchecker.core.timeutils import parse_timestamp
from churchecker.modules.events.schemas import EventCreate, EventUpdate, EventResponse
from typing import List, Optional
from datetime import datetime
from fastapi import HTTPException


class EventService(ChurchRecordService):
    table = "church_events"
    response_model = EventResponse
    order_by = (("start_datetime", False),)
    not_found_detail = "Event not found"

    def list_events(
        self,
        church_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        event_type: Optional[str] = None
    ) -> List[EventResponse]:
        """Events by start time, optionally only those starting inside [start, end]"""
        return self.list_records(
            church_id,
            filters={"event_type": event_type},
            ranges={"start_datetime": (start and start.isoformat(), end and end.isoformat())},
        )

    def create_event(self, church_id: str, event_data: EventCreate, user_id: str) -> EventResponse:
        return self.create_record(church_id, event_data.model_dump(mode="json"), user_id)

    def update_event(self, church_id: str, event_id: str, event_data: EventUpdate) -> EventResponse:
        update_data = event_data.model_dump(mode="json", exclude_unset=True)
        for field in ("title", "event_type", "start_datetime"):
            if field in update_data and update_data[field] is None:
                raise HTTPException(status_code=400, detail=f"{field} cannot be empty")

        if "start_datetime" in update_data or "end_datetime" in update_data:
            current = self.get_row(church_id, event_id)
            start = parse_timestamp(update_data.get("start_datetime", current.get("start_datetime")))
            end = parse_timestamp(update_data.get("end_datetime", current.get("end_datetime")))
            if start and end and end < start:
                raise HTTPException(status_code=400, detail="end_datetime must not be before start_datetime")
        return self.update_record(church_id, event_id, update_data)
