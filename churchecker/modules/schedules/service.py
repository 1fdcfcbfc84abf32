from churchecker.core.crud import ChurchRecordService
from churchecker.core.timeutils import month_bounds, resolve_month
from churchecker.modules.schedules.schemas import (
    ScheduleCreate, ScheduleUpdate, ScheduleResponse, ScheduleSummaryResponse
)
from typing import Any, Dict, List, Optional
from collections import Counter
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class ScheduleService(ChurchRecordService):
    table = "service_schedules"
    response_model = ScheduleResponse
    order_by = (("schedule_date", False),)
    person_columns = ("assigned_student_id",)
    not_found_detail = "Schedule not found"

    def decorate(self, church_id: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        names = self.person_names(church_id, rows, "assigned_student_id")
        return [{**row, "assigned_student_name": names.get(row.get("assigned_student_id"))} for row in rows]

    def _month_range(self, year: Optional[int], month: Optional[int]):
        first, last = month_bounds(year, month)
        return first.isoformat(), last.isoformat()

    def list_schedules(
        self,
        church_id: str,
        year: Optional[int] = None,
        month: Optional[int] = None,
        status: Optional[str] = None
    ) -> List[ScheduleResponse]:
        """Schedules by date; a year or month narrows to that month, the missing part taken from today"""
        ranges = None
        if year or month:
            year, month = resolve_month(year, month)
            ranges = {"schedule_date": self._month_range(year, month)}
        return self.list_records(church_id, filters={"status": status}, ranges=ranges)

    def create_schedule(self, church_id: str, schedule_data: ScheduleCreate, user_id: str) -> ScheduleResponse:
        return self.create_record(church_id, schedule_data.model_dump(mode="json"), user_id)

    def update_schedule(self, church_id: str, schedule_id: str, schedule_data: ScheduleUpdate) -> ScheduleResponse:
        update_data = schedule_data.model_dump(mode="json", exclude_unset=True)
        for field in ("service_type", "service_name", "schedule_date", "status"):
            if field in update_data and update_data[field] is None:
                raise HTTPException(status_code=400, detail=f"{field} cannot be empty")
        return self.update_record(church_id, schedule_id, update_data)

    def set_status(self, church_id: str, schedule_id: str, status: str) -> ScheduleResponse:
        return self.update_record(church_id, schedule_id, {"status": status})

    def get_summary(self, church_id: str, year: Optional[int] = None, month: Optional[int] = None) -> ScheduleSummaryResponse:
        """Counts by status for a month (default: this month)"""
        year, month = resolve_month(year, month)
        try:
            rows = self.fetch_rows(church_id, ranges={"schedule_date": self._month_range(year, month)})
        except Exception as e:
            logger.error(f"Error loading schedules of church {church_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        counts = Counter(row.get("status") or "scheduled" for row in rows)
        return ScheduleSummaryResponse(
            year=year,
            month=month,
            scheduled=counts["scheduled"],
            completed=counts["completed"],
            cancelled=counts["cancelled"],
            total=len(rows),
        )
