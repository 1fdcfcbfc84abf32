from churchecker.core.crud import ChurchRecordService
from churchecker.core.ledger import summarize_ledger
from churchecker.core.timeutils import today_local
from churchecker.modules.offerings.schemas import (
    OfferingCreate, OfferingUpdate, OfferingResponse, OfferingSummaryResponse
)
from typing import Any, Dict, List, Optional
from datetime import date
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class OfferingService(ChurchRecordService):
    table = "offerings"
    response_model = OfferingResponse
    order_by = (("offering_date", True), ("created_at", True))
    person_columns = ("student_id",)
    not_found_detail = "Offering not found"

    def decorate(self, church_id: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        names = self.person_names(church_id, rows, "student_id")
        return [{**row, "student_name": names.get(row.get("student_id"))} for row in rows]

    def list_offerings(
        self,
        church_id: str,
        offering_type: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None
    ) -> List[OfferingResponse]:
        """Offerings by date, newest first"""
        return self.list_records(
            church_id,
            filters={"offering_type": offering_type},
            ranges={"offering_date": (start and start.isoformat(), end and end.isoformat())},
        )

    def create_offering(self, church_id: str, offering_data: OfferingCreate, user_id: str) -> OfferingResponse:
        return self.create_record(church_id, offering_data.model_dump(mode="json"), user_id)

    def update_offering(self, church_id: str, offering_id: str, offering_data: OfferingUpdate) -> OfferingResponse:
        update_data = offering_data.model_dump(mode="json", exclude_unset=True)
        for field in ("offering_type", "amount", "offering_date"):
            if field in update_data and update_data[field] is None:
                raise HTTPException(status_code=400, detail=f"{field} cannot be empty")
        return self.update_record(church_id, offering_id, update_data)

    def get_summary(self, church_id: str) -> OfferingSummaryResponse:
        try:
            rows = self.fetch_rows(church_id)
        except Exception as e:
            logger.error(f"Error loading offerings of church {church_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        summary = summarize_ledger(rows, "offering_date", "offering_type", today_local())
        summary["by_type"] = summary.pop("by_group")
        return OfferingSummaryResponse(**summary)
