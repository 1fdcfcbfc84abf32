from churchecker.core.crud import ChurchRecordService
from churchecker.core.ledger import summarize_ledger
from churchecker.core.timeutils import today_local
from churchecker.modules.expenses.schemas import (
    ExpenseCreate, ExpenseUpdate, ExpenseResponse, ExpenseSummaryResponse
)
from typing import List, Optional
from datetime import date
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("category", "item_name", "amount", "expense_date")


class ExpenseService(ChurchRecordService):
    table = "expenses"
    response_model = ExpenseResponse
    order_by = (("expense_date", True), ("created_at", True))
    not_found_detail = "Expense not found"

    def list_expenses(
        self,
        church_id: str,
        category: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None
    ) -> List[ExpenseResponse]:
        return self.list_records(
            church_id,
            filters={"category": category},
            ranges={"expense_date": (start and start.isoformat(), end and end.isoformat())},
        )

    def create_expense(self, church_id: str, expense_data: ExpenseCreate, user_id: str) -> ExpenseResponse:
        return self.create_record(church_id, expense_data.model_dump(mode="json"), user_id)

    def update_expense(self, church_id: str, expense_id: str, expense_data: ExpenseUpdate) -> ExpenseResponse:
        update_data = expense_data.model_dump(mode="json", exclude_unset=True)
        for field in REQUIRED_FIELDS:
            if field in update_data and update_data[field] is None:
                raise HTTPException(status_code=400, detail=f"{field} cannot be empty")
        return self.update_record(church_id, expense_id, update_data)

    def get_summary(self, church_id: str) -> ExpenseSummaryResponse:
        """Overall and this-month spending by category"""
        try:
            rows = self.fetch_rows(church_id)
        except Exception as e:
            logger.error(f"Error loading expenses of church {church_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        summary = summarize_ledger(rows, "expense_date", "category", today_local())
        summary["by_category"] = summary.pop("by_group")
        return ExpenseSummaryResponse(**summary)
