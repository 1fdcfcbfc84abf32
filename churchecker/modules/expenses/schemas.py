from pydantic import BaseModel, Field
from typing import Dict, Optional, Literal
from datetime import date, datetime

ExpenseCategory = Literal["snacks", "materials", "events", "equipment", "transportation", "other"]


class ExpenseCreate(BaseModel):
    category: ExpenseCategory = "snacks"
    item_name: str = Field(min_length=1, max_length=200)
    amount: int = Field(ge=0)
    expense_date: date
    receipt_url: Optional[str] = Field(default=None, max_length=2000)
    notes: Optional[str] = Field(default=None, max_length=1000)


class ExpenseUpdate(BaseModel):
    category: Optional[ExpenseCategory] = None
    item_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    amount: Optional[int] = Field(default=None, ge=0)
    expense_date: Optional[date] = None
    receipt_url: Optional[str] = Field(default=None, max_length=2000)
    notes: Optional[str] = Field(default=None, max_length=1000)


class ExpenseResponse(BaseModel):
    id: str
    church_id: str
    category: str
    item_name: str
    amount: int
    expense_date: date
    receipt_url: Optional[str] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ExpenseSummaryResponse(BaseModel):
    total: int = 0
    count: int = 0
    this_month_total: int = 0
    this_month_count: int = 0
    by_category: Dict[str, int] = {}
