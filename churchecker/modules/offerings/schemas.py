from pydantic import BaseModel, Field
from typing import Dict, Optional, Literal
from datetime import date, datetime

OfferingType = Literal["tithe", "thanksgiving", "mission", "building", "special", "other"]


class OfferingCreate(BaseModel):
    offering_type: OfferingType = "tithe"
    amount: int = Field(ge=0)
    offering_date: date
    student_id: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=1000)


class OfferingUpdate(BaseModel):
    offering_type: Optional[OfferingType] = None
    amount: Optional[int] = Field(default=None, ge=0)
    offering_date: Optional[date] = None
    student_id: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=1000)


class OfferingResponse(BaseModel):
    id: str
    church_id: str
    student_id: Optional[str] = None
    student_name: Optional[str] = None
    offering_type: str
    amount: int
    offering_date: date
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OfferingSummaryResponse(BaseModel):
    total: int = 0
    count: int = 0
    this_month_total: int = 0
    this_month_count: int = 0
    by_type: Dict[str, int] = {}
