from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import date, datetime

ServiceType = Literal["worship", "prayer", "word", "accompanist", "media", "other"]
ScheduleStatus = Literal["scheduled", "completed", "cancelled"]


class ScheduleCreate(BaseModel):
    service_type: ServiceType = "worship"
    service_name: str = Field(min_length=1, max_length=100)
    assigned_student_id: Optional[str] = None
    schedule_date: date
    status: ScheduleStatus = "scheduled"
    notes: Optional[str] = Field(default=None, max_length=1000)


class ScheduleUpdate(BaseModel):
    service_type: Optional[ServiceType] = None
    service_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    assigned_student_id: Optional[str] = None
    schedule_date: Optional[date] = None
    status: Optional[ScheduleStatus] = None
    notes: Optional[str] = Field(default=None, max_length=1000)


class ScheduleStatusUpdate(BaseModel):
    status: ScheduleStatus


class ScheduleResponse(BaseModel):
    id: str
    church_id: str
    service_type: str
    service_name: str
    assigned_student_id: Optional[str] = None
    assigned_student_name: Optional[str] = None
    schedule_date: date
    status: str = "scheduled"
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ScheduleSummaryResponse(BaseModel):
    year: int
    month: int
    scheduled: int = 0
    completed: int = 0
    cancelled: int = 0
    total: int = 0
