from pydantic import BaseModel, Field, model_validator
from typing import Optional, Literal
from datetime import datetime
from churchecker.core.timeutils import parse_timestamp

EventType = Literal["service", "meeting", "retreat", "special", "other"]


class EventCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    event_type: EventType = "service"
    start_datetime: datetime
    end_datetime: Optional[datetime] = None
    location: Optional[str] = Field(default=None, max_length=200)

    @model_validator(mode="after")
    def end_not_before_start(self):
        if self.end_datetime is not None and parse_timestamp(self.end_datetime) < parse_timestamp(self.start_datetime):
            raise ValueError("end_datetime must not be before start_datetime")
        return self


class EventUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    event_type: Optional[EventType] = None
    start_datetime: Optional[datetime] = None
    end_datetime: Optional[datetime] = None
    location: Optional[str] = Field(default=None, max_length=200)


class EventResponse(BaseModel):
    id: str
    church_id: str
    title: str
    description: Optional[str] = None
    event_type: str = "service"
    start_datetime: datetime
    end_datetime: Optional[datetime] = None
    location: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
