from pydantic import AfterValidator, BaseModel, Field, field_validator
from typing import Annotated, Optional, List, Literal
from datetime import datetime

PersonType = Literal["student", "teacher"]


def normalize_attendance_days(days: List[int]) -> List[int]:
    """Unique weekday indices in 0..6 (0 = Sunday), sorted"""
    for day in days:
        if not 0 <= day <= 6:
            raise ValueError("attendance_days must contain weekday indices between 0 (Sunday) and 6 (Saturday)")
    return sorted(set(days))


def normalize_name(name: str) -> str:
    name = name.strip()
    if not name:
        raise ValueError("name must not be empty")
    return name


PersonName = Annotated[str, Field(max_length=50), AfterValidator(normalize_name)]
AttendanceDays = Annotated[List[int], AfterValidator(normalize_attendance_days)]


class PersonCreate(BaseModel):
    name: PersonName
    phone: Optional[str] = Field(default=None, max_length=30)
    age: Optional[int] = Field(default=None, ge=0, le=150)
    grade: Optional[str] = Field(default=None, max_length=30)
    type: PersonType = "student"
    attendance_days: AttendanceDays = []


class PersonUpdate(BaseModel):
    name: Optional[PersonName] = None
    phone: Optional[str] = Field(default=None, max_length=30)
    age: Optional[int] = Field(default=None, ge=0, le=150)
    grade: Optional[str] = Field(default=None, max_length=30)
    type: Optional[PersonType] = None
    attendance_days: Optional[AttendanceDays] = None


class PersonResponse(BaseModel):
    id: str
    church_id: str
    name: str
    phone: Optional[str] = None
    age: Optional[int] = None
    grade: Optional[str] = None
    type: str = "student"
    photo_url: Optional[str] = None
    attendance_days: List[int] = []
    registered_by: Optional[str] = None
    registered_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("attendance_days", mode="before")
    @classmethod
    def null_days_mean_every_day(cls, value):
        return value or []

    class Config:
        from_attributes = True
