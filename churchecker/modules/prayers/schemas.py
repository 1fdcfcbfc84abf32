from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime

PrayerCategory = Literal["일반", "개인", "가족", "건강", "학업", "진로", "관계", "기타"]
PrayerStatus = Literal["진행중", "응답됨", "대기중"]

STATUS_ANSWERED = "응답됨"
STATUS_IN_PROGRESS = "진행중"


class PrayerCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1, max_length=5000)
    student_id: Optional[str] = None
    is_anonymous: bool = False
    category: PrayerCategory = "일반"
    status: PrayerStatus = STATUS_IN_PROGRESS


class PrayerUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1, max_length=5000)
    student_id: Optional[str] = None
    is_anonymous: Optional[bool] = None
    category: Optional[PrayerCategory] = None
    status: Optional[PrayerStatus] = None


class PrayerAnswerUpdate(BaseModel):
    answered: bool
    testimony: Optional[str] = Field(default=None, max_length=5000)


class PrayerStatusUpdate(BaseModel):
    status: PrayerStatus


class PrayerResponse(BaseModel):
    id: str
    church_id: str
    student_id: Optional[str] = None
    student_name: Optional[str] = None
    title: str
    content: str
    is_anonymous: bool = False
    is_answered: bool = False
    answer_testimony: Optional[str] = None
    answered_at: Optional[datetime] = None
    category: str = "일반"
    status: str = STATUS_IN_PROGRESS
    created_by: Optional[str] = None
    created_by_name: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PrayerCommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=2000)


class PrayerCommentResponse(BaseModel):
    id: str
    prayer_id: str
    content: str
    created_by: Optional[str] = None
    created_by_name: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
