from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class AnnouncementCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1, max_length=10000)
    is_pinned: bool = False
    is_important: bool = False


class AnnouncementUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1, max_length=10000)
    is_pinned: Optional[bool] = None
    is_important: Optional[bool] = None


class AnnouncementResponse(BaseModel):
    id: str
    church_id: str
    title: str
    content: str
    author_id: Optional[str] = None
    author_name: Optional[str] = None
    is_pinned: bool = False
    is_important: bool = False
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    comment_count: int = 0

    class Config:
        from_attributes = True


class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=2000)


class CommentResponse(BaseModel):
    id: str
    announcement_id: str
    church_id: str
    content: str
    created_by: Optional[str] = None
    author_name: Optional[str] = None
    author_role_label: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
