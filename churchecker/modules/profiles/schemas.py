from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ProfileUpsert(BaseModel):
    name: Optional[str] = Field(default=None, max_length=50)
    phone: Optional[str] = Field(default=None, max_length=30)
    bio: Optional[str] = Field(default=None, max_length=500)
    avatar_url: Optional[str] = None


class ProfileResponse(BaseModel):
    id: str
    name: str
    phone: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
