from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from churchecker.modules.churches.schemas import MembershipRole


class InviteCreate(BaseModel):
    role: MembershipRole = "member"
    max_uses: int = Field(default=1, ge=1, le=1000)
    expires_in_days: int = Field(default=7, ge=1, le=365)


class InviteResponse(BaseModel):
    id: str
    church_id: str
    token: str
    role: str
    created_by: str
    expires_at: datetime
    max_uses: int
    used_count: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InviteCreateResponse(BaseModel):
    token: str
    invite_url: str
    expires_at: datetime


class InvitePreviewResponse(BaseModel):
    church_id: str
    church_name: str
    role: str
    expires_at: datetime
    created_by_name: str
