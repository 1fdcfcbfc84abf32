from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime

MembershipRole = Literal["admin", "teacher", "member"]


class ChurchCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)


class ChurchUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)


class ChurchResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    owner_id: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ChurchWithRoleResponse(ChurchResponse):
    my_role: Optional[str] = None
    is_owner: bool = False


class ChurchDetailResponse(ChurchWithRoleResponse):
    is_admin: bool = False
    capabilities: List[str] = []
    people_count: int = 0
    student_count: int = 0
    teacher_count: int = 0
    today_attendance_count: int = 0


class MemberResponse(BaseModel):
    id: str
    church_id: str
    user_id: str
    role: str
    joined_at: datetime
    name: Optional[str] = None
    is_owner: bool = False

    class Config:
        from_attributes = True


class MemberRoleUpdate(BaseModel):
    role: MembershipRole


class RoleHistoryEntry(BaseModel):
    id: str
    member_id: str
    user_id: str
    old_role: str
    new_role: str
    changed_by: str
    changed_by_name: Optional[str] = None
    changed_at: datetime


class MemberHistoryResponse(BaseModel):
    member: MemberResponse
    days_since_joined: int
    role_changes: int
    history: List[RoleHistoryEntry]
