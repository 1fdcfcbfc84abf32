from pydantic import BaseModel, EmailStr, Field
from typing import Optional, Dict, Any


class KakaoProfile(BaseModel):
    id: str
    nickname: Optional[str] = None
    profile_image: Optional[str] = None


class NativeLoginRequest(BaseModel):
    access_token: str = Field(min_length=1)
    id: str = Field(min_length=1)
    email: Optional[EmailStr] = None
    nickname: Optional[str] = None
    profile_image: Optional[str] = None


class SessionResponse(BaseModel):
    user_id: str
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    is_new_user: bool = False


class MeResponse(BaseModel):
    id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = {}
    profile: Optional[Dict[str, Any]] = None
