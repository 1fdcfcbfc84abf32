from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse, RedirectResponse
from urllib.parse import quote, urlencode
from churchecker.config.settings import settings
from churchecker.database.supabase_client import get_supabase, get_session_client_factory
from churchecker.modules.auth.kakao_client import KakaoClient, KakaoAuthError
from churchecker.modules.auth.schemas import NativeLoginRequest, SessionResponse, MeResponse
from churchecker.modules.auth.service import AuthService
from churchecker.modules.profiles.service import ProfileService
from churchecker.core.dependencies import get_current_user, get_current_token, get_auth_service
from supabase import Client
from typing import Dict
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

KAKAO_PROVIDER = "kakao"


def get_kakao_client() -> KakaoClient:
    return KakaoClient()


def get_bridge_service(
    supabase: Client = Depends(get_supabase),
    session_client_factory=Depends(get_session_client_factory)
) -> AuthService:
    return AuthService(supabase, session_client_factory)


def kakao_redirect_uri() -> str:
    return f"{settings.api_base_url}/api/v1/auth/kakao/callback"


def login_error_redirect(error: str) -> RedirectResponse:
    return RedirectResponse(f"{settings.base_url}/login?error={quote(error)}", status_code=302)


@router.get("/kakao")
async def kakao_login(kakao: KakaoClient = Depends(get_kakao_client)):
    """Redirect the browser to Kakao's consent screen"""
    if not kakao.configured:
        return JSONResponse(status_code=500, content={"detail": "KAKAO_REST_API_KEY not configured"})
    return RedirectResponse(kakao.authorize_url(kakao_redirect_uri()), status_code=302)


@router.get("/kakao/callback")
async def kakao_callback(
    code: str = None,
    kakao: KakaoClient = Depends(get_kakao_client),
    service: AuthService = Depends(get_bridge_service)
):
    """Finish the Kakao OAuth flow and hand the session to the frontend"""
    if not code:
        return login_error_redirect("no_code")
    try:
        access_token = kakao.exchange_code(code, kakao_redirect_uri())
        profile = kakao.fetch_profile(access_token)
        logger.info(f"Kakao user info received: {profile.id}")
        linked = service.sign_in_external(KAKAO_PROVIDER, profile)
    except KakaoAuthError as e:
        return login_error_redirect(e.code)
    except HTTPException as e:
        logger.error(f"Kakao auth error: {e.detail}")
        return login_error_redirect(str(e.detail))
    except Exception as e:
        logger.exception(f"Kakao auth error: {e}")
        return login_error_redirect(str(e) or "unknown_error")

    fragment = urlencode({
        "access_token": linked.access_token,
        "refresh_token": linked.refresh_token or "",
        "next": "/profile/setup" if linked.profile_created else "/",
    })
    return RedirectResponse(f"{settings.base_url}/auth/complete#{fragment}", status_code=302)


@router.post("/kakao/native", response_model=SessionResponse)
async def kakao_native_login(
    login_data: NativeLoginRequest,
    kakao: KakaoClient = Depends(get_kakao_client),
    service: AuthService = Depends(get_bridge_service)
):
    """Sign in with a token obtained by the native Kakao SDK"""
    try:
        profile = kakao.fetch_profile(login_data.access_token)
    except KakaoAuthError as e:
        raise HTTPException(status_code=401, detail=f"Invalid Kakao access token: {e.code}")
    if profile.id != login_data.id:
        raise HTTPException(status_code=401, detail="Kakao access token does not belong to this user")
    if login_data.nickname and not profile.nickname:
        profile.nickname = login_data.nickname
    if login_data.profile_image and not profile.profile_image:
        profile.profile_image = login_data.profile_image
    try:
        linked = service.sign_in_external(KAKAO_PROVIDER, profile)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Native Kakao auth error: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to create auth session: {e}")
    return linked.to_response()


@router.get("/me", response_model=MeResponse)
async def get_me(
    current_user: Dict = Depends(get_current_user),
    supabase: Client = Depends(get_supabase)
):
    """Get current authenticated user and their profile"""
    profile = ProfileService(supabase).find_profile(current_user["id"])
    return MeResponse(
        id=current_user["id"],
        email=current_user.get("email"),
        user_metadata=current_user.get("user_metadata") or {},
        profile=profile.model_dump(mode="json") if profile else None,
    )


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}
