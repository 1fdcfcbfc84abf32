from fastapi import APIRouter, HTTPException
from churchecker.config.settings import settings
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/debug", tags=["diagnostics"])

REQUIRED_KEYS = ("supabase_url", "supabase_key", "supabase_service_role_key", "kakao_rest_api_key")
OPTIONAL_KEYS = ("kakao_client_secret", "gemini_api_key")


def config_report() -> dict:
    """Which configuration values are present, without exposing them"""
    kakao_key = settings.kakao_rest_api_key or ""
    for key in REQUIRED_KEYS + OPTIONAL_KEYS:
        if not getattr(settings, key):
            logger.warning(f"{key.upper()} is not configured")
    return {
        "environment": settings.environment,
        "has_kakao_key": bool(kakao_key),
        "kakao_key_length": len(kakao_key),
        "kakao_key_prefix": kakao_key[:4] if kakao_key else "not set",
        "has_kakao_client_secret": bool(settings.kakao_client_secret),
        "has_supabase_url": bool(settings.supabase_url),
        "has_supabase_key": bool(settings.supabase_key),
        "has_supabase_service_role_key": bool(settings.supabase_service_role_key),
        "has_gemini_key": bool(settings.gemini_api_key),
        "base_url": settings.base_url,
        "api_base_url": settings.api_base_url,
        "timezone": settings.timezone,
    }


@router.get("/env")
async def debug_env():
    """Configuration presence flags (not available in production)"""
    if settings.is_production:
        raise HTTPException(status_code=404, detail="Not Found")
    return config_report()
