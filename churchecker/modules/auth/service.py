import hashlib
import logging
import secrets
import time
from dataclasses import dataclass
from supabase import Client
from churchecker.config.settings import settings
from churchecker.core.db_utils import first_row
from churchecker.modules.auth.schemas import KakaoProfile, SessionResponse
from fastapi import HTTPException
from typing import Callable, Dict, Any, Optional

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500

DEFAULT_DISPLAY_NAME = "카카오 사용자"


def token_cache_key(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def placeholder_email(provider: str, external_id: str) -> str:
    """Address slot for a social-only account. Not a credential; nothing is derived from it."""
    return f"{provider}_{external_id}@{provider}.local"


@dataclass
class LinkedSession:
    user_id: str
    access_token: str
    refresh_token: Optional[str]
    profile_created: bool

    def to_response(self) -> SessionResponse:
        return SessionResponse(
            user_id=self.user_id,
            access_token=self.access_token,
            refresh_token=self.refresh_token,
            is_new_user=self.profile_created,
        )


class AuthService:
    def __init__(self, supabase: Client, session_client_factory: Callable[[], Client] = None):
        self.supabase = supabase
        self.session_client_factory = session_client_factory

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = token_cache_key(token)
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def logout(self, token: str) -> bool:
        """Revoke the session behind a token (best effort) and forget its cached user"""
        _AUTH_USER_CACHE.pop(token_cache_key(token), None)
        try:
            self.supabase.auth.admin.sign_out(token)
            return True
        except Exception as e:
            logger.warning(f"Sign-out failed: {e}")
            return False

    def sign_in_external(self, provider: str, profile: KakaoProfile) -> LinkedSession:
        """
        Map a social account to a Supabase user and open a session for it.

        Existing link: reuse its user. No link: create a confirmed, password-less
        user via the admin API (or adopt an auth user that already owns the
        placeholder address) and record the link. The session comes from a
        server-generated magic link, so the provider id never acts as a secret.
        """
        if not settings.supabase_service_role_key:
            raise HTTPException(
                status_code=500,
                detail="Service role key not configured. Cannot link external identities."
            )
        link = first_row(
            self.supabase.table("external_identities")
            .select("*")
            .eq("provider", provider)
            .eq("external_id", profile.id)
            .limit(1)
            .execute()
        )
        adopted = False
        if link:
            email = link["email"]
            logger.info(f"Existing {provider} identity {profile.id} -> user {link['user_id']}")
        else:
            email = placeholder_email(provider, profile.id)
            adopted = self._create_auth_user(provider, profile, email)

        user_id, access_token, refresh_token = self._mint_session(email)

        if not link:
            if adopted:
                self._retire_password(user_id)
            self.supabase.table("external_identities").insert({
                "provider": provider,
                "external_id": profile.id,
                "user_id": user_id,
                "email": email,
            }).execute()
            logger.info(f"Linked {provider} identity {profile.id} -> user {user_id}")

        profile_created = self._ensure_profile(user_id, profile)
        return LinkedSession(
            user_id=user_id,
            access_token=access_token,
            refresh_token=refresh_token,
            profile_created=profile_created,
        )

    def _create_auth_user(self, provider: str, profile: KakaoProfile, email: str) -> bool:
        """Create the auth user for a social account; True when one already existed and is adopted"""
        try:
            self.supabase.auth.admin.create_user({
                "email": email,
                "email_confirm": True,
                "user_metadata": {
                    "name": profile.nickname or DEFAULT_DISPLAY_NAME,
                    "avatar_url": profile.profile_image,
                },
                "app_metadata": {
                    "provider": provider,
                    "provider_id": profile.id,
                },
            })
            logger.info(f"Created auth user for {provider} identity {profile.id}")
            return False
        except Exception as e:
            message = str(e).lower()
            if "already" not in message or "registered" not in message:
                raise
            # Account predates identity linking; adopt it via the magic link below.
            logger.info(f"Auth user for {email} already exists, linking it")
            return True

    def _retire_password(self, user_id: str) -> None:
        """Replace the password of an adopted account with random material nobody knows"""
        self.supabase.auth.admin.update_user_by_id(user_id, {"password": secrets.token_urlsafe(32)})
        logger.info(f"Password of adopted user {user_id} reset")

    def _mint_session(self, email: str) -> tuple:
        link_response = self.supabase.auth.admin.generate_link({
            "type": "magiclink",
            "email": email,
        })
        token_hash = link_response.properties.hashed_token
        session_client = self.session_client_factory() if self.session_client_factory else self.supabase
        auth_response = session_client.auth.verify_otp({
            "type": "magiclink",
            "token_hash": token_hash,
        })
        if not auth_response.session or not auth_response.user:
            raise HTTPException(status_code=500, detail="Failed to open session")
        return (
            auth_response.user.id,
            auth_response.session.access_token,
            auth_response.session.refresh_token,
        )

    def _ensure_profile(self, user_id: str, profile: KakaoProfile) -> bool:
        """Create the profile row on first sign-in. A failure here is logged, not fatal."""
        try:
            existing = first_row(
                self.supabase.table("profiles")
                .select("id")
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
            if existing:
                return False
            self.supabase.table("profiles").insert({
                "id": user_id,
                "name": profile.nickname or DEFAULT_DISPLAY_NAME,
                "avatar_url": profile.profile_image,
            }).execute()
            logger.info(f"Profile created for user {user_id}")
            return True
        except Exception as e:
            logger.error(f"Profile creation error for user {user_id}: {e}")
            return False
