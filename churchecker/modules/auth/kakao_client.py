"""Kakao OAuth endpoints: authorize URL, code exchange, profile fetch."""

import logging
from urllib.parse import urlencode

import requests

from churchecker.config.settings import settings
from churchecker.modules.auth.schemas import KakaoProfile

logger = logging.getLogger(__name__)

KAKAO_AUTHORIZE_URL = "https://kauth.kakao.com/oauth/authorize"
KAKAO_TOKEN_URL = "https://kauth.kakao.com/oauth/token"
KAKAO_PROFILE_URL = "https://kapi.kakao.com/v2/user/me"
KAKAO_SCOPE = "profile_nickname profile_image"


class KakaoAuthError(Exception):
    """A step of the Kakao exchange failed; `code` is safe to put in a redirect URL."""

    def __init__(self, code: str, message: str = ""):
        super().__init__(message or code)
        self.code = code


class KakaoClient:
    def __init__(self, client_id: str = None, client_secret: str = None, session: requests.Session = None):
        self.client_id = client_id if client_id is not None else settings.kakao_rest_api_key
        self.client_secret = client_secret if client_secret is not None else settings.kakao_client_secret
        self.session = session or requests.Session()
        self.timeout = settings.http_timeout_seconds

    @property
    def configured(self) -> bool:
        return bool(self.client_id)

    def _require_config(self):
        if not self.client_id:
            raise KakaoAuthError("kakao_not_configured", "KAKAO_REST_API_KEY not configured")

    def authorize_url(self, redirect_uri: str) -> str:
        self._require_config()
        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": KAKAO_SCOPE,
        }
        return f"{KAKAO_AUTHORIZE_URL}?{urlencode(params)}"

    def exchange_code(self, code: str, redirect_uri: str) -> str:
        """Trade an authorization code for a Kakao access token"""
        self._require_config()
        form = {
            "grant_type": "authorization_code",
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "code": code,
        }
        if self.client_secret:
            form["client_secret"] = self.client_secret
        try:
            response = self.session.post(KAKAO_TOKEN_URL, data=form, timeout=self.timeout)
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Kakao token request failed: {e}")
            raise KakaoAuthError("token_request_failed", str(e))
        if not response.ok or "access_token" not in payload:
            logger.error(f"Kakao token error: {payload}")
            raise KakaoAuthError("token_exchange_failed", payload.get("error_description", "Failed to get token"))
        return payload["access_token"]

    def fetch_profile(self, access_token: str) -> KakaoProfile:
        """Fetch the Kakao user behind an access token"""
        try:
            response = self.session.get(
                KAKAO_PROFILE_URL,
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self.timeout,
            )
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Kakao profile request failed: {e}")
            raise KakaoAuthError("profile_request_failed", str(e))
        if not response.ok or "id" not in payload:
            logger.error(f"Kakao profile error: {payload}")
            raise KakaoAuthError("profile_fetch_failed", "Failed to get user info")
        properties = payload.get("properties") or {}
        return KakaoProfile(
            id=str(payload["id"]),
            nickname=properties.get("nickname"),
            profile_image=properties.get("profile_image"),
        )
