from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for identity linking (auth admin API)

    # Storage buckets
    storage_bucket_photos: str = "student-photos"
    storage_bucket_images: str = "announcement-images"
    max_upload_bytes: int = 5 * 1024 * 1024

    # Kakao OAuth
    kakao_rest_api_key: Optional[str] = None
    kakao_client_secret: Optional[str] = None

    # Gemini (daily verse)
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-pro"

    # Public origins
    base_url: str = "http://localhost:3000"  # frontend: invite links, login redirects
    api_base_url: str = "http://localhost:8000"  # this service: OAuth redirect_uri

    # App
    app_name: str = "churchecker"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    timezone: str = "Asia/Seoul"  # defines "today" for attendance and monthly totals
    http_timeout_seconds: float = 10.0
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
