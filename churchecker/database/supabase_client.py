from supabase import create_client, Client
from churchecker.config.settings import settings


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. The API's own checks in core/dependencies apply instead."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client or cls.get_client()

    @classmethod
    def new_session_client(cls) -> Client:
        """Fresh anon client for flows that sign in (verify_otp stores the session on the client)."""
        return create_client(settings.supabase_url, settings.supabase_key)

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_service_client()


def get_session_client_factory():
    return SupabaseClient.new_session_client
