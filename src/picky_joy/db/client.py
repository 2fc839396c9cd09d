"""
Picky Joy - Supabase Client.

Low-level database access. The service-role client is used server side;
every query filters on user_id explicitly.
"""

from supabase import Client, create_client

from picky_joy.config import get_settings
from picky_joy.errors import ConfigurationError

# Singleton client instance
_service_client: Client | None = None


def get_service_client() -> Client:
    """
    Get the service-role Supabase client.

    Uses singleton pattern to reuse connection.
    """
    global _service_client

    if _service_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            missing = [
                name
                for name, value in (
                    ("SUPABASE_URL", settings.supabase_url),
                    ("SUPABASE_SERVICE_ROLE_KEY", settings.supabase_service_role_key),
                )
                if not value
            ]
            raise ConfigurationError(details=f"Missing environment variables: {', '.join(missing)}")

        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )

    return _service_client


def reset_service_client() -> None:
    """Drop the cached client (tests, settings reload)."""
    global _service_client
    _service_client = None
