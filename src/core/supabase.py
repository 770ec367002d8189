"""Supabase client singleton for database operations."""

from functools import lru_cache
from typing import Any

from supabase import Client, create_client
from supabase.lib.client_options import SyncClientOptions

from src.core.config import Settings, get_settings


def create_supabase_client(settings: Settings) -> Client:
    """Create a Supabase client from explicit settings.

    Uses the secret key for backend operations, which bypasses RLS at the
    PostgREST level. Only server-side code that writes orders may use it.

    Args:
        settings: Application settings carrying the project URL and key.

    Returns:
        Client: Supabase client instance.
    """
    options = SyncClientOptions(
        auto_refresh_token=False,
        persist_session=False,
        postgrest_client_timeout=settings.store_timeout_seconds,
    )
    return create_client(
        settings.supabase_url,
        settings.supabase_secret_key,
        options=options,
    )


@lru_cache
def get_supabase_client() -> Client:
    """Get cached Supabase client singleton for database operations.

    Returns:
        Client: Supabase client instance.
    """
    return create_supabase_client(get_settings())


async def check_database_connection() -> dict[str, Any]:
    """Check if database connection is healthy.

    Performs a simple query against the orders table to verify connectivity.

    Returns:
        dict: Connection status with 'healthy' boolean and optional 'error' message.
    """
    try:
        client = get_supabase_client()
        client.table("orders").select("id").limit(1).execute()
        return {"healthy": True}
    except Exception as e:
        return {"healthy": False, "error": str(e)}
