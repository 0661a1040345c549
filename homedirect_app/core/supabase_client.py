import logging

from supabase._async.client import AsyncClient as AsyncSupabaseClient
from supabase._async.client import create_client as create_async_supabase_client

from .settings import settings

logger = logging.getLogger(__name__)

_global_supabase_client: AsyncSupabaseClient | None = None


async def init_supabase_client():
    """
    Creates the shared Supabase client used to verify bearer tokens.
    Called once from the application lifespan.
    """
    global _global_supabase_client

    if _global_supabase_client:
        logger.info("Supabase client already initialized.")
        return

    if not settings.identity_enabled:
        logger.warning(
            "SUPABASE_URL or SUPABASE_ANON_KEY is not configured; "
            "all requests will be treated as unauthenticated."
        )
        return

    logger.info(f"Initializing Supabase AsyncClient with URL: {settings.SUPABASE_URL[:20]}...")
    try:
        _global_supabase_client = await create_async_supabase_client(
            settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY
        )
        logger.info("Supabase AsyncClient initialized successfully.")
    except Exception as e:
        logger.error(f"Failed to initialize Supabase client: {e}", exc_info=True)
        _global_supabase_client = None
        raise


async def close_supabase_client():
    """Closes the auth client's HTTP session and clears the global reference."""
    global _global_supabase_client
    if _global_supabase_client is None:
        return
    logger.info("Closing Supabase client...")
    client, _global_supabase_client = _global_supabase_client, None
    await client.auth.close()
    logger.info("Supabase client closed.")


def get_supabase_client() -> AsyncSupabaseClient | None:
    """FastAPI dependency; None when identity verification is not configured."""
    return _global_supabase_client
