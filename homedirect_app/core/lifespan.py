import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from fintechs.stripe_client import init_payment_client

from .cache import Cache
from .settings import settings
from .supabase_client import close_supabase_client, init_supabase_client

logger = logging.getLogger("startup")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Waiting for application startup...")

    app.state.cache = Cache(url=settings.REDIS_URL, ttl=settings.CACHE_TTL_SECONDS)

    try:
        await init_supabase_client()
    except Exception:
        logger.exception("Supabase client initialization failed")

    try:
        init_payment_client()
    except Exception:
        logger.exception("Stripe client initialization failed")

    try:
        await app.state.cache.connect()
    except Exception:
        logger.exception("Redis connection failed; continuing without response cache")

    logger.info("Application startup complete.")

    yield

    try:
        await app.state.cache.close()
    except Exception:
        logger.exception("Failed to close Redis connection")

    try:
        await close_supabase_client()
    except Exception:
        logger.exception("Failed to close Supabase client")

    logger.info("Application shutdown complete.")
