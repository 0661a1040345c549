import logging
from typing import Optional

import httpx
from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession
from supabase import AuthError
from supabase._async.client import AsyncClient as AsyncSupabaseClient

from models.models import User
from repos.user_repo import UserRepo

from .get_db import get_db_async
from .supabase_client import get_supabase_client

logger = logging.getLogger(__name__)


def extract_bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_optional_user(
    request: Request,
    db: AsyncSession = Depends(get_db_async),
    supabase: Optional[AsyncSupabaseClient] = Depends(get_supabase_client),
) -> Optional[User]:
    token = extract_bearer_token(request)
    if not token:
        return None

    if supabase is None:
        logger.warning("Bearer token supplied but identity verification is disabled.")
        return None

    try:
        user_response = await supabase.auth.get_user(jwt=token)
    except (AuthError, httpx.HTTPError) as e:
        logger.warning(f"Token verification failed: {e}")
        return None

    if not user_response or not user_response.user:
        logger.warning(f"No user returned for token: {token[:20]}...")
        return None

    identity = user_response.user
    user = await UserRepo(db).upsert_from_identity(
        user_id=str(identity.id),
        email=identity.email,
        user_metadata=identity.user_metadata or {},
    )
    request.state.user = user
    return user


async def get_current_user(
    user: Optional[User] = Depends(get_optional_user),
) -> User:
    if user is None:
        raise HTTPException(
            status_code=401,
            detail="Not Authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
