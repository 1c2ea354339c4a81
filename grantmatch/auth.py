"""Request identity -- the caller's user id comes from the X-User-Id header."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from grantmatch import storage
from grantmatch.database import get_session
from grantmatch.models import User

USER_HEADER = "X-User-Id"


async def current_user(
    x_user_id: Optional[str] = Header(default=None, alias=USER_HEADER),
    x_user_email: Optional[str] = Header(default=None, alias="X-User-Email"),
    session: AsyncSession = Depends(get_session),
) -> User:
    """Resolve (and upsert) the calling user, or reject with 401."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Unauthorized")
    return await storage.upsert_user(session, x_user_id.strip(), email=x_user_email)
