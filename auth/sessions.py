"""
Server-side login sessions.

A session is a row binding an opaque random token (the cookie value) to a
user id until ``expires_at``.  Expiry is ``config.session_expiry_seconds``
after login.
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import config
from database.models import LoginSession

logger = logging.getLogger(__name__)


def _utc(value: datetime) -> datetime:
    # Stored as UTC; SQLite hands the values back naive.
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def _is_expired(row: LoginSession, now: Optional[datetime] = None) -> bool:
    now = now or datetime.now(timezone.utc)
    return _utc(row.expires_at) <= now


async def create_session(db: AsyncSession, user_id: int) -> LoginSession:
    """Open a new session for *user_id* and return it."""
    now = datetime.now(timezone.utc)
    row = LoginSession(
        token=secrets.token_urlsafe(32),
        user_id=user_id,
        created_at=now,
        expires_at=now + timedelta(seconds=config.session_expiry_seconds),
    )
    db.add(row)
    await db.flush()
    return row


async def resolve_session(db: AsyncSession, token: Optional[str]) -> Optional[int]:
    """
    Return the user id bound to *token*, or ``None`` if the token is
    missing, unknown or expired.  Expired rows are removed on sight.
    """
    if not token:
        return None
    row = await db.get(LoginSession, token)
    if row is None:
        return None
    if _is_expired(row):
        logger.debug("Session for user %s expired", row.user_id)
        await db.delete(row)
        await db.flush()
        return None
    return row.user_id


async def destroy_session(db: AsyncSession, token: Optional[str]) -> bool:
    """Delete the session row for *token*.  Returns whether one existed."""
    if not token:
        return False
    result = await db.execute(delete(LoginSession).where(LoginSession.token == token))
    return (result.rowcount or 0) > 0


async def purge_expired_sessions(db: AsyncSession) -> int:
    """Delete every expired session row and return how many went."""
    now = datetime.now(timezone.utc)
    result = await db.execute(
        delete(LoginSession)
        .where(LoginSession.expires_at <= now)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0
