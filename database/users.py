"""
User directory: registration, lookup and credential checks.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from api.errors import Conflict, Unauthenticated
from auth.password import hash_password, verify_password
from database.models import User

logger = logging.getLogger(__name__)

_BAD_CREDENTIALS = "Invalid email or password"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(
        select(User).where(User.email == normalize_email(email))
    )
    return result.scalar_one_or_none()


async def get_user_by_id(db: AsyncSession, user_id: int) -> Optional[User]:
    return await db.get(User, user_id)


async def create_user(db: AsyncSession, email: str, password: str) -> User:
    """Register a new user.  Raises ``Conflict`` if the email is taken."""
    email = normalize_email(email)
    if await get_user_by_email(db, email) is not None:
        raise Conflict("Email already registered")

    user = User(email=email, password_hash=hash_password(password))
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        # A concurrent registration took the email after the check above.
        await db.rollback()
        raise Conflict("Email already registered")
    logger.info("Registered user %s (%s)", user.email, user.id)
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    """
    Return the user whose credentials match.

    Unknown email and wrong password both raise ``Unauthenticated`` with the
    same message.
    """
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Failed login for %s", normalize_email(email))
        raise Unauthenticated(_BAD_CREDENTIALS)
    return user
