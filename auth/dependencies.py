"""
FastAPI dependencies for authentication and authorization.

Provides ``db_session``, ``get_current_user`` (resolves the session cookie
into a ``CurrentUser``) and ``owned_todo`` (loads a to-do and checks that the
caller owns it).  Used across all protected routes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AsyncGenerator

from fastapi import Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from api.errors import Forbidden, NotFound, Unauthenticated
from auth.sessions import resolve_session
from config.settings import config
from database.models import ToDo
from database.session import get_db_session
from database.todos import get_todo
from database.users import get_user_by_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrentUser:
    """Identity resolved from the session cookie for one request."""

    id: int
    email: str
    token: str


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


async def get_current_user(
    request: Request,
    session: AsyncSession = Depends(db_session),
) -> CurrentUser:
    """
    Resolve the session cookie to the signed-in user.

    Raises ``Unauthenticated`` when the cookie is missing, unknown, expired,
    or points at a user that no longer exists.
    """
    token = request.cookies.get(config.session_cookie_name)
    user_id = await resolve_session(session, token)
    if user_id is None:
        # An expired row deleted by resolve_session must survive the rollback
        # that the raise below triggers.
        if token:
            await session.commit()
        raise Unauthenticated()

    user = await get_user_by_id(session, user_id)
    if user is None:
        raise Unauthenticated()

    current = CurrentUser(id=user.id, email=user.email, token=token)
    request.state.user = current
    return current


def ensure_owner(user: CurrentUser, owner_id: int) -> None:
    """Raise ``Forbidden`` unless *user* is *owner_id*."""
    if user.id != owner_id:
        logger.warning("User %s denied access to a record owned by %s", user.id, owner_id)
        raise Forbidden()


async def owned_todo(
    todo_id: int = Path(..., ge=1),
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> ToDo:
    """Load the to-do at ``todo_id`` for its owner; 404 if missing, 403 if not theirs."""
    todo = await get_todo(session, todo_id)
    if todo is None:
        raise NotFound(f"Todo {todo_id} not found")
    ensure_owner(user, todo.user_id)
    return todo
