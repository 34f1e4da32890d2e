"""
User API routes: register, login (session cookie), logout, whoami.

Route prefix: /api/v1/users
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import CurrentUser, db_session, get_current_user
from auth.sessions import create_session, destroy_session
from api.schemas import Credentials, LoginRequest, LoginResponse, LogoutResponse, UserOut
from config.settings import config
from database.users import authenticate, create_user, get_user_by_id

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=config.session_cookie_name,
        value=token,
        max_age=config.session_expiry_seconds,
        httponly=True,
        samesite="lax",
        secure=config.cookie_secure,
    )


@router.post("", response_model=UserOut)
async def register(
    req: Credentials,
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """Register a new user."""
    user = await create_user(session, req.email, req.password)
    return user.to_dict()


@router.post("/sessions", response_model=LoginResponse)
async def login(
    req: LoginRequest,
    response: Response,
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """Login with email + password; the session token is returned as a cookie."""
    user = await authenticate(session, req.email, req.password)
    row = await create_session(session, user.id)
    _set_session_cookie(response, row.token)
    logger.info("Login: %s (%s)", user.email, user.id)

    return {"message": "Signed in successfully!", "user": user.to_dict()}


@router.delete("/sessions", response_model=LogoutResponse)
async def logout(
    response: Response,
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """End the caller's session and clear the cookie."""
    await destroy_session(session, user.token)
    response.delete_cookie(
        key=config.session_cookie_name,
        httponly=True,
        samesite="lax",
        secure=config.cookie_secure,
    )
    logger.info("Logout: %s (%s)", user.email, user.id)
    return {"success": True, "message": "Signed out successfully!"}


@router.get("/me", response_model=UserOut)
async def me(
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """Return the signed-in user."""
    record = await get_user_by_id(session, user.id)
    return record.to_dict()
