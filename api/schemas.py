"""
Pydantic request / response schemas for the users and todos routes.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, StrictBool, field_validator


# ═══════════════════════════════════════════════════════════════════════════════
# Users
# ═══════════════════════════════════════════════════════════════════════════════


class Credentials(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("email")
    @classmethod
    def email_shape(cls, value: str) -> str:
        value = value.strip().lower()
        local, sep, domain = value.partition("@")
        if not sep or not local or not domain:
            raise ValueError("must be a valid email address")
        return value


class LoginRequest(BaseModel):
    email: str
    password: str


class UserOut(BaseModel):
    id: int
    email: str


class LoginResponse(BaseModel):
    message: str
    user: UserOut


class LogoutResponse(BaseModel):
    success: bool
    message: str


# ═══════════════════════════════════════════════════════════════════════════════
# Todos
# ═══════════════════════════════════════════════════════════════════════════════


def _clean_task(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("task must not be blank")
    return value


class ToDoCreate(BaseModel):
    task: str = Field(..., max_length=500)
    completed: StrictBool = False

    @field_validator("task")
    @classmethod
    def clean_task(cls, value: Optional[str]) -> Optional[str]:
        return _clean_task(value)


class ToDoUpdate(BaseModel):
    task: Optional[str] = Field(None, max_length=500)
    completed: Optional[StrictBool] = None

    @field_validator("task")
    @classmethod
    def clean_task(cls, value: Optional[str]) -> Optional[str]:
        return _clean_task(value)


class ToDoOut(BaseModel):
    id: int
    task: str
    completed: bool
    user_id: int
