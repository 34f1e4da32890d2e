"""
To-do REST routes.  Every route requires a signed-in user; item routes also
require that the user owns the item.

Route prefix: /api/v1/todos
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import CurrentUser, db_session, get_current_user, owned_todo
from api.schemas import ToDoCreate, ToDoOut, ToDoUpdate
from database.models import ToDo
from database.todos import delete_todo, insert_todo, list_todos, update_todo

logger = logging.getLogger(__name__)

router = APIRouter(tags=["todos"])


@router.get("/", response_model=List[ToDoOut])
async def list_for_user(
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> List[Dict[str, Any]]:
    """All to-dos belonging to the caller."""
    todos = await list_todos(session, user.id)
    return [todo.to_dict() for todo in todos]


@router.post("/", response_model=ToDoOut)
async def create(
    req: ToDoCreate,
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    todo = await insert_todo(session, user.id, req.task, req.completed)
    return todo.to_dict()


@router.get("/{todo_id}", response_model=ToDoOut)
async def fetch(todo: ToDo = Depends(owned_todo)) -> Dict[str, Any]:
    return todo.to_dict()


@router.put("/{todo_id}", response_model=ToDoOut)
async def update(
    req: ToDoUpdate,
    todo: ToDo = Depends(owned_todo),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """Update ``task`` and/or ``completed``; omitted fields stay as they are."""
    todo = await update_todo(session, todo, task=req.task, completed=req.completed)
    return todo.to_dict()


@router.delete("/{todo_id}", response_model=ToDoOut)
async def remove(
    todo: ToDo = Depends(owned_todo),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """Delete the item and echo it back."""
    payload = todo.to_dict()
    await delete_todo(session, todo)
    return payload
