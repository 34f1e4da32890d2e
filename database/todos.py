"""
To-do store.

Plain CRUD over the ``todos`` table.  Nothing here checks ownership; callers
run the ownership guard in ``auth.dependencies`` first.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import ToDo

logger = logging.getLogger(__name__)


async def list_todos(db: AsyncSession, user_id: int) -> List[ToDo]:
    result = await db.execute(
        select(ToDo).where(ToDo.user_id == user_id).order_by(ToDo.id)
    )
    return list(result.scalars().all())


async def insert_todo(
    db: AsyncSession,
    user_id: int,
    task: str,
    completed: bool = False,
) -> ToDo:
    todo = ToDo(task=task, completed=completed, user_id=user_id)
    db.add(todo)
    await db.flush()
    logger.info("Created todo %s for user %s", todo.id, user_id)
    return todo


async def get_todo(db: AsyncSession, todo_id: int) -> Optional[ToDo]:
    """Return the to-do with *todo_id*, or ``None`` when there is none."""
    return await db.get(ToDo, todo_id)


async def update_todo(
    db: AsyncSession,
    todo: ToDo,
    task: Optional[str] = None,
    completed: Optional[bool] = None,
) -> ToDo:
    """Apply the given fields; ``None`` leaves a field unchanged."""
    if task is not None:
        todo.task = task
    if completed is not None:
        todo.completed = completed
    await db.flush()
    logger.info("Updated todo %s", todo.id)
    return todo


async def delete_todo(db: AsyncSession, todo: ToDo) -> ToDo:
    await db.delete(todo)
    await db.flush()
    logger.info("Deleted todo %s", todo.id)
    return todo
