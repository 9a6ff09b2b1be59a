from datetime import datetime
from typing import List, Optional
from sqlalchemy import exists
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from .models import Task


async def _commit(db: AsyncSession) -> None:
    try:
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        raise


async def create_task(
    db: AsyncSession,
    task_text: str,
    created_at: Optional[datetime] = None,
    is_done: Optional[bool] = None,
) -> Task:
    """Insert a new task; unset fields are filled by the pre-insert defaults"""
    db_task = Task(task=task_text, created_at=created_at, is_done=is_done)
    db.add(db_task)
    await _commit(db)
    await db.refresh(db_task)
    return db_task


async def get_tasks(db: AsyncSession) -> List[Task]:
    """Get every task in the database's natural order"""
    result = await db.execute(select(Task))
    return list(result.scalars().all())


async def get_task(db: AsyncSession, task_id: int) -> Optional[Task]:
    """Get a task by ID"""
    result = await db.execute(select(Task).filter(Task.id == task_id))
    return result.scalar_one_or_none()


async def update_task(db: AsyncSession, db_task: Task) -> Task:
    """Write back the mutable fields (task, is_done) of a loaded task"""
    db.add(db_task)
    await _commit(db)
    await db.refresh(db_task)
    return db_task


async def task_exists(db: AsyncSession, task_id: int) -> bool:
    result = await db.execute(select(exists().where(Task.id == task_id)))
    return bool(result.scalar())
