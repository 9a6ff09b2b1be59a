import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Path
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession
from .. import crud
from ..db import get_db
from ..schemas import ErrorResponse, TaskCreate, TaskResponse, TaskUpdate

logger = logging.getLogger(__name__)

API_PREFIX = "/todo/api/v1"

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

router = APIRouter(prefix=API_PREFIX, tags=["todo"])

TaskIdPath = Path(..., ge=INT64_MIN, le=INT64_MAX, description="Task id (signed 64-bit)")

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.get("/", response_class=PlainTextResponse)
async def landing_page():
    """Liveness text for humans poking at the API"""
    return "API is working!"


@router.post("/create-task", response_model=TaskResponse, responses=ERROR_RESPONSES)
async def create_task(
    body: TaskCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create a new task. Clients cannot choose is_done or created_at."""
    db_task = await crud.create_task(db, body.task)
    logger.info("Created task %s", db_task.id)
    return TaskResponse.model_validate(db_task)


@router.get("/get-all-task", response_model=List[TaskResponse], responses=ERROR_RESPONSES)
async def get_all_tasks(db: AsyncSession = Depends(get_db)):
    """Get all tasks"""
    tasks = await crud.get_tasks(db)
    return [TaskResponse.model_validate(task) for task in tasks]


@router.put("/mark-as-done/{task_id}", response_model=TaskResponse, responses=ERROR_RESPONSES)
async def mark_as_done(
    task_id: int = TaskIdPath,
    db: AsyncSession = Depends(get_db)
):
    """Mark a task as done. Marking a done task again changes nothing."""
    task = await crud.get_task(db, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")

    if not task.is_done:
        task.mark_done()
        task = await crud.update_task(db, task)
        logger.info("Marked task %s as done", task_id)
    return TaskResponse.model_validate(task)


@router.put("/update-task/{task_id}", response_model=TaskResponse, responses=ERROR_RESPONSES)
async def update_task(
    task_id: int = TaskIdPath,
    body: Optional[TaskUpdate] = None,
    db: AsyncSession = Depends(get_db)
):
    """Replace the text of a task.

    Missing or blank text leaves the task as it is; the current task is
    still returned.
    """
    task = await crud.get_task(db, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")

    new_text = body.new_text() if body else None
    if new_text is not None:
        task.task = new_text
        task = await crud.update_task(db, task)
        logger.info("Updated text of task %s", task_id)
    return TaskResponse.model_validate(task)
