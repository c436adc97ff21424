"""
Task routes for the Loom API (read-only).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from loom.database import get_session
from loom.models import Task, TaskNote, TaskPriority, TaskStatus, TaskType
from loom.schemas import TaskNoteRead, TaskRead
from loom.services import tasks

router = APIRouter()


@router.get("", response_model=list[TaskRead])
async def list_tasks(
    project_id: int | None = None,
    status: TaskStatus | None = None,
    task_type: TaskType | None = None,
    priority: TaskPriority | None = None,
    session: AsyncSession = Depends(get_session),
) -> list[Task]:
    """
    List tasks.

    Optionally filter by project_id, status, task_type and priority.
    """
    return await tasks.list_tasks(
        session,
        project_id=project_id,
        status=status,
        task_type=task_type,
        priority=priority,
    )


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: int,
    session: AsyncSession = Depends(get_session),
) -> Task:
    """Get a task by ID."""
    return await tasks.get_task(session, task_id)


@router.get("/{task_id}/notes", response_model=list[TaskNoteRead])
async def list_task_notes(
    task_id: int,
    session: AsyncSession = Depends(get_session),
) -> list[TaskNote]:
    """A task's notes, oldest first."""
    await tasks.get_task(session, task_id)
    return await tasks.list_task_notes(session, task_id=task_id)
