"""
Task and task note store operations.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from loom.logging_config import get_logger
from loom.models import Task, TaskNote, TaskPriority, TaskStatus, TaskType
from loom.schemas import TaskCreate, TaskUpdate, TaskNoteCreate, TaskNoteUpdate
from loom.services.common import apply_changes, enum_value, get_or_404
from loom.services.integrity import cascade_task_delete, require_project, require_task

logger = get_logger(__name__)


async def create_task(session: AsyncSession, data: TaskCreate) -> Task:
    """
    Create a new task.

    The project must exist. Omitted type, status and priority default to
    general, pending and medium.
    """
    await require_project(session, data.project_id)

    task = Task(**data.model_dump())
    session.add(task)
    await session.flush()
    await session.refresh(task)

    logger.info(f"Created task: id={task.id} title='{task.title}' project={task.project_id}")

    return task


async def get_task(session: AsyncSession, task_id: int) -> Task:
    """Get a task by ID."""
    return await get_or_404(session, Task, task_id, "Task")


async def list_tasks(
    session: AsyncSession,
    project_id: int | None = None,
    status: TaskStatus | None = None,
    task_type: TaskType | None = None,
    priority: TaskPriority | None = None,
) -> list[Task]:
    """List tasks matching every given filter, most recently updated first."""
    query = select(Task)
    if project_id is not None:
        query = query.where(Task.project_id == project_id)
    if status is not None:
        query = query.where(Task.status == enum_value(TaskStatus, status, "status"))
    if task_type is not None:
        query = query.where(Task.task_type == enum_value(TaskType, task_type, "task_type"))
    if priority is not None:
        query = query.where(Task.priority == enum_value(TaskPriority, priority, "priority"))
    query = query.order_by(Task.updated_at.desc(), Task.id.desc())

    result = await session.execute(query)
    tasks = list(result.scalars().all())

    logger.debug(f"Listed {len(tasks)} tasks" + (f" for project={project_id}" if project_id else ""))

    return tasks


async def update_task(session: AsyncSession, task_id: int, data: TaskUpdate) -> Task:
    """Apply a partial update to a task."""
    task = await get_task(session, task_id)

    update_data = data.changes()
    logger.info(f"Updating task {task_id}: {update_data}")

    apply_changes(task, update_data)
    await session.flush()
    await session.refresh(task)
    return task


async def delete_task(session: AsyncSession, task_id: int) -> None:
    """
    Delete a task.

    Its notes are deleted; problems, goals and outcomes pointing at it
    keep their project link but lose the task link.
    """
    task = await get_task(session, task_id)

    logger.info(f"Deleting task {task_id}: '{task.title}'")

    await cascade_task_delete(session, task)


# Task notes

async def create_task_note(session: AsyncSession, data: TaskNoteCreate) -> TaskNote:
    """Attach a note to an existing task."""
    await require_task(session, data.task_id)

    note = TaskNote(**data.model_dump())
    session.add(note)
    await session.flush()
    await session.refresh(note)

    logger.info(f"Created note {note.id} on task {note.task_id}")

    return note


async def get_task_note(session: AsyncSession, note_id: int) -> TaskNote:
    """Get a task note by ID."""
    return await get_or_404(session, TaskNote, note_id, "Task note")


async def list_task_notes(session: AsyncSession, task_id: int | None = None) -> list[TaskNote]:
    """List notes in the order they were written, oldest first."""
    query = select(TaskNote)
    if task_id is not None:
        query = query.where(TaskNote.task_id == task_id)
    query = query.order_by(TaskNote.created_at.asc(), TaskNote.id.asc())

    result = await session.execute(query)
    return list(result.scalars().all())


async def update_task_note(session: AsyncSession, note_id: int, data: TaskNoteUpdate) -> TaskNote:
    """Edit a note's text."""
    note = await get_task_note(session, note_id)

    apply_changes(note, data.changes())
    await session.flush()
    await session.refresh(note)

    logger.info(f"Updated note {note_id} on task {note.task_id}")
    return note


async def delete_task_note(session: AsyncSession, note_id: int) -> None:
    """Delete a task note."""
    note = await get_task_note(session, note_id)

    logger.info(f"Deleting note {note_id} from task {note.task_id}")

    await session.delete(note)
    await session.flush()
