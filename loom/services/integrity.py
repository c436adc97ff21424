"""
Referential integrity for Loom entities.

This module handles:
- Existence checks for foreign keys before a row is written
- Task/project consistency for problems, goals and outcomes
- Cascade and set-null behaviour on delete
- The goal/problem <-> project junction tables

Every function works inside the caller's session, so checks and writes
commit (or roll back) together.
"""

from typing import Sequence

from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from loom.exceptions import (
    LinkNotFoundError,
    MissingReferenceError,
    NotFoundError,
    TaskProjectMismatchError,
)
from loom.logging_config import get_logger
from loom.models import (
    Goal,
    GoalProjectLink,
    LinkKind,
    Outcome,
    Problem,
    ProblemProjectLink,
    Project,
    Task,
    TaskNote,
)

logger = get_logger(__name__)

# kind -> (child model, junction model, junction column naming the child)
LINK_TABLES = {
    LinkKind.GOAL: (Goal, GoalProjectLink, GoalProjectLink.goal_id),
    LinkKind.PROBLEM: (Problem, ProblemProjectLink, ProblemProjectLink.problem_id),
}


# =============================================================================
# Creation-time checks
# =============================================================================

async def require_project(
    session: AsyncSession,
    project_id: int,
    field: str = "project_id",
) -> Project:
    """Return the referenced project or raise MissingReferenceError."""
    project = await session.get(Project, project_id)
    if project is None:
        logger.warning(f"Rejected write: {field}={project_id} does not exist")
        raise MissingReferenceError(field, "Project", project_id)
    return project


async def require_task(
    session: AsyncSession,
    task_id: int,
    field: str = "task_id",
) -> Task:
    """Return the referenced task or raise MissingReferenceError."""
    task = await session.get(Task, task_id)
    if task is None:
        logger.warning(f"Rejected write: {field}={task_id} does not exist")
        raise MissingReferenceError(field, "Task", task_id)
    return task


async def resolve_links(
    session: AsyncSession,
    project_id: int | None,
    task_id: int | None,
) -> tuple[int | None, int | None]:
    """
    Validate the optional project/task pair of a problem, goal or outcome.

    - task given: it must exist; when a project is also given the task
      must belong to it, otherwise the task's project is inherited
    - project given: it must exist

    Returns the (project_id, task_id) pair to store.
    """
    if task_id is not None:
        task = await require_task(session, task_id)
        if project_id is None:
            return task.project_id, task_id
        await require_project(session, project_id)
        if task.project_id != project_id:
            logger.warning(
                f"Task/project mismatch rejected: task {task_id} is in "
                f"project {task.project_id}, not {project_id}"
            )
            raise TaskProjectMismatchError(task_id, task.project_id, project_id)
        return project_id, task_id

    if project_id is not None:
        await require_project(session, project_id)
    return project_id, None


# =============================================================================
# Delete cascades
# =============================================================================

async def _clear_task_links(session: AsyncSession, task_ids: Sequence[int]) -> None:
    """Set task_id to NULL on every problem, goal and outcome pointing at task_ids."""
    for model in (Problem, Goal, Outcome):
        await session.execute(
            update(model).where(model.task_id.in_(task_ids)).values(task_id=None)
        )


async def cascade_task_delete(session: AsyncSession, task: Task) -> None:
    """
    Delete a task and everything that depends on it.

    Notes are deleted; problems, goals and outcomes only lose their
    task link and keep their project link.
    """
    await session.execute(delete(TaskNote).where(TaskNote.task_id == task.id))
    await _clear_task_links(session, [task.id])
    await session.delete(task)
    await session.flush()


async def cascade_project_delete(session: AsyncSession, project: Project) -> None:
    """
    Delete a project and everything that depends on it.

    - Tasks and outcomes owned by the project are deleted, tasks cascading
      to their notes and clearing task links elsewhere
    - Problems and goals whose origin link is the project lose that link
    - Junction rows pointing at the project are removed
    """
    result = await session.execute(select(Task.id).where(Task.project_id == project.id))
    task_ids = [row[0] for row in result.all()]

    logger.debug(f"Project {project.id} cascade: {len(task_ids)} tasks")

    if task_ids:
        await session.execute(delete(TaskNote).where(TaskNote.task_id.in_(task_ids)))
        await _clear_task_links(session, task_ids)

    await session.execute(delete(Outcome).where(Outcome.project_id == project.id))
    if task_ids:
        await session.execute(delete(Task).where(Task.id.in_(task_ids)))

    for model in (Problem, Goal):
        await session.execute(
            update(model).where(model.project_id == project.id).values(project_id=None)
        )

    await session.execute(delete(GoalProjectLink).where(GoalProjectLink.project_id == project.id))
    await session.execute(delete(ProblemProjectLink).where(ProblemProjectLink.project_id == project.id))

    await session.delete(project)
    await session.flush()


async def cascade_linked_delete(session: AsyncSession, kind: LinkKind, child: Goal | Problem) -> None:
    """Delete a goal or problem together with all its junction rows."""
    _, link_model, child_column = LINK_TABLES[kind]
    await session.execute(delete(link_model).where(child_column == child.id))
    await session.delete(child)
    await session.flush()


# =============================================================================
# Junction tables
# =============================================================================

async def _require_child(session: AsyncSession, kind: LinkKind, child_id: int) -> Goal | Problem:
    child_model = LINK_TABLES[kind][0]
    child = await session.get(child_model, child_id)
    if child is None:
        raise NotFoundError(kind.value.capitalize(), child_id)
    return child


async def _get_link(session: AsyncSession, kind: LinkKind, child_id: int, project_id: int):
    _, link_model, _ = LINK_TABLES[kind]
    return await session.get(link_model, (child_id, project_id))


async def link(
    session: AsyncSession,
    kind: LinkKind,
    child_id: int,
    project_id: int,
) -> GoalProjectLink | ProblemProjectLink:
    """
    Link a goal or problem to an additional project.

    Both sides must exist. Linking an already linked pair returns the
    existing row.
    """
    await _require_child(session, kind, child_id)
    project = await session.get(Project, project_id)
    if project is None:
        raise NotFoundError("Project", project_id)

    existing = await _get_link(session, kind, child_id, project_id)
    if existing is not None:
        logger.debug(f"{kind.value} {child_id} already linked to project {project_id}")
        return existing

    _, link_model, child_column = LINK_TABLES[kind]
    row = link_model(**{child_column.key: child_id, "project_id": project_id})
    session.add(row)
    await session.flush()

    logger.info(f"Linked {kind.value} {child_id} to project {project_id}")
    return row


async def unlink(
    session: AsyncSession,
    kind: LinkKind,
    child_id: int,
    project_id: int,
) -> None:
    """Remove a junction row; raise LinkNotFoundError if the pair was never linked."""
    existing = await _get_link(session, kind, child_id, project_id)
    if existing is None:
        raise LinkNotFoundError(kind.value, child_id, project_id)

    await session.delete(existing)
    await session.flush()

    logger.info(f"Unlinked {kind.value} {child_id} from project {project_id}")


async def projects_for(session: AsyncSession, kind: LinkKind, child_id: int) -> list[Project]:
    """Projects linked to a goal or problem through the junction table."""
    await _require_child(session, kind, child_id)
    _, link_model, child_column = LINK_TABLES[kind]

    query = (
        select(Project)
        .join(link_model, link_model.project_id == Project.id)
        .where(child_column == child_id)
        .order_by(Project.id)
    )
    result = await session.execute(query)
    return list(result.scalars().all())


async def children_for(session: AsyncSession, project_id: int, kind: LinkKind) -> list[Goal] | list[Problem]:
    """Goals or problems linked to a project through the junction table."""
    project = await session.get(Project, project_id)
    if project is None:
        raise NotFoundError("Project", project_id)
    child_model, link_model, child_column = LINK_TABLES[kind]

    query = (
        select(child_model)
        .join(link_model, child_column == child_model.id)
        .where(link_model.project_id == project_id)
        .order_by(child_model.updated_at.desc(), child_model.id.desc())
    )
    result = await session.execute(query)
    return list(result.scalars().all())
