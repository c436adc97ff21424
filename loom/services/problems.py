"""
Problem store operations.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from loom.logging_config import get_logger
from loom.models import LinkKind, Problem, ProblemStatus
from loom.schemas import ProblemCreate, ProblemUpdate
from loom.services.common import apply_changes, enum_value, get_or_404
from loom.services.integrity import cascade_linked_delete, resolve_links

logger = get_logger(__name__)


async def create_problem(session: AsyncSession, data: ProblemCreate) -> Problem:
    """
    Create a problem.

    project_id and task_id are optional; with only a task the project is
    inherited from it, with both the task must belong to the project.
    """
    project_id, task_id = await resolve_links(session, data.project_id, data.task_id)

    problem = Problem(**data.model_dump(exclude={"project_id", "task_id"}), project_id=project_id, task_id=task_id)
    session.add(problem)
    await session.flush()
    await session.refresh(problem)

    logger.info(
        f"Created problem: id={problem.id} title='{problem.title}' "
        f"project={problem.project_id} task={problem.task_id}"
    )

    return problem


async def get_problem(session: AsyncSession, problem_id: int) -> Problem:
    """Get a problem by ID."""
    return await get_or_404(session, Problem, problem_id, "Problem")


async def list_problems(
    session: AsyncSession,
    project_id: int | None = None,
    task_id: int | None = None,
    status: ProblemStatus | None = None,
    assignee: str | None = None,
) -> list[Problem]:
    """
    List problems matching every given filter, most recently updated first.

    project_id matches the origin link only; see projects_for/children_for
    for junction links.
    """
    query = select(Problem)
    if project_id is not None:
        query = query.where(Problem.project_id == project_id)
    if task_id is not None:
        query = query.where(Problem.task_id == task_id)
    if status is not None:
        query = query.where(Problem.status == enum_value(ProblemStatus, status, "status"))
    if assignee is not None:
        query = query.where(Problem.assignee == assignee)
    query = query.order_by(Problem.updated_at.desc(), Problem.id.desc())

    result = await session.execute(query)
    problems = list(result.scalars().all())

    logger.debug(f"Listed {len(problems)} problems")

    return problems


async def update_problem(session: AsyncSession, problem_id: int, data: ProblemUpdate) -> Problem:
    """Apply a partial update to a problem."""
    problem = await get_problem(session, problem_id)

    update_data = data.changes()
    logger.info(f"Updating problem {problem_id}: {update_data}")

    apply_changes(problem, update_data)
    await session.flush()
    await session.refresh(problem)
    return problem


async def delete_problem(session: AsyncSession, problem_id: int) -> None:
    """Delete a problem and its project links."""
    problem = await get_problem(session, problem_id)

    logger.info(f"Deleting problem {problem_id}: '{problem.title}'")

    await cascade_linked_delete(session, LinkKind.PROBLEM, problem)
