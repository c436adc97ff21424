"""
Goal store operations.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from loom.logging_config import get_logger
from loom.models import Goal, GoalType, LinkKind
from loom.schemas import GoalCreate, GoalUpdate
from loom.services.common import apply_changes, enum_value, get_or_404
from loom.services.integrity import cascade_linked_delete, resolve_links

logger = get_logger(__name__)


async def create_goal(session: AsyncSession, data: GoalCreate) -> Goal:
    """Create a goal. Links follow the same rules as problems."""
    project_id, task_id = await resolve_links(session, data.project_id, data.task_id)

    goal = Goal(**data.model_dump(exclude={"project_id", "task_id"}), project_id=project_id, task_id=task_id)
    session.add(goal)
    await session.flush()
    await session.refresh(goal)

    logger.info(f"Created goal: id={goal.id} title='{goal.title}' type={goal.goal_type}")

    return goal


async def get_goal(session: AsyncSession, goal_id: int) -> Goal:
    """Get a goal by ID."""
    return await get_or_404(session, Goal, goal_id, "Goal")


async def list_goals(
    session: AsyncSession,
    project_id: int | None = None,
    task_id: int | None = None,
    goal_type: GoalType | None = None,
    assignee: str | None = None,
) -> list[Goal]:
    """List goals matching every given filter, most recently updated first."""
    query = select(Goal)
    if project_id is not None:
        query = query.where(Goal.project_id == project_id)
    if task_id is not None:
        query = query.where(Goal.task_id == task_id)
    if goal_type is not None:
        query = query.where(Goal.goal_type == enum_value(GoalType, goal_type, "goal_type"))
    if assignee is not None:
        query = query.where(Goal.assignee == assignee)
    query = query.order_by(Goal.updated_at.desc(), Goal.id.desc())

    result = await session.execute(query)
    goals = list(result.scalars().all())

    logger.debug(f"Listed {len(goals)} goals")

    return goals


async def update_goal(session: AsyncSession, goal_id: int, data: GoalUpdate) -> Goal:
    """Apply a partial update to a goal."""
    goal = await get_goal(session, goal_id)

    update_data = data.changes()
    logger.info(f"Updating goal {goal_id}: {update_data}")

    apply_changes(goal, update_data)
    await session.flush()
    await session.refresh(goal)
    return goal


async def delete_goal(session: AsyncSession, goal_id: int) -> None:
    """Delete a goal and its project links."""
    goal = await get_goal(session, goal_id)

    logger.info(f"Deleting goal {goal_id}: '{goal.title}'")

    await cascade_linked_delete(session, LinkKind.GOAL, goal)
