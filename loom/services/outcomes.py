"""
Outcome store operations.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from loom.logging_config import get_logger
from loom.models import Outcome, OutcomeStatus
from loom.schemas import OutcomeCreate, OutcomeUpdate
from loom.services.common import apply_changes, enum_value, get_or_404
from loom.services.integrity import resolve_links

logger = get_logger(__name__)


async def create_outcome(session: AsyncSession, data: OutcomeCreate) -> Outcome:
    """
    Create an outcome for a project.

    The project must exist; an optional task must exist and belong to
    that project.
    """
    project_id, task_id = await resolve_links(session, data.project_id, data.task_id)

    outcome = Outcome(**data.model_dump(exclude={"project_id", "task_id"}), project_id=project_id, task_id=task_id)
    session.add(outcome)
    await session.flush()
    await session.refresh(outcome)

    logger.info(f"Created outcome: id={outcome.id} title='{outcome.title}' project={outcome.project_id}")

    return outcome


async def get_outcome(session: AsyncSession, outcome_id: int) -> Outcome:
    """Get an outcome by ID."""
    return await get_or_404(session, Outcome, outcome_id, "Outcome")


async def list_outcomes(
    session: AsyncSession,
    project_id: int | None = None,
    task_id: int | None = None,
    status: OutcomeStatus | None = None,
) -> list[Outcome]:
    """List outcomes matching every given filter, most recently updated first."""
    query = select(Outcome)
    if project_id is not None:
        query = query.where(Outcome.project_id == project_id)
    if task_id is not None:
        query = query.where(Outcome.task_id == task_id)
    if status is not None:
        query = query.where(Outcome.status == enum_value(OutcomeStatus, status, "status"))
    query = query.order_by(Outcome.updated_at.desc(), Outcome.id.desc())

    result = await session.execute(query)
    outcomes = list(result.scalars().all())

    logger.debug(f"Listed {len(outcomes)} outcomes")

    return outcomes


async def update_outcome(session: AsyncSession, outcome_id: int, data: OutcomeUpdate) -> Outcome:
    """Apply a partial update to an outcome."""
    outcome = await get_outcome(session, outcome_id)

    update_data = data.changes()
    logger.info(f"Updating outcome {outcome_id}: {update_data}")

    apply_changes(outcome, update_data)
    await session.flush()
    await session.refresh(outcome)
    return outcome


async def delete_outcome(session: AsyncSession, outcome_id: int) -> None:
    """Delete an outcome."""
    outcome = await get_outcome(session, outcome_id)

    logger.info(f"Deleting outcome {outcome_id}: '{outcome.title}'")

    await session.delete(outcome)
    await session.flush()
