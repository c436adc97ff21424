"""
Outcome routes for the Loom API (read-only).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from loom.database import get_session
from loom.models import Outcome, OutcomeStatus
from loom.schemas import OutcomeRead
from loom.services import outcomes

router = APIRouter()


@router.get("", response_model=list[OutcomeRead])
async def list_outcomes(
    project_id: int | None = None,
    task_id: int | None = None,
    status: OutcomeStatus | None = None,
    session: AsyncSession = Depends(get_session),
) -> list[Outcome]:
    """List outcomes filtered by project, task and status."""
    return await outcomes.list_outcomes(
        session,
        project_id=project_id,
        task_id=task_id,
        status=status,
    )


@router.get("/{outcome_id}", response_model=OutcomeRead)
async def get_outcome(
    outcome_id: int,
    session: AsyncSession = Depends(get_session),
) -> Outcome:
    """Get an outcome by ID."""
    return await outcomes.get_outcome(session, outcome_id)
