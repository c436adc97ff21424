"""
Active work summary route.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from loom.database import get_session
from loom.schemas import ActiveWorkSummary
from loom.services import summary

router = APIRouter()


@router.get("", response_model=ActiveWorkSummary)
async def get_summary(session: AsyncSession = Depends(get_session)) -> ActiveWorkSummary:
    """Active projects and all open or in-progress work."""
    return await summary.get_active_work_summary(session)
