"""
Helpers shared by the entity services.
"""

from datetime import datetime
from enum import Enum
from typing import Any, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from loom.exceptions import NotFoundError, ValidationError

ModelT = TypeVar("ModelT")


async def get_or_404(session: AsyncSession, model: type[ModelT], entity_id: int, resource: str) -> ModelT:
    """Fetch a row by primary key or raise NotFoundError."""
    entity = await session.get(model, entity_id)
    if entity is None:
        raise NotFoundError(resource, entity_id)
    return entity


def apply_changes(entity: Any, changes: dict[str, Any]) -> None:
    """
    Apply a sparse update to an entity.

    updated_at is refreshed even when changes is empty.
    """
    for field, value in changes.items():
        setattr(entity, field, value)
    entity.updated_at = datetime.utcnow()


def enum_value(enum_cls: type[Enum], value: Any, field: str) -> str:
    """Normalize a filter value to its stored string, rejecting unknown values."""
    try:
        return enum_cls(value).value
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(
            f"Invalid {field} '{value}' (expected one of: {allowed})",
            details=[{"loc": [field], "msg": f"must be one of: {allowed}", "type": "enum"}],
        ) from None
