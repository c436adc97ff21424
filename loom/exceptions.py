"""
Structured exceptions and error responses for Loom.

Three error kinds reach callers:
- ValidationError: bad input (missing field, unknown enum value, task/project mismatch)
- MissingReferenceError: a foreign key names an entity that does not exist
- NotFoundError: the targeted entity (or junction link) does not exist

None of them is retried automatically; the caller has to change its input.
"""

from typing import Any, Dict, Optional, List

import pydantic
from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel


# =============================================================================
# Error Response Schema
# =============================================================================

class ErrorDetail(BaseModel):
    """Detail of a single error."""
    loc: Optional[List[str]] = None  # Location of error (e.g., ["status"])
    msg: str
    type: str


class ErrorResponse(BaseModel):
    """Structured error response format."""
    error: str  # Error code (e.g., "not_found", "reference_error")
    message: str  # Human-readable message
    details: Optional[List[ErrorDetail]] = None


# =============================================================================
# Custom Exceptions
# =============================================================================

class LoomException(Exception):
    """Base exception for all Loom errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "internal_error",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class NotFoundError(LoomException):
    """The targeted entity does not exist."""

    def __init__(self, resource: str, resource_id: Any, message: Optional[str] = None):
        super().__init__(
            message=message or f"{resource} with ID {resource_id} not found",
            error_code="not_found",
            status_code=status.HTTP_404_NOT_FOUND,
        )
        self.resource = resource
        self.resource_id = resource_id


class LinkNotFoundError(NotFoundError):
    """Unlinking a pair that was never linked."""

    def __init__(self, kind: str, child_id: int, project_id: int):
        super().__init__(
            resource=f"{kind.capitalize()} link",
            resource_id=f"{child_id}/{project_id}",
            message=f"{kind.capitalize()} {child_id} is not linked to project {project_id}",
        )
        self.kind = kind
        self.child_id = child_id
        self.project_id = project_id


class MissingReferenceError(LoomException):
    """A foreign key points at an entity that does not exist."""

    def __init__(self, field: str, resource: str, resource_id: Any):
        super().__init__(
            message=f"Referenced {resource.lower()} with ID {resource_id} does not exist",
            error_code="reference_error",
            status_code=status.HTTP_404_NOT_FOUND,
            details=[{
                "loc": [field],
                "msg": f"{resource} {resource_id} does not exist",
                "type": "reference_error",
            }],
        )
        self.field = field
        self.resource = resource
        self.resource_id = resource_id


class ValidationError(LoomException):
    """Request validation error."""

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(
            message=message,
            error_code="validation_error",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
        )

    @classmethod
    def from_pydantic(cls, exc: pydantic.ValidationError) -> "ValidationError":
        """Convert a pydantic error raised while building typed input."""
        details = [
            {
                "loc": [str(part) for part in err["loc"]],
                "msg": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors()
        ]
        summary = "; ".join(
            f"{'.'.join(d['loc']) or 'input'}: {d['msg']}" for d in details
        )
        return cls(f"Invalid input: {summary}", details=details)


class TaskProjectMismatchError(ValidationError):
    """A task link names a task that belongs to a different project."""

    def __init__(self, task_id: int, task_project_id: int, project_id: int):
        super().__init__(
            message=f"Task {task_id} belongs to project {task_project_id}, not project {project_id}",
            details=[{
                "loc": ["task_id"],
                "msg": f"Task {task_id} is not part of project {project_id}",
                "type": "project_mismatch",
            }],
        )
        self.task_id = task_id
        self.project_id = project_id


# =============================================================================
# Exception Handlers
# =============================================================================

async def loom_exception_handler(request: Request, exc: LoomException) -> JSONResponse:
    """Handle LoomException and return structured response."""
    body = ErrorResponse(error=exc.error_code, message=exc.message, details=exc.details)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(LoomException, loom_exception_handler)
