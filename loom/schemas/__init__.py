from loom.schemas.project import ProjectCreate, ProjectUpdate, ProjectRead
from loom.schemas.task import (
    TaskCreate,
    TaskUpdate,
    TaskRead,
    TaskNoteCreate,
    TaskNoteUpdate,
    TaskNoteRead,
)
from loom.schemas.problem import ProblemCreate, ProblemUpdate, ProblemRead
from loom.schemas.outcome import OutcomeCreate, OutcomeUpdate, OutcomeRead
from loom.schemas.goal import GoalCreate, GoalUpdate, GoalRead
from loom.schemas.summary import ActiveWorkSummary

__all__ = [
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectRead",
    "TaskCreate",
    "TaskUpdate",
    "TaskRead",
    "TaskNoteCreate",
    "TaskNoteUpdate",
    "TaskNoteRead",
    "ProblemCreate",
    "ProblemUpdate",
    "ProblemRead",
    "OutcomeCreate",
    "OutcomeUpdate",
    "OutcomeRead",
    "GoalCreate",
    "GoalUpdate",
    "GoalRead",
    "ActiveWorkSummary",
]
