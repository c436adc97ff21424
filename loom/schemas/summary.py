from pydantic import BaseModel

from loom.schemas.outcome import OutcomeRead
from loom.schemas.problem import ProblemRead
from loom.schemas.project import ProjectRead
from loom.schemas.task import TaskRead


class ActiveWorkSummary(BaseModel):
    """
    Everything currently in flight: active projects, pending and
    in-progress tasks, open and in-progress problems and outcomes.
    """
    projects: list[ProjectRead]
    tasks: list[TaskRead]
    problems: list[ProblemRead]
    outcomes: list[OutcomeRead]
