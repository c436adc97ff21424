from loom.models.enums import (
    GoalType,
    LinkKind,
    OutcomeStatus,
    ProblemStatus,
    ProjectStatus,
    TaskPriority,
    TaskStatus,
    TaskType,
)
from loom.models.project import Project
from loom.models.task import Task
from loom.models.task_note import TaskNote
from loom.models.problem import Problem
from loom.models.outcome import Outcome
from loom.models.goal import Goal
from loom.models.links import GoalProjectLink, ProblemProjectLink

__all__ = [
    "GoalType",
    "LinkKind",
    "OutcomeStatus",
    "ProblemStatus",
    "ProjectStatus",
    "TaskPriority",
    "TaskStatus",
    "TaskType",
    "Project",
    "Task",
    "TaskNote",
    "Problem",
    "Outcome",
    "Goal",
    "GoalProjectLink",
    "ProblemProjectLink",
]
