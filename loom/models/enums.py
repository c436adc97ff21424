"""
Enumerated field values.

Stored in the database as their literal string values.
"""

from enum import Enum


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    PLANNING = "planning"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TaskType(str, Enum):
    GENERAL = "general"
    CHORE = "chore"
    INVESTIGATION = "investigation"
    FEATURE = "feature"
    BUGFIX = "bugfix"


class ProblemStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    BLOCKED = "blocked"


class OutcomeStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"


class GoalType(str, Enum):
    SHORT_TERM = "short_term"
    CAREER = "career"
    VALUES = "values"
    REQUIREMENT = "requirement"


class LinkKind(str, Enum):
    """Entities that can be linked to additional projects."""
    GOAL = "goal"
    PROBLEM = "problem"
