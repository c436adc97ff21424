"""
Tool-call adapter.

One coroutine per tool. Arguments arrive as loosely typed values from the
automation client; they are validated into the typed schemas here, the
store operation runs in its own transaction, and every successful mutation
is published on the hub so live observers stay in sync.

Optional arguments left as None are treated as "not supplied".
"""

from typing import Any, Type, TypeVar

import pydantic
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from loom.database import async_session_maker, get_session_context
from loom.events import EventHub
from loom.exceptions import ValidationError
from loom.logging_config import get_logger
from loom.models import (
    GoalType,
    LinkKind,
    OutcomeStatus,
    ProblemStatus,
    ProjectStatus,
    TaskPriority,
    TaskStatus,
    TaskType,
)
from loom.schemas import (
    GoalCreate,
    GoalRead,
    GoalUpdate,
    OutcomeCreate,
    OutcomeRead,
    OutcomeUpdate,
    ProblemCreate,
    ProblemRead,
    ProblemUpdate,
    ProjectCreate,
    ProjectRead,
    ProjectUpdate,
    TaskCreate,
    TaskNoteCreate,
    TaskNoteRead,
    TaskNoteUpdate,
    TaskRead,
    TaskUpdate,
)
from loom.services import goals, integrity, outcomes, problems, projects, summary, tasks

logger = get_logger(__name__)

SchemaT = TypeVar("SchemaT", bound=pydantic.BaseModel)

# Tools exposed to automation clients, in registration order
TOOL_NAMES = [
    "create_project", "list_projects", "get_project", "update_project", "delete_project",
    "create_task", "list_tasks", "get_task", "update_task", "delete_task",
    "create_task_note", "list_task_notes", "get_task_note", "update_task_note", "delete_task_note",
    "create_problem", "list_problems", "get_problem", "update_problem", "delete_problem",
    "link_problem_to_project", "unlink_problem_from_project",
    "get_problem_projects", "get_project_problems",
    "create_outcome", "list_outcomes", "get_outcome", "update_outcome", "delete_outcome",
    "create_goal", "list_goals", "get_goal", "update_goal", "delete_goal",
    "link_goal_to_project", "unlink_goal_from_project",
    "get_goal_projects", "get_project_goals",
    "get_active_work_summary",
]


def build(schema: Type[SchemaT], **kwargs: Any) -> SchemaT:
    """Validate tool arguments into a typed schema, dropping unsupplied (None) ones."""
    supplied = {key: value for key, value in kwargs.items() if value is not None}
    try:
        return schema.model_validate(supplied)
    except pydantic.ValidationError as e:
        raise ValidationError.from_pydantic(e) from e


def dump(read_schema: Type[pydantic.BaseModel], entity: Any) -> dict:
    return read_schema.model_validate(entity).model_dump(mode="json")


class LoomTools:
    """
    The tool surface over the store and the hub.

    Usage:
        tools = LoomTools(hub)
        project = await tools.create_project(name="Website")
    """

    def __init__(
        self,
        hub: EventHub,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ):
        self.hub = hub
        self.session_factory = session_factory or async_session_maker

    def _session(self):
        return get_session_context(self.session_factory)

    def _publish(self, event_type: str, payload: Any, announcement: str | None = None) -> None:
        if announcement is not None:
            payload = {**payload, "announcement": announcement}
        self.hub.publish(event_type, payload)

    # --- Projects ---

    async def create_project(
        self,
        name: str,
        description: str | None = None,
        status: ProjectStatus | None = None,
        external_link: str | None = None,
    ) -> dict:
        """Create a new project (status: active, planning, on_hold, completed, archived)."""
        data = build(ProjectCreate, name=name, description=description, status=status, external_link=external_link)
        async with self._session() as session:
            result = dump(ProjectRead, await projects.create_project(session, data))
        self._publish("project_created", result, f"Project {result['name']} created")
        return result

    async def list_projects(self, status: ProjectStatus | None = None) -> list[dict]:
        """List projects, optionally filtered by status."""
        async with self._session() as session:
            return [dump(ProjectRead, p) for p in await projects.list_projects(session, status=status)]

    async def get_project(self, id: int) -> dict:
        """Get details of a specific project."""
        async with self._session() as session:
            return dump(ProjectRead, await projects.get_project(session, id))

    async def update_project(
        self,
        id: int,
        name: str | None = None,
        description: str | None = None,
        status: ProjectStatus | None = None,
        external_link: str | None = None,
    ) -> dict:
        """Update an existing project; only supplied fields change."""
        data = build(ProjectUpdate, name=name, description=description, status=status, external_link=external_link)
        async with self._session() as session:
            result = dump(ProjectRead, await projects.update_project(session, id, data))
        self._publish("project_updated", result)
        return result

    async def delete_project(self, id: int) -> str:
        """Delete a project with its tasks and outcomes."""
        async with self._session() as session:
            await projects.delete_project(session, id)
        self._publish("project_deleted", {"id": id})
        return "project deleted successfully"

    # --- Tasks ---

    async def create_task(
        self,
        project_id: int,
        title: str,
        description: str | None = None,
        task_type: TaskType | None = None,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        external_link: str | None = None,
    ) -> dict:
        """Create a new task in a project (defaults: general, pending, medium)."""
        data = build(
            TaskCreate,
            project_id=project_id,
            title=title,
            description=description,
            task_type=task_type,
            status=status,
            priority=priority,
            external_link=external_link,
        )
        async with self._session() as session:
            result = dump(TaskRead, await tasks.create_task(session, data))
        self._publish("task_created", result, f"Task {result['title']} created")
        return result

    async def list_tasks(
        self,
        project_id: int | None = None,
        status: TaskStatus | None = None,
        task_type: TaskType | None = None,
        priority: TaskPriority | None = None,
    ) -> list[dict]:
        """List tasks, optionally filtered by project, status, type and priority."""
        async with self._session() as session:
            found = await tasks.list_tasks(
                session, project_id=project_id, status=status, task_type=task_type, priority=priority
            )
            return [dump(TaskRead, t) for t in found]

    async def get_task(self, id: int) -> dict:
        """Get details of a specific task."""
        async with self._session() as session:
            return dump(TaskRead, await tasks.get_task(session, id))

    async def update_task(
        self,
        id: int,
        title: str | None = None,
        description: str | None = None,
        task_type: TaskType | None = None,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        external_link: str | None = None,
    ) -> dict:
        """Update an existing task; only supplied fields change."""
        data = build(
            TaskUpdate,
            title=title,
            description=description,
            task_type=task_type,
            status=status,
            priority=priority,
            external_link=external_link,
        )
        async with self._session() as session:
            result = dump(TaskRead, await tasks.update_task(session, id, data))
        self._publish("task_updated", result)
        return result

    async def delete_task(self, id: int) -> str:
        """Delete a task and its notes."""
        async with self._session() as session:
            await tasks.delete_task(session, id)
        self._publish("task_deleted", {"id": id})
        return "task deleted successfully"

    # --- Task notes ---

    async def create_task_note(self, task_id: int, note: str) -> dict:
        """Add a note to a task."""
        data = build(TaskNoteCreate, task_id=task_id, note=note)
        async with self._session() as session:
            result = dump(TaskNoteRead, await tasks.create_task_note(session, data))
        self._publish("task_note_created", result, "Task note created")
        return result

    async def list_task_notes(self, task_id: int) -> list[dict]:
        """List a task's notes, oldest first."""
        async with self._session() as session:
            return [dump(TaskNoteRead, n) for n in await tasks.list_task_notes(session, task_id=task_id)]

    async def get_task_note(self, id: int) -> dict:
        """Get a specific task note."""
        async with self._session() as session:
            return dump(TaskNoteRead, await tasks.get_task_note(session, id))

    async def update_task_note(self, id: int, note: str) -> dict:
        """Replace a task note's text."""
        data = build(TaskNoteUpdate, note=note)
        async with self._session() as session:
            result = dump(TaskNoteRead, await tasks.update_task_note(session, id, data))
        self._publish("task_note_updated", result)
        return result

    async def delete_task_note(self, id: int) -> str:
        """Delete a task note."""
        async with self._session() as session:
            await tasks.delete_task_note(session, id)
        self._publish("task_note_deleted", {"id": id})
        return "task note deleted successfully"

    # --- Problems ---

    async def create_problem(
        self,
        title: str,
        description: str | None = None,
        status: ProblemStatus | None = None,
        assignee: str | None = None,
        project_id: int | None = None,
        task_id: int | None = None,
    ) -> dict:
        """Create a problem with optional project or task links and assignee."""
        data = build(
            ProblemCreate,
            title=title,
            description=description,
            status=status,
            assignee=assignee,
            project_id=project_id,
            task_id=task_id,
        )
        async with self._session() as session:
            result = dump(ProblemRead, await problems.create_problem(session, data))
        self._publish("problem_created", result, f"Problem {result['title']} created")
        return result

    async def list_problems(
        self,
        project_id: int | None = None,
        task_id: int | None = None,
        status: ProblemStatus | None = None,
        assignee: str | None = None,
    ) -> list[dict]:
        """List problems, optionally filtered by project, task, status and assignee."""
        async with self._session() as session:
            found = await problems.list_problems(
                session, project_id=project_id, task_id=task_id, status=status, assignee=assignee
            )
            return [dump(ProblemRead, p) for p in found]

    async def get_problem(self, id: int) -> dict:
        """Get details of a specific problem."""
        async with self._session() as session:
            return dump(ProblemRead, await problems.get_problem(session, id))

    async def update_problem(
        self,
        id: int,
        title: str | None = None,
        description: str | None = None,
        status: ProblemStatus | None = None,
        assignee: str | None = None,
    ) -> dict:
        """Update an existing problem including assignee."""
        data = build(ProblemUpdate, title=title, description=description, status=status, assignee=assignee)
        async with self._session() as session:
            result = dump(ProblemRead, await problems.update_problem(session, id, data))
        self._publish("problem_updated", result)
        return result

    async def delete_problem(self, id: int) -> str:
        """Delete a problem and its project links."""
        async with self._session() as session:
            await problems.delete_problem(session, id)
        self._publish("problem_deleted", {"id": id})
        return "problem deleted successfully"

    async def link_problem_to_project(self, problem_id: int, project_id: int) -> str:
        """Link a problem to an additional project (many-to-many relationship)."""
        return await self._link(LinkKind.PROBLEM, problem_id, project_id)

    async def unlink_problem_from_project(self, problem_id: int, project_id: int) -> str:
        """Remove a problem's link to a project."""
        return await self._unlink(LinkKind.PROBLEM, problem_id, project_id)

    async def get_problem_projects(self, problem_id: int) -> list[dict]:
        """Get all projects linked to a problem."""
        async with self._session() as session:
            found = await integrity.projects_for(session, LinkKind.PROBLEM, problem_id)
            return [dump(ProjectRead, p) for p in found]

    async def get_project_problems(self, project_id: int) -> list[dict]:
        """Get all problems linked to a project (via junction table)."""
        async with self._session() as session:
            found = await integrity.children_for(session, project_id, LinkKind.PROBLEM)
            return [dump(ProblemRead, p) for p in found]

    # --- Outcomes ---

    async def create_outcome(
        self,
        project_id: int,
        title: str,
        description: str | None = None,
        status: OutcomeStatus | None = None,
        task_id: int | None = None,
    ) -> dict:
        """Create an outcome connected to a project and optionally a task."""
        data = build(
            OutcomeCreate,
            project_id=project_id,
            title=title,
            description=description,
            status=status,
            task_id=task_id,
        )
        async with self._session() as session:
            result = dump(OutcomeRead, await outcomes.create_outcome(session, data))
        self._publish("outcome_created", result, f"Outcome {result['title']} created")
        return result

    async def list_outcomes(
        self,
        project_id: int | None = None,
        task_id: int | None = None,
        status: OutcomeStatus | None = None,
    ) -> list[dict]:
        """List outcomes, optionally filtered by project, task and status."""
        async with self._session() as session:
            found = await outcomes.list_outcomes(session, project_id=project_id, task_id=task_id, status=status)
            return [dump(OutcomeRead, o) for o in found]

    async def get_outcome(self, id: int) -> dict:
        """Get details of a specific outcome."""
        async with self._session() as session:
            return dump(OutcomeRead, await outcomes.get_outcome(session, id))

    async def update_outcome(
        self,
        id: int,
        title: str | None = None,
        description: str | None = None,
        status: OutcomeStatus | None = None,
    ) -> dict:
        """Update an existing outcome."""
        data = build(OutcomeUpdate, title=title, description=description, status=status)
        async with self._session() as session:
            result = dump(OutcomeRead, await outcomes.update_outcome(session, id, data))
        self._publish("outcome_updated", result)
        return result

    async def delete_outcome(self, id: int) -> str:
        """Delete an outcome."""
        async with self._session() as session:
            await outcomes.delete_outcome(session, id)
        self._publish("outcome_deleted", {"id": id})
        return "outcome deleted successfully"

    # --- Goals ---

    async def create_goal(
        self,
        title: str,
        description: str | None = None,
        goal_type: GoalType | None = None,
        assignee: str | None = None,
        project_id: int | None = None,
        task_id: int | None = None,
    ) -> dict:
        """Create a goal (short_term, career, values, requirement) with optional links."""
        data = build(
            GoalCreate,
            title=title,
            description=description,
            goal_type=goal_type,
            assignee=assignee,
            project_id=project_id,
            task_id=task_id,
        )
        async with self._session() as session:
            result = dump(GoalRead, await goals.create_goal(session, data))
        self._publish("goal_created", result, f"Goal {result['title']} created")
        return result

    async def list_goals(
        self,
        project_id: int | None = None,
        task_id: int | None = None,
        goal_type: GoalType | None = None,
        assignee: str | None = None,
    ) -> list[dict]:
        """List goals, optionally filtered by project, task, type and assignee."""
        async with self._session() as session:
            found = await goals.list_goals(
                session, project_id=project_id, task_id=task_id, goal_type=goal_type, assignee=assignee
            )
            return [dump(GoalRead, g) for g in found]

    async def get_goal(self, id: int) -> dict:
        """Get details of a specific goal."""
        async with self._session() as session:
            return dump(GoalRead, await goals.get_goal(session, id))

    async def update_goal(
        self,
        id: int,
        title: str | None = None,
        description: str | None = None,
        goal_type: GoalType | None = None,
        assignee: str | None = None,
    ) -> dict:
        """Update an existing goal."""
        data = build(GoalUpdate, title=title, description=description, goal_type=goal_type, assignee=assignee)
        async with self._session() as session:
            result = dump(GoalRead, await goals.update_goal(session, id, data))
        self._publish("goal_updated", result)
        return result

    async def delete_goal(self, id: int) -> str:
        """Delete a goal and its project links."""
        async with self._session() as session:
            await goals.delete_goal(session, id)
        self._publish("goal_deleted", {"id": id})
        return "goal deleted successfully"

    async def link_goal_to_project(self, goal_id: int, project_id: int) -> str:
        """Link a goal to an additional project (many-to-many relationship)."""
        return await self._link(LinkKind.GOAL, goal_id, project_id)

    async def unlink_goal_from_project(self, goal_id: int, project_id: int) -> str:
        """Remove a goal's link to a project."""
        return await self._unlink(LinkKind.GOAL, goal_id, project_id)

    async def get_goal_projects(self, goal_id: int) -> list[dict]:
        """Get all projects linked to a goal."""
        async with self._session() as session:
            found = await integrity.projects_for(session, LinkKind.GOAL, goal_id)
            return [dump(ProjectRead, p) for p in found]

    async def get_project_goals(self, project_id: int) -> list[dict]:
        """Get all goals linked to a project (via junction table)."""
        async with self._session() as session:
            found = await integrity.children_for(session, project_id, LinkKind.GOAL)
            return [dump(GoalRead, g) for g in found]

    # --- Summary ---

    async def get_active_work_summary(self) -> dict:
        """
        Consolidated summary of all active work: active projects,
        pending/in-progress tasks, open/in-progress problems and outcomes.
        """
        async with self._session() as session:
            return (await summary.get_active_work_summary(session)).model_dump(mode="json")

    # --- Junction helpers ---

    async def _link(self, kind: LinkKind, child_id: int, project_id: int) -> str:
        async with self._session() as session:
            await integrity.link(session, kind, child_id, project_id)
        self._publish(f"{kind.value}_linked", {f"{kind.value}_id": child_id, "project_id": project_id})
        return f"{kind.value} linked to project successfully"

    async def _unlink(self, kind: LinkKind, child_id: int, project_id: int) -> str:
        async with self._session() as session:
            await integrity.unlink(session, kind, child_id, project_id)
        self._publish(f"{kind.value}_unlinked", {f"{kind.value}_id": child_id, "project_id": project_id})
        return f"{kind.value} unlinked from project successfully"
