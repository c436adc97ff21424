"""
Tests for the problem, outcome and goal stores.
"""

import asyncio

import pydantic
import pytest
import pytest_asyncio

from loom.exceptions import MissingReferenceError, NotFoundError, TaskProjectMismatchError, ValidationError
from loom.models import GoalType, OutcomeStatus, ProblemStatus
from loom.schemas import (
    GoalCreate,
    GoalRead,
    GoalUpdate,
    OutcomeCreate,
    OutcomeUpdate,
    ProblemCreate,
    ProblemRead,
    ProblemUpdate,
    ProjectCreate,
    TaskCreate,
)
from loom.services import goals, outcomes, problems, projects, tasks


@pytest_asyncio.fixture
async def workspace(test_session):
    """Two projects with one task each."""
    website = await projects.create_project(test_session, ProjectCreate(name="Website"))
    api = await projects.create_project(test_session, ProjectCreate(name="API"))
    copy_task = await tasks.create_task(test_session, TaskCreate(project_id=website.id, title="Write copy"))
    auth_task = await tasks.create_task(test_session, TaskCreate(project_id=api.id, title="Add auth"))
    return website, api, copy_task, auth_task


class TestProblems:
    async def test_create_without_links(self, test_session):
        problem = await problems.create_problem(test_session, ProblemCreate(title="Flaky CI"))

        assert problem.project_id is None
        assert problem.task_id is None
        assert problem.status == "open"

    async def test_project_inherited_from_task(self, test_session, workspace):
        website, _, copy_task, _ = workspace

        problem = await problems.create_problem(
            test_session, ProblemCreate(title="Tone is off", task_id=copy_task.id)
        )

        assert problem.project_id == website.id
        assert problem.task_id == copy_task.id

    async def test_task_from_other_project_rejected(self, test_session, workspace):
        website, _, _, auth_task = workspace

        with pytest.raises(TaskProjectMismatchError):
            await problems.create_problem(
                test_session,
                ProblemCreate(title="Wrong", project_id=website.id, task_id=auth_task.id),
            )

        assert await problems.list_problems(test_session) == []

    async def test_mismatch_is_a_validation_error(self, test_session, workspace):
        website, _, _, auth_task = workspace

        with pytest.raises(ValidationError):
            await problems.create_problem(
                test_session,
                ProblemCreate(title="Wrong", project_id=website.id, task_id=auth_task.id),
            )

    async def test_missing_task_rejected(self, test_session):
        with pytest.raises(MissingReferenceError) as exc_info:
            await problems.create_problem(test_session, ProblemCreate(title="Ghost", task_id=42))

        assert exc_info.value.field == "task_id"
        assert await problems.list_problems(test_session) == []

    async def test_missing_project_rejected(self, test_session):
        with pytest.raises(MissingReferenceError) as exc_info:
            await problems.create_problem(test_session, ProblemCreate(title="Ghost", project_id=42))

        assert exc_info.value.field == "project_id"

    async def test_get_after_create_returns_same_entity(self, test_session, workspace):
        website, _, _, _ = workspace
        created = await problems.create_problem(test_session, ProblemCreate(
            title="Slow pages",
            description="LCP over 4s",
            project_id=website.id,
            status=ProblemStatus.IN_PROGRESS,
            assignee="sam",
        ))
        created_read = ProblemRead.model_validate(created)

        fetched = await problems.get_problem(test_session, created.id)

        assert ProblemRead.model_validate(fetched) == created_read

    async def test_list_filters_by_status_and_assignee(self, test_session, workspace):
        website, _, _, _ = workspace
        match = await problems.create_problem(test_session, ProblemCreate(
            title="Slow pages", project_id=website.id, assignee="sam",
        ))
        await problems.create_problem(test_session, ProblemCreate(
            title="Broken link", project_id=website.id, assignee="robin",
        ))
        await problems.create_problem(test_session, ProblemCreate(
            title="Old bug", assignee="sam", status=ProblemStatus.RESOLVED,
        ))

        listed = await problems.list_problems(test_session, status="open", assignee="sam")

        assert [p.id for p in listed] == [match.id]

    async def test_update_resolves(self, test_session):
        problem = await problems.create_problem(test_session, ProblemCreate(title="Flaky CI"))

        updated = await problems.update_problem(
            test_session, problem.id, ProblemUpdate(status=ProblemStatus.RESOLVED)
        )

        assert updated.status == "resolved"

    async def test_update_does_not_accept_links(self):
        with pytest.raises(pydantic.ValidationError):
            ProblemUpdate(project_id=1)

    async def test_delete(self, test_session):
        problem = await problems.create_problem(test_session, ProblemCreate(title="Flaky CI"))

        await problems.delete_problem(test_session, problem.id)

        with pytest.raises(NotFoundError):
            await problems.get_problem(test_session, problem.id)


class TestOutcomes:
    async def test_project_is_required(self):
        with pytest.raises(pydantic.ValidationError):
            OutcomeCreate(title="Launch")

    async def test_create_for_project(self, test_session, workspace):
        website, _, copy_task, _ = workspace

        outcome = await outcomes.create_outcome(
            test_session, OutcomeCreate(project_id=website.id, task_id=copy_task.id, title="Launch")
        )

        assert outcome.project_id == website.id
        assert outcome.task_id == copy_task.id
        assert outcome.status == "open"

    async def test_missing_project_rejected(self, test_session):
        with pytest.raises(MissingReferenceError):
            await outcomes.create_outcome(test_session, OutcomeCreate(project_id=7, title="Launch"))

        assert await outcomes.list_outcomes(test_session) == []

    async def test_task_from_other_project_rejected(self, test_session, workspace):
        website, _, _, auth_task = workspace

        with pytest.raises(TaskProjectMismatchError):
            await outcomes.create_outcome(
                test_session, OutcomeCreate(project_id=website.id, task_id=auth_task.id, title="Launch")
            )

    async def test_list_and_update(self, test_session, workspace):
        website, api, _, _ = workspace
        launch = await outcomes.create_outcome(test_session, OutcomeCreate(project_id=website.id, title="Launch"))
        await outcomes.create_outcome(test_session, OutcomeCreate(project_id=api.id, title="v1"))

        await outcomes.update_outcome(test_session, launch.id, OutcomeUpdate(status=OutcomeStatus.COMPLETED))

        completed = await outcomes.list_outcomes(test_session, status="completed")
        assert [o.id for o in completed] == [launch.id]
        for_website = await outcomes.list_outcomes(test_session, project_id=website.id)
        assert [o.id for o in for_website] == [launch.id]

    async def test_delete_missing_raises(self, test_session):
        with pytest.raises(NotFoundError):
            await outcomes.delete_outcome(test_session, 1)


class TestGoals:
    async def test_create_defaults(self, test_session):
        goal = await goals.create_goal(test_session, GoalCreate(title="Learn Rust"))

        assert goal.goal_type == "short_term"
        assert goal.project_id is None

    async def test_get_after_create_returns_same_entity(self, test_session, workspace):
        _, api, _, auth_task = workspace
        created = await goals.create_goal(test_session, GoalCreate(
            title="Ship auth",
            goal_type=GoalType.REQUIREMENT,
            task_id=auth_task.id,
            assignee="alex",
        ))
        created_read = GoalRead.model_validate(created)

        fetched = await goals.get_goal(test_session, created.id)

        assert GoalRead.model_validate(fetched) == created_read
        assert fetched.project_id == api.id

    async def test_list_filters_by_type(self, test_session):
        career = await goals.create_goal(test_session, GoalCreate(title="Lead a team", goal_type=GoalType.CAREER))
        await goals.create_goal(test_session, GoalCreate(title="Ship it"))

        listed = await goals.list_goals(test_session, goal_type="career")

        assert [g.id for g in listed] == [career.id]

    async def test_list_with_unknown_type_raises(self, test_session):
        with pytest.raises(ValidationError):
            await goals.list_goals(test_session, goal_type="someday")

    async def test_empty_update_advances_updated_at(self, test_session):
        goal = await goals.create_goal(test_session, GoalCreate(title="Learn Rust"))
        before = goal.updated_at
        await asyncio.sleep(0.01)

        updated = await goals.update_goal(test_session, goal.id, GoalUpdate())

        assert updated.updated_at > before
        assert updated.title == "Learn Rust"
