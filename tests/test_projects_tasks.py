"""
Tests for the project, task and task note stores.
"""

import asyncio

import pydantic
import pytest

from loom.exceptions import MissingReferenceError, NotFoundError, ValidationError
from loom.models import ProjectStatus, TaskPriority, TaskStatus, TaskType
from loom.schemas import (
    ProjectCreate,
    ProjectRead,
    ProjectUpdate,
    TaskCreate,
    TaskNoteCreate,
    TaskNoteUpdate,
    TaskRead,
    TaskUpdate,
)
from loom.services import projects, tasks


class TestProjects:
    async def test_create_applies_defaults(self, test_session):
        project = await projects.create_project(test_session, ProjectCreate(name="Website"))

        assert project.id is not None
        assert project.status == "active"
        assert project.description is None
        assert project.created_at is not None
        assert project.updated_at is not None

    async def test_get_after_create_returns_same_entity(self, test_session):
        created = await projects.create_project(
            test_session,
            ProjectCreate(name="Website", description="Marketing site", status=ProjectStatus.PLANNING),
        )
        created_read = ProjectRead.model_validate(created)

        fetched = await projects.get_project(test_session, created.id)

        assert ProjectRead.model_validate(fetched) == created_read

    async def test_get_missing_raises_not_found(self, test_session):
        with pytest.raises(NotFoundError):
            await projects.get_project(test_session, 999)

    async def test_blank_name_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            ProjectCreate(name="")

    async def test_unknown_status_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            ProjectCreate(name="Website", status="paused")

    async def test_list_orders_by_most_recently_updated(self, test_session):
        first = await projects.create_project(test_session, ProjectCreate(name="First"))
        await asyncio.sleep(0.01)
        second = await projects.create_project(test_session, ProjectCreate(name="Second"))
        await asyncio.sleep(0.01)
        await projects.update_project(test_session, first.id, ProjectUpdate(description="touched"))

        listed = await projects.list_projects(test_session)

        assert [p.id for p in listed] == [first.id, second.id]

    async def test_list_filters_by_status(self, test_session):
        await projects.create_project(test_session, ProjectCreate(name="Live"))
        archived = await projects.create_project(
            test_session, ProjectCreate(name="Old", status=ProjectStatus.ARCHIVED)
        )

        listed = await projects.list_projects(test_session, status="archived")

        assert [p.id for p in listed] == [archived.id]

    async def test_list_with_unknown_status_raises_validation_error(self, test_session):
        with pytest.raises(ValidationError):
            await projects.list_projects(test_session, status="paused")

    async def test_update_changes_only_supplied_fields(self, test_session):
        project = await projects.create_project(
            test_session, ProjectCreate(name="Website", description="Marketing site")
        )

        updated = await projects.update_project(
            test_session, project.id, ProjectUpdate(status=ProjectStatus.COMPLETED)
        )

        assert updated.status == "completed"
        assert updated.name == "Website"
        assert updated.description == "Marketing site"

    async def test_update_can_clear_optional_field(self, test_session):
        project = await projects.create_project(
            test_session, ProjectCreate(name="Website", description="Marketing site")
        )

        updated = await projects.update_project(test_session, project.id, ProjectUpdate(description=None))

        assert updated.description is None

    async def test_update_rejects_null_name(self):
        with pytest.raises(pydantic.ValidationError):
            ProjectUpdate(name=None)

    async def test_empty_update_advances_updated_at(self, test_session):
        project = await projects.create_project(test_session, ProjectCreate(name="Website"))
        before = project.updated_at
        await asyncio.sleep(0.01)

        updated = await projects.update_project(test_session, project.id, ProjectUpdate())

        assert updated.updated_at > before
        assert updated.name == "Website"

    async def test_update_missing_raises_not_found(self, test_session):
        with pytest.raises(NotFoundError):
            await projects.update_project(test_session, 999, ProjectUpdate(name="x"))

    async def test_delete_missing_raises_not_found(self, test_session):
        with pytest.raises(NotFoundError):
            await projects.delete_project(test_session, 999)


class TestTasks:
    async def test_create_applies_defaults(self, test_session):
        project = await projects.create_project(test_session, ProjectCreate(name="Website"))

        task = await tasks.create_task(test_session, TaskCreate(project_id=project.id, title="Write copy"))

        assert task.status == "pending"
        assert task.priority == "medium"
        assert task.task_type == "general"
        assert task.project_id == project.id

    async def test_create_with_missing_project_leaves_list_unchanged(self, test_session):
        project = await projects.create_project(test_session, ProjectCreate(name="Website"))
        await tasks.create_task(test_session, TaskCreate(project_id=project.id, title="Existing"))
        before = [TaskRead.model_validate(t) for t in await tasks.list_tasks(test_session)]

        with pytest.raises(MissingReferenceError) as exc_info:
            await tasks.create_task(test_session, TaskCreate(project_id=999, title="Orphan"))

        assert exc_info.value.field == "project_id"
        after = [TaskRead.model_validate(t) for t in await tasks.list_tasks(test_session)]
        assert after == before

    async def test_list_filters_combine(self, test_session):
        website = await projects.create_project(test_session, ProjectCreate(name="Website"))
        api = await projects.create_project(test_session, ProjectCreate(name="API"))
        match = await tasks.create_task(test_session, TaskCreate(
            project_id=website.id,
            title="Fix header",
            task_type=TaskType.BUGFIX,
            priority=TaskPriority.HIGH,
        ))
        await tasks.create_task(test_session, TaskCreate(
            project_id=website.id, title="Plan launch", priority=TaskPriority.HIGH,
        ))
        await tasks.create_task(test_session, TaskCreate(
            project_id=api.id, title="Fix auth", task_type=TaskType.BUGFIX, priority=TaskPriority.HIGH,
        ))

        listed = await tasks.list_tasks(
            test_session, project_id=website.id, task_type="bugfix", priority="high"
        )

        assert [t.id for t in listed] == [match.id]

    async def test_list_filter_with_unknown_priority_raises(self, test_session):
        with pytest.raises(ValidationError):
            await tasks.list_tasks(test_session, priority="critical")

    async def test_update_status(self, test_session):
        project = await projects.create_project(test_session, ProjectCreate(name="Website"))
        task = await tasks.create_task(test_session, TaskCreate(project_id=project.id, title="Write copy"))

        updated = await tasks.update_task(test_session, task.id, TaskUpdate(status=TaskStatus.IN_PROGRESS))

        assert updated.status == "in_progress"
        assert updated.title == "Write copy"

    async def test_update_cannot_move_task(self):
        with pytest.raises(pydantic.ValidationError):
            TaskUpdate(project_id=2)


class TestTaskNotes:
    async def test_notes_listed_oldest_first(self, test_session):
        project = await projects.create_project(test_session, ProjectCreate(name="Website"))
        task = await tasks.create_task(test_session, TaskCreate(project_id=project.id, title="Write copy"))

        first = await tasks.create_task_note(test_session, TaskNoteCreate(task_id=task.id, note="Started"))
        await asyncio.sleep(0.01)
        second = await tasks.create_task_note(test_session, TaskNoteCreate(task_id=task.id, note="Halfway"))

        notes = await tasks.list_task_notes(test_session, task_id=task.id)

        assert [n.id for n in notes] == [first.id, second.id]

    async def test_note_for_missing_task_rejected(self, test_session):
        with pytest.raises(MissingReferenceError):
            await tasks.create_task_note(test_session, TaskNoteCreate(task_id=999, note="Lost"))

        assert await tasks.list_task_notes(test_session) == []

    async def test_update_note_text(self, test_session):
        project = await projects.create_project(test_session, ProjectCreate(name="Website"))
        task = await tasks.create_task(test_session, TaskCreate(project_id=project.id, title="Write copy"))
        note = await tasks.create_task_note(test_session, TaskNoteCreate(task_id=task.id, note="Started"))

        updated = await tasks.update_task_note(test_session, note.id, TaskNoteUpdate(note="Done"))

        assert updated.note == "Done"
        assert updated.task_id == task.id

    async def test_delete_note(self, test_session):
        project = await projects.create_project(test_session, ProjectCreate(name="Website"))
        task = await tasks.create_task(test_session, TaskCreate(project_id=project.id, title="Write copy"))
        note = await tasks.create_task_note(test_session, TaskNoteCreate(task_id=task.id, note="Started"))

        await tasks.delete_task_note(test_session, note.id)

        with pytest.raises(NotFoundError):
            await tasks.get_task_note(test_session, note.id)
        assert await tasks.list_task_notes(test_session, task_id=task.id) == []

    async def test_notes_of_missing_task_is_empty(self, test_session):
        assert await tasks.list_task_notes(test_session, task_id=999) == []


class TestTimestamps:
    async def test_timestamps_survive_a_fresh_session(self, session_maker):
        async with session_maker() as session:
            project = await projects.create_project(session, ProjectCreate(name="Website"))
            await session.commit()
            created = ProjectRead.model_validate(project)

        async with session_maker() as session:
            reloaded = await projects.get_project(session, created.id)

            assert reloaded.created_at == created.created_at
            assert reloaded.updated_at == created.updated_at
