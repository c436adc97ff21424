#!/usr/bin/env python3
"""
Seed script to populate a demo Loom workspace.

Creates a few projects with tasks, notes, problems, outcomes and goals,
including cross-project links, so the API and event stream have something
to show.

Usage:
    python -m scripts.seed [--projects 3] [--tasks 8] [--clear]

Options:
    --projects N  Number of projects to create (default: 3)
    --tasks N     Tasks per project (default: 8)
    --clear       Delete every existing project, problem and goal first
"""

import argparse
import asyncio
import random
import time

from loom.database import get_session_context, init_db
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
    OutcomeCreate,
    ProblemCreate,
    ProjectCreate,
    TaskCreate,
    TaskNoteCreate,
)
from loom.services import goals, integrity, outcomes, problems, projects, summary, tasks

ASSIGNEES = ["alex", "sam", "robin", None]


async def clear_data():
    """Delete everything through the store so cascades run."""
    print("Clearing existing data...")
    async with get_session_context() as session:
        for project in await projects.list_projects(session):
            await projects.delete_project(session, project.id)
        for problem in await problems.list_problems(session):
            await problems.delete_problem(session, problem.id)
        for goal in await goals.list_goals(session):
            await goals.delete_goal(session, goal.id)
    print("Data cleared.")


async def seed_project(index: int, num_tasks: int) -> int:
    """Create one project with its tasks and dependents; returns the project ID."""
    async with get_session_context() as session:
        project = await projects.create_project(session, ProjectCreate(
            name=f"Project {index + 1:02d}",
            description=f"Demo project {index + 1}",
            status=random.choice([ProjectStatus.ACTIVE, ProjectStatus.PLANNING]),
        ))

        for i in range(num_tasks):
            task = await tasks.create_task(session, TaskCreate(
                project_id=project.id,
                title=f"Task P{index + 1:02d}-{i:03d}",
                status=random.choice(list(TaskStatus)),
                priority=random.choice(list(TaskPriority)),
                task_type=random.choice(list(TaskType)),
            ))

            # Roughly one in three tasks gets a note
            if random.random() < 0.33:
                await tasks.create_task_note(session, TaskNoteCreate(
                    task_id=task.id,
                    note=f"Progress note for {task.title}",
                ))

            # Some tasks raise a problem
            if random.random() < 0.2:
                await problems.create_problem(session, ProblemCreate(
                    title=f"Blocker on {task.title}",
                    project_id=project.id,
                    task_id=task.id,
                    status=random.choice(list(ProblemStatus)),
                    assignee=random.choice(ASSIGNEES),
                ))

        await outcomes.create_outcome(session, OutcomeCreate(
            project_id=project.id,
            title=f"Ship project {index + 1}",
            status=random.choice(list(OutcomeStatus)),
        ))
        await goals.create_goal(session, GoalCreate(
            title=f"Goal for project {index + 1}",
            project_id=project.id,
            goal_type=random.choice(list(GoalType)),
            assignee=random.choice(ASSIGNEES),
        ))
        return project.id


async def link_across(project_ids: list[int]):
    """Link a shared goal and a shared problem to every seeded project."""
    async with get_session_context() as session:
        goal = await goals.create_goal(session, GoalCreate(
            title="Keep releases boring",
            goal_type=GoalType.VALUES,
        ))
        problem = await problems.create_problem(session, ProblemCreate(
            title="CI is slow",
            status=ProblemStatus.OPEN,
        ))
        for project_id in project_ids:
            await integrity.link(session, LinkKind.GOAL, goal.id, project_id)
            await integrity.link(session, LinkKind.PROBLEM, problem.id, project_id)


async def get_stats():
    """Print what the active work summary sees."""
    async with get_session_context() as session:
        active = await summary.get_active_work_summary(session)

    print("\n=== Active Work ===")
    print(f"Projects: {len(active.projects)}")
    print(f"Tasks:    {len(active.tasks)} (pending or in progress)")
    print(f"Problems: {len(active.problems)} (open or in progress)")
    print(f"Outcomes: {len(active.outcomes)} (open or in progress)")


async def main():
    parser = argparse.ArgumentParser(description="Seed the database with demo data")
    parser.add_argument("--projects", type=int, default=3, help="Number of projects to create")
    parser.add_argument("--tasks", type=int, default=8, help="Tasks per project")
    parser.add_argument("--clear", action="store_true", help="Clear existing data first")

    args = parser.parse_args()

    print("=== Loom Seed Script ===")

    # Initialize database
    await init_db()

    if args.clear:
        await clear_data()

    start_time = time.time()
    project_ids = []
    for index in range(args.projects):
        project_ids.append(await seed_project(index, args.tasks))
    await link_across(project_ids)
    print(f"Insert time: {time.time() - start_time:.2f}s")

    await get_stats()

    print("\n=== Seeding Complete ===")
    print(f"Project IDs: {project_ids}")


if __name__ == "__main__":
    asyncio.run(main())
