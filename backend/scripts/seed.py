#!/usr/bin/env python3
"""
Seed script that writes a demo meeting history.

Creates a kickoff meeting with root tasks, then several follow-up meetings
whose tasks hang under those roots with a mix of statuses, blockers and
help-needed entries, back-dated so progress and velocity have something to
show.

Usage:
    python -m scripts.seed [--clear] [--meetings 3] [--days-between 2]

Options:
    --clear          Delete all task history before seeding
    --meetings N     Number of follow-up meetings (default: 3)
    --days-between   Days between consecutive meetings (default: 2)
    --report         Print progress metrics for every root task afterwards
"""

import argparse
import asyncio
import json
import random
import time
from datetime import timedelta

from sqlalchemy import delete

from taskthread.database import async_session_maker, init_db
from taskthread.models import Task, TaskStatus, utc_now
from taskthread.services.progress import calculate_task_progress
from taskthread.services.task_store import TaskStore


KICKOFF_TASKS = [
    ("Build meeting recorder", "Capture tab and microphone audio from the browser"),
    ("Set up task database", "Persist tasks, sessions and their links"),
    ("Task extraction", "Pull action items out of meeting transcripts"),
]

FOLLOW_UP_TASKS = {
    "Build meeting recorder": [
        "Mix tab and mic streams",
        "Silence detection",
        "Multi-participant support",
        "Upload recordings to backend",
    ],
    "Set up task database": [
        "Recursive subtask query",
        "Session metadata columns",
    ],
    "Task extraction": [
        "Prompt for action items",
        "Assign owners from transcript",
        "Deduplicate repeated tasks",
    ],
}

BLOCKERS = [
    {"name": "API rate limit", "severity": "high"},
    {"name": "DB schema lock", "severity": "medium"},
    {"name": "Waiting on design review", "severity": "low"},
]

HELP_NEEDED = ["Audio engineer", "Prompt review", "QA on Firefox"]


async def clear_data():
    """Delete all task history."""
    print("Clearing existing data...")
    async with async_session_maker() as session:
        await session.execute(delete(Task))
        await session.commit()
    print("Data cleared.")


def generate_history(
    meetings: int,
    days_between: int,
) -> list[Task]:
    """
    Build the kickoff roots and follow-up subtasks.

    Follow-up tasks get a status weighted toward completion for older
    meetings; roughly one in five carries a blocker and one in six asks
    for help.
    """
    now = utc_now()
    kickoff_date = now - timedelta(days=meetings * days_between)

    roots = {}
    tasks = []
    for title, description in KICKOFF_TASKS:
        root = Task(
            session_id="001",
            title=title,
            description=description,
            status=TaskStatus.IN_PROGRESS.value,
            created_date=kickoff_date,
            updated_date=kickoff_date,
        )
        roots[title] = root
        tasks.append(root)

    for meeting in range(1, meetings + 1):
        session_id = f"{meeting + 1:03d}"
        meeting_date = kickoff_date + timedelta(days=meeting * days_between)
        completion_odds = 1 - meeting / (meetings + 1)

        for root_title, subtasks in FOLLOW_UP_TASKS.items():
            for title in random.sample(subtasks, k=min(2, len(subtasks))):
                status = (
                    TaskStatus.COMPLETED.value
                    if random.random() < completion_odds
                    else TaskStatus.IN_PROGRESS.value
                )
                blockers = [random.choice(BLOCKERS)] if random.random() < 0.2 else None
                help_needed = [random.choice(HELP_NEEDED)] if random.random() < 0.17 else None
                if blockers:
                    status = TaskStatus.BLOCKED.value

                tasks.append(Task(
                    session_id=session_id,
                    title=title,
                    description=f"{title} (meeting {session_id})",
                    parent_task_id=roots[root_title].id,
                    status=status,
                    created_date=meeting_date,
                    updated_date=meeting_date,
                    blockers=json.dumps(blockers) if blockers else None,
                    help_needed=json.dumps(help_needed) if help_needed else None,
                ))

    return tasks


async def insert_tasks(tasks: list[Task]):
    """Insert tasks; roots come first so parent links resolve."""
    async with async_session_maker() as session:
        print(f"Inserting {len(tasks)} tasks...")
        session.add_all(tasks)
        await session.commit()


async def print_report():
    """Print progress metrics for every root task."""
    async with async_session_maker() as session:
        store = TaskStore(session)
        roots = await store.list_root_tasks()

        print(f"\n=== Progress ({len(roots)} root tasks) ===")
        for root in roots:
            metrics = await calculate_task_progress(store, root.id)
            if metrics is None:
                continue
            print(
                f"{metrics.task_title:<28} {metrics.progress_percent:>3}% "
                f"({metrics.subtasks_completed}/{metrics.subtasks_total}) "
                f"velocity={metrics.velocity}/day "
                f"remaining={metrics.estimated_days_remaining} "
                f"eta={metrics.estimated_completion_date} "
                f"blockers={len(metrics.blockers)}"
            )


async def main():
    parser = argparse.ArgumentParser(description="Seed the database with a demo meeting history")
    parser.add_argument("--clear", action="store_true", help="Clear existing data first")
    parser.add_argument("--meetings", type=int, default=3, help="Number of follow-up meetings")
    parser.add_argument("--days-between", type=int, default=2, help="Days between meetings")
    parser.add_argument("--report", action="store_true", help="Print progress after seeding")

    args = parser.parse_args()

    print("=== Taskthread Seed Script ===")

    await init_db()

    if args.clear:
        await clear_data()

    start_time = time.time()
    tasks = generate_history(args.meetings, args.days_between)
    await insert_tasks(tasks)
    print(f"Insert time: {time.time() - start_time:.2f}s")

    if args.report:
        await print_report()

    print("\n=== Seeding Complete ===")


if __name__ == "__main__":
    asyncio.run(main())
