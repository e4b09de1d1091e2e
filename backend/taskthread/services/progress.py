"""
Progress calculator for a task and its subtree.

For a root task and every later mention/subtask stored under it:
- progress_percent = completed / total * 100
- velocity = completed / days elapsed since the root was created
- estimated days remaining = (total - completed) / velocity
- blockers / help needed = concatenation over the whole subtree

When velocity is zero the remaining time is unknown and reported as "N/A",
never as zero or infinity.
"""

import json
import math
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from taskthread.models import Task, TaskStatus, as_utc, utc_now
from taskthread.schemas import NOT_AVAILABLE, ProgressMetrics
from taskthread.services.task_store import TaskStore

SECONDS_PER_DAY = 24 * 60 * 60


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return math.floor(value + 0.5)


def to_fixed(value: float, digits: int) -> str:
    """
    Format with a fixed number of decimals, exact halves rounded up.

    Works on the exact binary value, so 0.125 gives "0.13" while 1.005
    (stored slightly below) gives "1.00".
    """
    quantum = Decimal(1).scaleb(-digits)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def parse_json_list(raw: str | None) -> list[Any]:
    """
    Decode a JSON list column.

    None and empty strings mean "no entries"; a non-list JSON value counts as
    a single entry.
    """
    if not raw:
        return []
    value = json.loads(raw)
    if isinstance(value, list):
        return value
    return [value]


def compute_progress(
    rows: list[Task],
    now: datetime | None = None,
) -> ProgressMetrics | None:
    """
    Compute progress metrics from a task and its descendants.

    Args:
        rows: The task first, then its descendants
        now: Reference time, defaults to the current time; naive means UTC

    Returns:
        ProgressMetrics, or None if rows is empty
    """
    if not rows:
        return None

    now = as_utc(now) if now else utc_now()
    main_task = rows[0]

    created = as_utc(main_task.created_date)
    days_elapsed = round_half_up((now - created).total_seconds() / SECONDS_PER_DAY)

    total = len(rows)
    completed = sum(1 for row in rows if row.status == TaskStatus.COMPLETED.value)
    progress_percent = round_half_up(completed / total * 100) if total > 0 else 0

    velocity = completed / days_elapsed if days_elapsed > 0 else 0.0

    if velocity > 0:
        remaining_days = (total - completed) / velocity
        estimated_days_remaining = to_fixed(remaining_days, 1)
        estimated_completion_date = (now + timedelta(days=int(remaining_days))).date().isoformat()
    else:
        estimated_days_remaining = NOT_AVAILABLE
        estimated_completion_date = NOT_AVAILABLE

    blockers = []
    help_needed = []
    for row in rows:
        blockers.extend(parse_json_list(row.blockers))
        help_needed.extend(parse_json_list(row.help_needed))

    return ProgressMetrics(
        task_id=main_task.id,
        task_title=main_task.title,
        created_date=created.date().isoformat(),
        days_elapsed=days_elapsed,
        progress_percent=progress_percent,
        subtasks_completed=completed,
        subtasks_total=total,
        velocity=to_fixed(velocity, 2),
        estimated_days_remaining=estimated_days_remaining,
        estimated_completion_date=estimated_completion_date,
        blockers=blockers,
        help_needed=help_needed,
    )


async def calculate_task_progress(
    store: TaskStore,
    task_id: str,
    now: datetime | None = None,
) -> ProgressMetrics | None:
    """Fetch the subtree of task_id and compute its progress; None if the task is unknown."""
    rows = await store.get_task_and_descendants(task_id)
    return compute_progress(rows, now=now)
