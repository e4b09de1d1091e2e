import uuid
from datetime import datetime, timezone
from enum import Enum
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field


class TaskStatus(str, Enum):
    """Known task states. Only COMPLETED counts toward progress."""
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    BLOCKED = "Blocked"


def _new_task_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat a naive timestamp as UTC; convert an aware one to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Task(SQLModel, table=True):
    """
    One mention of a task in one meeting session.

    A task that comes up again in a later meeting is stored as a new row
    pointing at the original through parent_task_id, so the lineage of a
    topic is the subtree under its root row.

    Key fields:
    - parent_task_id: None for root (topic-level) tasks
    - blockers / help_needed: JSON-encoded lists, None when absent
    """

    __tablename__ = "task_history"

    id: str = Field(default_factory=_new_task_id, primary_key=True)
    session_id: str = Field(index=True)
    title: str = Field(index=True)
    description: str = Field(default="")
    parent_task_id: str | None = Field(
        default=None,
        foreign_key="task_history.id",
        index=True,
    )
    status: str = Field(default=TaskStatus.OPEN.value)

    # Timestamps (aware UTC; SQLite hands them back naive)
    created_date: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_date: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    # Estimates, not written by the linking flow
    estimated_days: int | None = Field(default=None)
    actual_days_taken: int | None = Field(default=None)

    blockers: str | None = Field(default=None)
    help_needed: str | None = Field(default=None)
    participant_assigned: str | None = Field(default=None)
