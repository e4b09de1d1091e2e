from typing import Any
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from taskthread.schemas.task import NewTask


# Progress fields that cannot be computed (no velocity yet)
NOT_AVAILABLE = "N/A"


class CamelModel(BaseModel):
    """Serialized with camelCase keys, populated by either name."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProgressMetrics(CamelModel):
    """
    Progress of one root task across every meeting that mentioned it.

    velocity and estimated_days_remaining are pre-formatted strings
    ("0.40", "7.5"); estimated_days_remaining and estimated_completion_date
    hold NOT_AVAILABLE when nothing has been completed yet.
    """
    task_id: str
    task_title: str
    created_date: str
    days_elapsed: int
    progress_percent: int
    subtasks_completed: int
    subtasks_total: int
    velocity: str
    estimated_days_remaining: str
    estimated_completion_date: str
    blockers: list[Any] = Field(default_factory=list)
    help_needed: list[Any] = Field(default_factory=list)


class ContinuityReport(CamelModel):
    """Progress, blockers and narrative for every parent task a session touched."""
    previous_tasks: list[ProgressMetrics] = Field(default_factory=list)
    blockers: list[Any] = Field(default_factory=list)
    ai_analysis: str = ""


class ContinuityRequest(BaseModel):
    """Tasks extracted from one meeting session."""
    tasks: list[NewTask]


class TaskProgressRead(CamelModel):
    """Progress metrics of a task plus the generated narrative."""
    progress_metrics: ProgressMetrics
    ai_analysis: str


class ContinuityJobRead(CamelModel):
    """State of a background continuity job."""
    job_id: str
    status: str
    report: ContinuityReport | None = None
    error: str | None = None
