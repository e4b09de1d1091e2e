from datetime import datetime
from pydantic import BaseModel, Field, field_validator


class NewTask(BaseModel):
    """A task extracted from a meeting transcript, before linking."""
    title: str = Field(min_length=1)
    description: str = ""

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank")
        return value

    @field_validator("description", mode="before")
    @classmethod
    def description_default(cls, value):
        # Summarizers sometimes send null for a missing description
        return value or ""


class TaskRead(BaseModel):
    """Schema for reading a stored task row."""
    id: str
    session_id: str
    title: str
    description: str
    parent_task_id: str | None
    status: str
    created_date: datetime
    updated_date: datetime
    estimated_days: int | None
    actual_days_taken: int | None
    blockers: str | None
    help_needed: str | None
    participant_assigned: str | None

    model_config = {"from_attributes": True}
