"""
Shape of the relationship decision returned by the text-generation service.

The payload is untrusted: it is validated against a tagged union keyed on
"relationship" and anything that does not fit is rejected.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter


class NewTaskDecision(BaseModel):
    """The new task starts a new topic."""
    relationship: Literal["new"]
    # Models often echo the key with null; it carries no meaning here
    parent_task_title: str | None = None


class LinkedTaskDecision(BaseModel):
    """The new task continues, or is a subtask of, an existing root task."""
    relationship: Literal["continuation", "subtask"]
    parent_task_title: str = Field(min_length=1)


RelationshipDecision = Annotated[
    Union[NewTaskDecision, LinkedTaskDecision],
    Field(discriminator="relationship"),
]

relationship_decision_adapter: TypeAdapter[RelationshipDecision] = TypeAdapter(RelationshipDecision)
