"""
Task matcher: decides whether a newly extracted task belongs under an
existing root task.

The semantic judgment is delegated to the text-generation service; its
answer is validated, then the suggested parent title is resolved back to a
stored task:
1. Case-insensitive exact match on trimmed titles
2. Case-insensitive substring match in either direction
The first candidate that matches wins, in the order the candidates were given.
"""

from pydantic import ValidationError as PydanticValidationError

from taskthread.exceptions import MalformedUpstreamPayloadError
from taskthread.models import Task
from taskthread.schemas import (
    LinkedTaskDecision,
    NewTask,
    RelationshipDecision,
    relationship_decision_adapter,
)
from taskthread.services.llm import LLMClient
from taskthread.services.prompts import build_relationship_prompt
from taskthread.logging_config import get_logger

logger = get_logger(__name__)


async def decide_relationship(
    llm: LLMClient,
    new_task: NewTask,
    candidates: list[Task],
) -> RelationshipDecision:
    """
    Ask the text-generation service how new_task relates to the candidates.

    Raises:
        UpstreamCallError: the call itself failed
        MalformedUpstreamPayloadError: the answer is not a valid decision
    """
    prompt = build_relationship_prompt(new_task, [t.title for t in candidates])
    raw = await llm.complete(prompt, json_output=True)

    try:
        decision = relationship_decision_adapter.validate_json(raw)
    except PydanticValidationError as exc:
        logger.error(
            f"Malformed relationship payload for '{new_task.title}': {exc.errors(include_url=False)} "
            f"raw={raw!r}"
        )
        raise MalformedUpstreamPayloadError(
            f"Relationship decision for '{new_task.title}' could not be parsed",
            raw_payload=raw,
        ) from exc

    logger.info(f"Relationship for '{new_task.title}': {decision.model_dump_json()}")
    return decision


def resolve_parent_task(title: str, candidates: list[Task]) -> Task | None:
    """
    Map a suggested parent title back to one of the candidate tasks.

    Returns None when no candidate matches.
    """
    target = title.lower().strip()
    if not target:
        return None

    for task in candidates:
        if task.title.lower().strip() == target:
            return task

    # Handles punctuation and minor wording differences; ambiguous for short titles
    for task in candidates:
        candidate = task.title.lower()
        if target in candidate or candidate in target:
            return task

    return None


async def match_parent_task_id(
    llm: LLMClient,
    new_task: NewTask,
    candidates: list[Task],
) -> str | None:
    """Decide the relationship of new_task and return the parent id, if any."""
    decision = await decide_relationship(llm, new_task, candidates)
    if not isinstance(decision, LinkedTaskDecision):
        return None

    parent = resolve_parent_task(decision.parent_task_title, candidates)
    if parent is None:
        logger.warning(
            f"Suggested parent '{decision.parent_task_title}' for '{new_task.title}' "
            f"matches no root task; storing as a new root task"
        )
        return None

    logger.info(f"Linked '{new_task.title}' to parent '{parent.title}' ({decision.relationship})")
    return parent.id
