"""
Task routes for the Taskthread API.
"""

from fastapi import APIRouter, Depends

from taskthread.dependencies import get_llm, get_task_store
from taskthread.exceptions import NotFoundError
from taskthread.models import Task
from taskthread.schemas import TaskRead, TaskProgressRead
from taskthread.services.llm import LLMClient
from taskthread.services.narrative import generate_task_analysis
from taskthread.services.progress import calculate_task_progress
from taskthread.services.task_store import TaskStore
from taskthread.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/", response_model=list[TaskRead])
async def list_root_tasks(
    store: TaskStore = Depends(get_task_store),
) -> list[Task]:
    """List root (topic-level) tasks."""
    tasks = await store.list_root_tasks()
    logger.debug(f"Listed {len(tasks)} root tasks")
    return tasks


@router.get("/{task_id}/history", response_model=list[TaskRead])
async def get_task_history(
    task_id: str,
    store: TaskStore = Depends(get_task_store),
) -> list[Task]:
    """Get a task followed by every mention and subtask stored under it."""
    history = await store.get_task_and_descendants(task_id)
    if not history:
        raise NotFoundError("Task", task_id)
    return history


@router.get("/{task_id}/progress", response_model=TaskProgressRead)
async def get_task_progress(
    task_id: str,
    store: TaskStore = Depends(get_task_store),
    llm: LLMClient = Depends(get_llm),
) -> TaskProgressRead:
    """Get progress metrics for a task subtree plus a generated status narrative."""
    metrics = await calculate_task_progress(store, task_id)
    if metrics is None:
        raise NotFoundError("Task", task_id)

    analysis = await generate_task_analysis(llm, metrics)
    return TaskProgressRead(progress_metrics=metrics, ai_analysis=analysis)
