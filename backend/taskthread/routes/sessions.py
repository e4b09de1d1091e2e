"""
Session routes: continuity reports for a meeting's extracted tasks.
"""

from fastapi import APIRouter, Depends, status

from taskthread.dependencies import get_llm, get_task_store
from taskthread.schemas import ContinuityJobRead, ContinuityReport, ContinuityRequest
from taskthread.services.continuity import generate_task_continuity
from taskthread.services.llm import LLMClient
from taskthread.services.task_store import TaskStore
from taskthread.worker import enqueue_continuity, get_continuity_job
from taskthread.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/{session_id}/continuity", response_model=ContinuityReport)
async def create_continuity_report(
    session_id: str,
    request: ContinuityRequest,
    store: TaskStore = Depends(get_task_store),
    llm: LLMClient = Depends(get_llm),
) -> ContinuityReport:
    """
    Link the session's tasks to earlier meetings and report on the parents they touched.

    Runs inline; use the jobs endpoint for long batches.
    """
    logger.info(f"Continuity requested for session={session_id} with {len(request.tasks)} tasks")
    return await generate_task_continuity(store, llm, session_id, request.tasks)


@router.post(
    "/{session_id}/continuity/jobs",
    response_model=ContinuityJobRead,
    status_code=status.HTTP_202_ACCEPTED,
)
async def enqueue_continuity_report(
    session_id: str,
    request: ContinuityRequest,
) -> ContinuityJobRead:
    """Queue the continuity pipeline on the background worker."""
    job_id = await enqueue_continuity(session_id, request.tasks)
    return ContinuityJobRead(job_id=job_id, status="queued")


@router.get("/continuity/jobs/{job_id}", response_model=ContinuityJobRead)
async def read_continuity_job(job_id: str) -> ContinuityJobRead:
    """Poll a background continuity job."""
    return await get_continuity_job(job_id)
