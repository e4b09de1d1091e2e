"""
Continuity orchestrator: entry point for one meeting session.

Pipeline (sequential, no retry, no rollback):
1. Link and store the session's new tasks
2. Find the distinct parent tasks the session's tasks point to
3. For each parent, in store order: progress metrics, then narrative
4. Assemble the continuity report
"""

from taskthread.schemas import ContinuityReport, NewTask
from taskthread.services.linker import link_tasks_across_meetings
from taskthread.services.llm import LLMClient
from taskthread.services.narrative import generate_task_analysis
from taskthread.services.progress import calculate_task_progress
from taskthread.services.task_store import TaskStore
from taskthread.logging_config import get_logger

logger = get_logger(__name__)


async def generate_task_continuity(
    store: TaskStore,
    llm: LLMClient,
    session_id: str,
    new_tasks: list[NewTask],
) -> ContinuityReport:
    """
    Link a session's tasks and report progress on every parent task it touched.

    Any failure propagates to the caller; tasks linked before the failure
    remain stored.
    """
    await link_tasks_across_meetings(store, llm, session_id, new_tasks)

    parent_tasks = await store.list_parent_tasks_for_session(session_id)
    logger.info(f"Session {session_id}: {len(parent_tasks)} parent tasks to analyze")

    report = ContinuityReport()
    analysis_text = ""

    for parent in parent_tasks:
        metrics = await calculate_task_progress(store, parent.id)
        if metrics is None:
            continue

        analysis = await generate_task_analysis(llm, metrics)
        report.previous_tasks.append(metrics)
        report.blockers.extend(metrics.blockers)
        analysis_text += analysis + "\n\n"

    report.ai_analysis = analysis_text.rstrip()
    return report
