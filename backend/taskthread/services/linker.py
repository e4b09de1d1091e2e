"""
Task linker: stores the tasks of one meeting session, each attached to the
root task the matcher picked for it (or as a new root).
"""

from taskthread.schemas import NewTask
from taskthread.services.llm import LLMClient
from taskthread.services.matcher import match_parent_task_id
from taskthread.services.task_store import TaskStore
from taskthread.logging_config import get_logger

logger = get_logger(__name__)


async def link_tasks_across_meetings(
    store: TaskStore,
    llm: LLMClient,
    session_id: str,
    new_tasks: list[NewTask],
) -> list[str]:
    """
    Link and persist every task of a session, in order.

    The root task pool is read once, before the first insert, and is the
    candidate list for every task of the batch: a task can never be linked
    under a sibling stored earlier in the same batch.

    When there are no root tasks yet, every task becomes a root task and the
    matcher is not consulted.

    Tasks are processed one at a time. If matching fails for a task the error
    is logged and re-raised; tasks stored before it stay stored.

    Returns:
        Ids of the stored tasks, in input order
    """
    root_tasks = await store.list_root_tasks()

    if not root_tasks:
        logger.info(f"Session {session_id}: no root tasks yet, storing {len(new_tasks)} tasks as roots")
        return [await store.insert_task(task, session_id, None) for task in new_tasks]

    logger.info(
        f"Session {session_id}: linking {len(new_tasks)} tasks against {len(root_tasks)} root tasks"
    )

    stored_ids = []
    for task in new_tasks:
        try:
            parent_task_id = await match_parent_task_id(llm, task, root_tasks)
        except Exception:
            logger.error(
                f"Session {session_id}: matching failed for '{task.title}' "
                f"after {len(stored_ids)} of {len(new_tasks)} tasks were stored"
            )
            raise
        stored_ids.append(await store.insert_task(task, session_id, parent_task_id))

    return stored_ids
