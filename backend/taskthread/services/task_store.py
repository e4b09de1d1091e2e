"""
Task store backed by the task_history table.

All reads and writes of the continuity engine go through TaskStore, which
wraps a single AsyncSession. Nothing is cached between calls; every
continuity run re-reads the root task pool and descendant sets.
"""

from sqlalchemy import Integer, literal_column, select as sa_select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from taskthread.models import Task, TaskStatus, utc_now
from taskthread.schemas import NewTask
from taskthread.logging_config import get_logger

logger = get_logger(__name__)


class TaskStore:
    """Persistence operations needed by the linker, calculator and orchestrator."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_root_tasks(self) -> list[Task]:
        """
        Fetch every task with no parent.

        Ordered by creation so that first-match title resolution is stable.
        """
        result = await self.session.execute(
            select(Task)
            .where(Task.parent_task_id.is_(None))
            .order_by(Task.created_date, Task.id)
        )
        return list(result.scalars().all())

    async def insert_task(
        self,
        task: NewTask,
        session_id: str,
        parent_task_id: str | None = None,
    ) -> str:
        """
        Store a newly linked task with status "In Progress".

        The row is committed right away: a later failure in the same batch
        does not undo tasks that were already linked.
        """
        now = utc_now()
        row = Task(
            session_id=session_id,
            title=task.title,
            description=task.description or "",
            parent_task_id=parent_task_id,
            status=TaskStatus.IN_PROGRESS.value,
            created_date=now,
            updated_date=now,
        )
        self.session.add(row)
        await self.session.commit()

        logger.debug(f"Stored task id={row.id} title='{row.title}' parent={parent_task_id}")
        return row.id

    async def get_task_and_descendants(self, task_id: str) -> list[Task]:
        """
        Fetch a task and all of its transitive descendants.

        Uses a recursive CTE over parent_task_id. The root row comes first,
        followed by descendants level by level (oldest first within a level).
        Returns an empty list when task_id does not exist.
        """
        hierarchy = (
            sa_select(Task.id.label("id"), literal_column("0", Integer).label("depth"))
            .where(Task.id == task_id)
            .cte(name="task_hierarchy", recursive=True)
        )
        hierarchy = hierarchy.union_all(
            sa_select(Task.id.label("id"), (hierarchy.c.depth + 1).label("depth"))
            .join(hierarchy, Task.parent_task_id == hierarchy.c.id)
        )

        query = (
            sa_select(Task)
            .join(hierarchy, Task.id == hierarchy.c.id)
            .order_by(hierarchy.c.depth, Task.created_date, Task.id)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_parent_tasks_for_session(self, session_id: str) -> list[Task]:
        """
        Fetch the distinct parent tasks referenced by rows of a session.

        Only rows with a parent count; a session made of new root tasks
        touches no parents.
        """
        parent_ids = (
            select(Task.parent_task_id)
            .where(Task.session_id == session_id)
            .where(Task.parent_task_id.is_not(None))
            .distinct()
        )
        result = await self.session.execute(
            select(Task)
            .where(Task.id.in_(parent_ids))
            .order_by(Task.created_date, Task.id)
        )
        return list(result.scalars().all())
