"""
FastAPI dependencies shared by the routers.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskthread.database import get_session
from taskthread.services.llm import LLMClient, get_llm_client
from taskthread.services.task_store import TaskStore


async def get_task_store(
    session: AsyncSession = Depends(get_session),
) -> TaskStore:
    return TaskStore(session)


def get_llm() -> LLMClient:
    return get_llm_client()
