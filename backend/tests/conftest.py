"""
Pytest configuration and fixtures for Taskthread tests.
"""

import json
from datetime import datetime

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.pool import StaticPool
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlmodel import SQLModel

from taskthread.main import app
from taskthread.database import get_session
from taskthread.dependencies import get_llm
from taskthread.exceptions import UpstreamCallError
from taskthread.models import Task, utc_now
from taskthread.services.task_store import TaskStore


# In-memory SQLite shared across connections of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite://"


class FakeLLM:
    """
    Scripted stand-in for LLMClient.

    JSON calls pop the next entry of json_responses (a dict is serialized, a
    string is returned verbatim, an exception is raised). Text calls return
    text_response, or raise if text_error is set.
    """

    def __init__(self, json_responses=None, text_response="Analysis.", text_error=None):
        self.json_responses = list(json_responses or [])
        self.text_response = text_response
        self.text_error = text_error
        self.calls: list[tuple[str, bool]] = []

    async def complete(self, prompt: str, *, json_output: bool = False) -> str:
        self.calls.append((prompt, json_output))
        if json_output:
            if not self.json_responses:
                raise UpstreamCallError("No scripted JSON response left")
            response = self.json_responses.pop(0)
            if isinstance(response, Exception):
                raise response
            if isinstance(response, str):
                return response
            return json.dumps(response)
        if self.text_error is not None:
            raise self.text_error
        return self.text_response

    @property
    def json_calls(self) -> list[str]:
        return [prompt for prompt, json_output in self.calls if json_output]

    @property
    def text_calls(self) -> list[str]:
        return [prompt for prompt, json_output in self.calls if not json_output]


def make_task(
    title: str,
    session_id: str = "S1",
    parent: Task | None = None,
    status: str = "In Progress",
    created_date: datetime | None = None,
    blockers=None,
    help_needed=None,
) -> Task:
    """Build an unsaved Task row; list-valued blockers/help_needed are JSON-encoded."""
    return Task(
        session_id=session_id,
        title=title,
        parent_task_id=parent.id if parent else None,
        status=status,
        created_date=created_date or utc_now(),
        updated_date=created_date or utc_now(),
        blockers=json.dumps(blockers) if blockers is not None else None,
        help_needed=json.dumps(help_needed) if help_needed is not None else None,
    )


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine):
    """Create a test database session."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def store(test_session):
    return TaskStore(test_session)


@pytest_asyncio.fixture(scope="function")
async def add_tasks(test_session):
    """Persist prebuilt Task rows in the given order."""

    async def _add(*tasks: Task) -> list[Task]:
        for task in tasks:
            test_session.add(task)
            await test_session.flush()
        await test_session.commit()
        return list(tasks)

    return _add


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest_asyncio.fixture(scope="function")
async def client(test_engine, fake_llm):
    """Create an async test client with test database and scripted LLM."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async def override_get_session():
        async with async_session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_llm] = lambda: fake_llm

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
