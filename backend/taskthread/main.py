"""
Taskthread API: links each meeting's tasks to earlier meetings and reports
progress on the topics they continue.

Run with:
    uvicorn taskthread.main:app
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from taskthread.database import init_db
from taskthread.exceptions import register_exception_handlers
from taskthread.logging_config import setup_logging, get_logger
from taskthread.routes import sessions, tasks

API_VERSION = "0.1.0"

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the task_history table before serving requests."""
    await init_db()
    logger.info(f"Task history ready, serving {app.title} {API_VERSION}")
    yield
    logger.info("Task history API stopped")


def create_app() -> FastAPI:
    """Assemble the API: error handlers, task and session routers, health probe."""
    application = FastAPI(
        title="Taskthread",
        description="Cross-meeting task continuity: links meeting tasks and tracks their progress",
        version=API_VERSION,
        lifespan=lifespan,
    )
    register_exception_handlers(application)
    application.include_router(tasks.router, prefix="/tasks", tags=["Tasks"])
    application.include_router(sessions.router, prefix="/sessions", tags=["Sessions"])

    @application.get("/health")
    async def health_check():
        return {"status": "healthy", "version": API_VERSION}

    return application


app = create_app()
