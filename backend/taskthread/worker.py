"""
ARQ Worker for background continuity reports.

This worker handles:
- generate_continuity_job: links a session's tasks and builds its continuity report

Usage:
    arq taskthread.worker.WorkerSettings
"""

from arq import create_pool
from arq.connections import RedisSettings, ArqRedis
from arq.jobs import Job, JobStatus

from taskthread.config import get_settings
from taskthread.database import get_session_context
from taskthread.schemas import ContinuityJobRead, ContinuityReport, NewTask
from taskthread.services.continuity import generate_task_continuity
from taskthread.services.llm import get_llm_client
from taskthread.services.task_store import TaskStore
from taskthread.logging_config import setup_logging, get_logger

logger = get_logger(__name__)

settings = get_settings()


def get_redis_settings(url: str | None = None) -> RedisSettings:
    """Redis connection settings from a DSN (password, database and rediss:// included)."""
    return RedisSettings.from_dsn(url or settings.redis_url)


async def generate_continuity_job(ctx: dict, session_id: str, tasks: list[dict]) -> dict:
    """
    ARQ job: run the continuity pipeline for one session.

    Args:
        ctx: ARQ context (holds the LLM client after startup)
        session_id: Meeting session the tasks came from
        tasks: Serialized NewTask objects

    Returns:
        The continuity report, camelCase keys
    """
    llm = ctx.get("llm") or get_llm_client()
    new_tasks = [NewTask.model_validate(task) for task in tasks]

    logger.info(f"Continuity job started: session={session_id} tasks={len(new_tasks)}")
    async with get_session_context() as session:
        report = await generate_task_continuity(TaskStore(session), llm, session_id, new_tasks)

    logger.info(f"Continuity job finished: session={session_id} parents={len(report.previous_tasks)}")
    return report.model_dump(by_alias=True)


async def startup(ctx: dict) -> None:
    """Worker startup - configure logging and the LLM client."""
    setup_logging()
    logger.info("ARQ Worker starting up...")
    redis = get_redis_settings()
    logger.info(f"Redis: {redis.host}:{redis.port}/{redis.database}")
    ctx["llm"] = get_llm_client()


async def shutdown(ctx: dict) -> None:
    """Worker shutdown - cleanup."""
    logger.info("ARQ Worker shutting down...")


class WorkerSettings:
    """ARQ Worker configuration."""

    functions = [generate_continuity_job]
    on_startup = startup
    on_shutdown = shutdown
    redis_settings = get_redis_settings()
    max_jobs = 10
    job_timeout = 300  # 5 minutes max per job
    max_tries = 1  # the pipeline is not idempotent


# Redis pool for enqueuing jobs from the API
_arq_pool: ArqRedis | None = None


async def get_arq_pool() -> ArqRedis:
    """Get or create the ARQ Redis pool for enqueuing jobs."""
    global _arq_pool
    if _arq_pool is None:
        logger.debug("Creating ARQ Redis pool")
        _arq_pool = await create_pool(get_redis_settings())
    return _arq_pool


async def enqueue_continuity(session_id: str, tasks: list[NewTask]) -> str:
    """Enqueue a continuity job and return its id."""
    pool = await get_arq_pool()
    job = await pool.enqueue_job(
        "generate_continuity_job",
        session_id,
        [task.model_dump() for task in tasks],
    )
    logger.debug(f"Enqueued continuity job {job.job_id} for session={session_id}")
    return job.job_id


async def get_continuity_job(job_id: str) -> ContinuityJobRead:
    """Look up the state, and the result once finished, of a continuity job."""
    pool = await get_arq_pool()
    job = Job(job_id, redis=pool)
    status = await job.status()

    read = ContinuityJobRead(job_id=job_id, status=status.value)
    if status != JobStatus.complete:
        return read

    info = await job.result_info()
    if info is None:
        return read
    if info.success:
        read.report = ContinuityReport.model_validate(info.result)
    else:
        read.error = str(info.result)
    return read
