"""
Narrative analyzer: turns progress metrics into a short status summary.
"""

from taskthread.schemas import ProgressMetrics
from taskthread.services.llm import LLMClient
from taskthread.services.prompts import build_analysis_prompt

NO_DATA_MESSAGE = "No progress data available for analysis."


async def generate_task_analysis(llm: LLMClient, metrics: ProgressMetrics | None) -> str:
    """
    Generate a 3-4 sentence analysis of a task's progress.

    Missing metrics are answered locally without calling the service; failures
    of the service call propagate.
    """
    if metrics is None:
        return NO_DATA_MESSAGE

    return await llm.complete(build_analysis_prompt(metrics))
