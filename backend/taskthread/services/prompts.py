"""
Prompts sent to the text-generation service.
"""

from typing import Any

from taskthread.schemas import NewTask, ProgressMetrics


def build_relationship_prompt(new_task: NewTask, candidate_titles: list[str]) -> str:
    """Ask how a new task relates to the existing root tasks (JSON answer)."""
    existing = ", ".join(f"'{title}'" for title in candidate_titles)
    return f"""
Analyze the relationship between a new task and a list of existing project tasks.
New Task: "{new_task.title}"
Description: "{new_task.description}"
Existing Tasks: [{existing}]
Is the new task a continuation of, a subtask of, or completely unrelated to any of the existing tasks?
Respond in a JSON object: {{ "relationship": "continuation" | "subtask" | "new", "parent_task_title": "The EXACT title of the parent task from the list provided, or null" }}
""".strip()


def _blocker_name(entry: Any) -> str:
    if isinstance(entry, dict):
        return str(entry.get("name", ""))
    return str(entry)


def build_analysis_prompt(metrics: ProgressMetrics) -> str:
    """Ask for a short status narrative of one task's progress."""
    blockers = ", ".join(_blocker_name(b) for b in metrics.blockers) if metrics.blockers else "None"
    help_needed = ", ".join(str(h) for h in metrics.help_needed) if metrics.help_needed else "None"

    return f"""
You are a concise project manager. Based on the following data, provide a brief analysis (3-4 sentences).
Task: "{metrics.task_title}"
Progress: {metrics.progress_percent}% complete ({metrics.subtasks_completed}/{metrics.subtasks_total} subtasks)
Velocity: {metrics.velocity} subtasks/day
Projected Completion: {metrics.estimated_completion_date}
Blockers: {blockers}
Help Needed: {help_needed}
Your analysis should cover status, velocity, projected completion, and a call to action for any blockers or help needed.
""".strip()
