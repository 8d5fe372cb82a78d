"""
Daily time-block scheduling.

Pending leaf tasks are ranked by priority and laid out back-to-back from 9:00.
The advisor may supply the whole schedule; otherwise durations come from
estimate_task_minutes.
"""
import logging
from typing import Optional

from advisor import Advisor, consult
from models import Task, ScheduleItem, STATUS_TODO, PRIORITY_HIGH, PRIORITY_LOW, PRIORITY_MEDIUM

logger = logging.getLogger(__name__)

PRIORITY_WEIGHT = {PRIORITY_HIGH: 3, PRIORITY_MEDIUM: 2, PRIORITY_LOW: 1}

DAY_START_MINUTES = 9 * 60
MIN_TASK_MINUTES = 15
MAX_TASK_MINUTES = 240


def leaf_tasks(tasks: list[Task]) -> list[Task]:
    """
    Drop container tasks: those that are the parent of another task in the same list.
    Children outside the list (e.g. already done) do not count.
    """
    parent_ids = {task.parent_id for task in tasks if task.parent_id}
    return [task for task in tasks if task.id not in parent_ids]


def priority_weight(priority: Optional[str]) -> int:
    return PRIORITY_WEIGHT.get(priority or PRIORITY_MEDIUM, 0)


def rank_by_priority(tasks: list[Task]) -> list[Task]:
    """Highest priority first; sorted() is stable so ties keep input order."""
    return sorted(tasks, key=lambda task: priority_weight(task.priority), reverse=True)


def estimate_task_minutes(priority: Optional[str], title: str) -> int:
    """Rule-of-thumb duration from priority and title keywords, clamped to 15-240."""
    if priority == PRIORITY_HIGH:
        duration = 90
    elif priority == PRIORITY_LOW:
        duration = 30
    else:
        duration = 60

    title = (title or "").lower()
    if "meeting" in title:
        duration = 30
    elif "bug" in title:
        duration += 30
    elif "build" in title:
        duration += 60

    return min(max(duration, MIN_TASK_MINUTES), MAX_TASK_MINUTES)


def format_clock(total_minutes: int) -> str:
    """Minutes since midnight as H:MM. No day rollover: 25:15 stays 25:15."""
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}:{minutes:02d}"


def static_schedule(ranked: list[Task]) -> list[dict]:
    """Lay ranked tasks out back-to-back from the start of the day."""
    schedule = []
    elapsed = 0
    for task in ranked:
        duration = estimate_task_minutes(task.priority, task.title)
        start = DAY_START_MINUTES + elapsed
        item = ScheduleItem(
            title=task.title,
            priority=task.priority or PRIORITY_MEDIUM,
            description=task.description or "",
            start=format_clock(start),
            end=format_clock(start + duration),
            duration_minutes=duration,
            reasoning=f"Allocated {duration} minutes based on complexity and priority (Static Fallback).",
        )
        schedule.append(item.model_dump())
        elapsed += duration
    return schedule


def build_schedule(
    pending_tasks: list[Task],
    completed_sample: Optional[list[Task]] = None,
    advisor: Optional[Advisor] = None,
) -> list[dict]:
    """
    Build today's schedule for a user's pending tasks.

    Returns the advisor's schedule verbatim when it gives one, otherwise the
    static back-to-back layout. An empty list means nothing to schedule.
    """
    candidates = [t for t in pending_tasks if t.status == STATUS_TODO and not t.is_deleted]
    ranked = rank_by_priority(leaf_tasks(candidates))
    if not ranked:
        return []

    if advisor is not None:
        task_data = [
            {
                "title": t.title,
                "priority": t.priority or PRIORITY_MEDIUM,
                "description": t.description or "",
            }
            for t in ranked
        ]
        history = [
            {"title": t.title, "time_spent": t.total_time_spent}
            for t in (completed_sample or [])
        ]
        schedule = consult(advisor, "plan_schedule", task_data, history)
        if schedule:
            return schedule

    logger.info("Using static schedule for %d tasks", len(ranked))
    return static_schedule(ranked)
