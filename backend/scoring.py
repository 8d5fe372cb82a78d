"""
Productivity and burnout scores.

Both scores are additive tier models over a snapshot of a user's root tasks.
The advisor only contributes the text lists; scores and metrics are always
computed here.
"""
import logging
import math
from datetime import datetime
from typing import Optional

from advisor import Advisor, consult
from models import (
    Task,
    ProductivityMetrics,
    ProductivityScore,
    BurnoutMetrics,
    BurnoutScore,
    STATUS_TODO,
    STATUS_IN_PROGRESS,
    STATUS_DONE,
    PRIORITY_HIGH,
)

logger = logging.getLogger(__name__)

TREND_WINDOW_DAYS = 7
MAX_LOAD_RATIO = 5

DEFAULT_SUGGESTIONS = [
    "Break down large tasks into smaller subtasks (15-30 mins each).",
    "Focus on completing High-priority tasks during your peak energy hours.",
    "Minimize context switching by batching similar tasks together.",
]

DEFAULT_BURNOUT_REASONS = [
    "High volume of pending work.",
    "Multiple high-priority deadlines.",
    "Steady task accumulation.",
]

DEFAULT_RECOVERY_TIPS = [
    "Start with a single easy win to build momentum.",
    "Decline or delegate non-essential meetings.",
    "Take a strict 15-minute break every 2 hours.",
]


def round_half_up(value: float) -> int:
    """Round .5 away from zero for the non-negative values used in scoring."""
    return int(math.floor(value + 0.5))


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a stored ISO timestamp into naive local time; None if missing or malformed."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _time_spent(task: Task) -> int:
    return task.total_time_spent or 0


def _recent_count(tasks: list[Task], now: datetime) -> int:
    count = 0
    for task in tasks:
        updated = parse_timestamp(task.updated_at)
        if updated is None:
            continue
        days = math.floor((now - updated).total_seconds() / 86400)
        if days <= TREND_WINDOW_DAYS:
            count += 1
    return count


# Productivity

def efficiency_points(average_time: int) -> int:
    if average_time < 60:
        return 30
    if average_time < 90:
        return 20
    return 10


def score_productivity(
    completed_tasks: list[Task],
    total_root_tasks: int,
    advisor: Optional[Advisor] = None,
    now: Optional[datetime] = None,
) -> ProductivityScore:
    """
    Score recent output on a 0-100 scale.

    completed_tasks should be the user's most recent (at most 30) completed
    root tasks; total_root_tasks is the count of all their root tasks.
    """
    completed_tasks = [t for t in completed_tasks if not t.is_deleted]
    if not completed_tasks:
        return ProductivityScore(score=0, metrics=ProductivityMetrics(), suggestions=[])

    now = now or datetime.now()
    total_completed = len(completed_tasks)
    completion_rate = round_half_up(total_completed / max(total_root_tasks, 1) * 100)
    average_time = round_half_up(sum(_time_spent(t) for t in completed_tasks) / total_completed)
    high_priority_completed = sum(1 for t in completed_tasks if t.priority == PRIORITY_HIGH)

    completion_points = min(completion_rate, 50)
    priority_points = 20 if high_priority_completed > 0 else 0
    score = min(completion_points + efficiency_points(average_time) + priority_points, 100)

    trend = "Improving" if _recent_count(completed_tasks, now) > total_completed / 4 else "Needs focus"

    metrics = ProductivityMetrics(
        tasks_completed=total_completed,
        completion_rate=completion_rate,
        average_time_per_task=average_time,
        high_priority_completed=high_priority_completed,
        trend=trend,
    )

    suggestions = consult(advisor, "suggest_improvements", {"score": score, **metrics.model_dump()})
    if suggestions is None:
        suggestions = list(DEFAULT_SUGGESTIONS)

    return ProductivityScore(score=score, metrics=metrics, suggestions=suggestions)


# Burnout

def workload_points(load_ratio: float) -> int:
    if load_ratio > 4:
        return 40
    if load_ratio > 3:
        return 30
    if load_ratio > 2:
        return 20
    if load_ratio > 1:
        return 10
    return 0


def priority_overload_points(high_priority_todo: int) -> int:
    if high_priority_todo > 5:
        return 30
    if high_priority_todo > 3:
        return 20
    if high_priority_todo > 1:
        return 10
    return 0


def time_pressure_points(average_time_spent: int) -> int:
    if average_time_spent > 120:
        return 20
    if average_time_spent > 90:
        return 10
    return 0


def active_load_points(in_progress_count: int) -> int:
    return 10 if in_progress_count > 3 else 0


def burnout_level(score: int) -> str:
    if score > 70:
        return "Critical"
    if score > 50:
        return "High"
    if score > 30:
        return "Moderate"
    return "Healthy"


def score_burnout(root_tasks: list[Task], advisor: Optional[Advisor] = None) -> BurnoutScore:
    """Score burnout risk (0-100, higher is worse) from the current workload mix."""
    root_tasks = [t for t in root_tasks if not t.is_deleted]
    todo = [t for t in root_tasks if t.status == STATUS_TODO]
    in_progress = [t for t in root_tasks if t.status == STATUS_IN_PROGRESS]
    done = [t for t in root_tasks if t.status == STATUS_DONE]

    unfinished = len(todo) + len(in_progress)
    load_ratio = min(unfinished / max(len(done), 1), MAX_LOAD_RATIO)
    high_priority_todo = sum(1 for t in todo if t.priority == PRIORITY_HIGH)
    average_time = round_half_up(sum(_time_spent(t) for t in done) / len(done)) if done else 0

    score = (
        workload_points(load_ratio)
        + priority_overload_points(high_priority_todo)
        + time_pressure_points(average_time)
        + active_load_points(len(in_progress))
    )
    score = max(0, min(score, 100))
    level = burnout_level(score)

    insight = consult(advisor, "explain_burnout", {
        "score": score,
        "level": level,
        "todo_count": len(todo),
        "high_priority_todo": high_priority_todo,
        "in_progress_count": len(in_progress),
        "load_ratio": round(load_ratio, 2),
    })
    if insight is None:
        reasons, tips = list(DEFAULT_BURNOUT_REASONS), list(DEFAULT_RECOVERY_TIPS)
    else:
        reasons, tips = insight

    metrics = BurnoutMetrics(
        unfinished_tasks=unfinished,
        high_priority_unfinished=high_priority_todo,
        in_progress_count=len(in_progress),
        task_load_ratio=round(load_ratio, 2),
        average_time_per_task=average_time,
        recommendation=(
            "Action required to prevent total burnout" if score > 50
            else "Sustainable work patterns detected"
        ),
    )
    return BurnoutScore(score=score, level=level, metrics=metrics, reasons=reasons, recovery_tips=tips)
