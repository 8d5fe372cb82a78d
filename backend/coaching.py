import logging
from typing import Optional

from advisor import Advisor, consult
from models import Task, PRIORITY_HIGH
from scoring import round_half_up

logger = logging.getLogger(__name__)

NO_HISTORY_ADVICE = "Complete some tasks to get personalized coaching advice!"


def coach(completed_tasks: list[Task], advisor: Optional[Advisor] = None) -> str:
    """Coaching advice from the user's recently completed tasks (at most 30)."""
    if not completed_tasks:
        return NO_HISTORY_ADVICE

    total = len(completed_tasks)
    average_time = sum(t.total_time_spent or 0 for t in completed_tasks) / total
    high_priority = sum(1 for t in completed_tasks if t.priority == PRIORITY_HIGH)

    summary = [
        {"title": t.title, "priority": t.priority, "time_spent": t.total_time_spent}
        for t in completed_tasks
    ]
    stats = {"average_time": round_half_up(average_time), "high_priority": high_priority, "total": total}
    advice = consult(advisor, "coach", summary, stats)
    if advice is not None:
        return advice

    lines = ["Based on your task completion patterns:"]
    if average_time > 120:
        lines.append(
            f"Your tasks take an average of {round_half_up(average_time)} minutes. "
            "Consider breaking larger tasks into smaller subtasks for better focus."
        )
    if high_priority > total * 0.5:
        lines.append(
            "You're completing a lot of high-priority tasks. "
            "Make sure to schedule some lower-priority items to maintain balance."
        )
    lines.append(f"Great job completing {total} tasks! Keep up the momentum!")
    return "\n\n".join(lines)
