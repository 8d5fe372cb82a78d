"""
Duration estimates for new tasks.

Order of preference: the user's own history for similar tasks, then the
advisor, then keyword rules.
"""
import logging
import re
from typing import Optional

from advisor import Advisor, consult
from models import Task, Estimate, STATUS_DONE
from scoring import round_half_up

logger = logging.getLogger(__name__)

MAX_SIMILAR_TASKS = 10
MIN_SIMILAR_TASKS = 3
FALLBACK_MINUTES = 30


def find_similar_tasks(title: str, history: list[Task], limit: int = MAX_SIMILAR_TASKS) -> list[Task]:
    """
    Completed tasks whose title contains the first word of `title`.
    The word is matched literally and case-insensitively; only tasks with recorded time count.
    """
    words = title.split()
    if not words:
        return []
    pattern = re.compile(re.escape(words[0]), re.IGNORECASE)

    matches = []
    for task in history:
        if task.status != STATUS_DONE or task.is_deleted:
            continue
        if (task.total_time_spent or 0) <= 0:
            continue
        if pattern.search(task.title or ""):
            matches.append(task)
            if len(matches) >= limit:
                break
    return matches


def keyword_estimate(title: str) -> int:
    """Keyword rules for tasks with no history; later rules win."""
    title = title.lower()
    minutes = FALLBACK_MINUTES
    if "project" in title or "build" in title:
        minutes = 120
    if "meeting" in title:
        minutes = 60
    if "email" in title or "call" in title:
        minutes = 15
    return minutes


def estimate_duration(
    title: Optional[str],
    description: Optional[str] = None,
    history: Optional[list[Task]] = None,
    advisor: Optional[Advisor] = None,
) -> Estimate:
    """
    Estimate how long a task will take, in minutes.
    Raises ValueError when the title is missing; everything else degrades to a fallback.
    """
    if not title or not title.strip():
        raise ValueError("Task title is required")

    similar = find_similar_tasks(title, history or [])
    if len(similar) >= MIN_SIMILAR_TASKS:
        total = sum(t.total_time_spent for t in similar)
        return Estimate(
            minutes=round_half_up(total / len(similar)),
            source="history",
            reasoning=f"Based on {len(similar)} similar tasks you've completed.",
        )

    advice = consult(advisor, "estimate_duration", title, description or "")
    if advice is not None:
        minutes, reasoning = advice
        return Estimate(minutes=round_half_up(minutes), source="ai", reasoning=reasoning)

    logger.debug("No history or advice for %r; using keyword rules", title)
    return Estimate(minutes=keyword_estimate(title), source="fallback", reasoning="Keyword-based fallback.")
