"""
Tests for coaching.py.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from advisor import Advisor
from coaching import coach, NO_HISTORY_ADVICE


class CoachingAdvisor(Advisor):
    def __init__(self, advice):
        self.advice = advice
        self.stats = None

    def coach(self, tasks, stats):
        self.stats = stats
        return self.advice


class TestCoach:
    """Tests for coaching advice."""

    def test_no_history(self):
        assert coach([]) == NO_HISTORY_ADVICE

    def test_balanced_history(self, make_task):
        tasks = [make_task("Write tests", status="Done", total_time_spent=40) for _ in range(3)]
        advice = coach(tasks)
        assert advice.startswith("Based on your task completion patterns:")
        assert "Great job completing 3 tasks!" in advice
        assert "breaking larger tasks" not in advice
        assert "lower-priority" not in advice

    def test_long_tasks(self, make_task):
        tasks = [make_task("Migrate db", status="Done", total_time_spent=150)]
        assert "average of 150 minutes" in coach(tasks)

    def test_mostly_high_priority(self, make_task):
        tasks = [
            make_task("a", status="Done", priority="High"),
            make_task("b", status="Done", priority="High"),
            make_task("c", status="Done", priority="Low"),
        ]
        assert "lower-priority items" in coach(tasks)

    def test_advisor_advice(self, make_task):
        advisor = CoachingAdvisor("Keep shipping.")
        tasks = [make_task("a", status="Done", priority="High", total_time_spent=61)]
        assert coach(tasks, advisor) == "Keep shipping."
        assert advisor.stats == {"average_time": 61, "high_priority": 1, "total": 1}

    def test_advisor_declines(self, make_task):
        tasks = [make_task("a", status="Done")]
        assert "Great job completing 1 tasks!" in coach(tasks, CoachingAdvisor(None))
