"""
Optional advisory model.

The base Advisor gives no advice; every engine function then uses its own
deterministic logic. ClaudeAdvisor asks Claude first and returns None whenever
the call or the reply is not usable, so callers only ever see advice or None.
"""
import json
import logging
from typing import Optional

import anthropic

from config import Settings
from prompts import (
    SCHEDULE_PROMPT,
    SUGGESTIONS_PROMPT,
    BURNOUT_PROMPT,
    ESTIMATE_PROMPT,
    COACH_PROMPT,
)

logger = logging.getLogger(__name__)


class Advisor:
    """No-op advisor, used when no API key is configured."""

    def plan_schedule(self, tasks: list[dict], history: list[dict]) -> Optional[list[dict]]:
        return None

    def suggest_improvements(self, metrics: dict) -> Optional[list[str]]:
        return None

    def explain_burnout(self, metrics: dict) -> Optional[tuple[list[str], list[str]]]:
        return None

    def estimate_duration(self, title: str, description: str) -> Optional[tuple[float, str]]:
        return None

    def coach(self, tasks: list[dict], stats: dict) -> Optional[str]:
        return None


def consult(advisor: Optional[Advisor], method: str, *args):
    """
    Call one advisor method and return its advice, or None.
    Errors from any advisor implementation are logged here and never reach the engine.
    """
    if advisor is None:
        return None
    try:
        return getattr(advisor, method)(*args)
    except Exception as e:  # noqa: BLE001
        logger.warning("Advisor %s raised %s: %s", method, type(e).__name__, e)
        return None


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json ... ``` block if present."""
    text = text.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        lines = lines[1:]  # Remove first line (```json)
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        text = "\n".join(lines)
    return text


def _is_string_list(value) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


class ClaudeAdvisor(Advisor):
    """Advisor backed by the Anthropic Messages API."""

    def __init__(self, client, model: str, max_tokens: int = 1024):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    def _ask(self, prompt: str, purpose: str) -> Optional[dict]:
        """Send one prompt and return the parsed JSON object, or None."""
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
            text = response.content[0].text
        except anthropic.APIError as e:
            logger.warning("Advisor %s request failed: %s", purpose, e)
            return None
        except (IndexError, AttributeError) as e:
            logger.warning("Advisor %s returned no text content: %s", purpose, e)
            return None

        try:
            parsed = json.loads(strip_code_fence(text))
        except json.JSONDecodeError:
            logger.warning("Advisor %s returned invalid JSON: %r", purpose, text[:200])
            return None

        if not isinstance(parsed, dict):
            logger.warning("Advisor %s returned %s instead of an object", purpose, type(parsed).__name__)
            return None
        return parsed

    def plan_schedule(self, tasks, history):
        prompt = SCHEDULE_PROMPT.format(
            tasks=json.dumps(tasks, indent=2),
            history=json.dumps(history, indent=2) if history else "None",
        )
        parsed = self._ask(prompt, "schedule")
        if parsed is None:
            return None
        schedule = parsed.get("schedule")
        if not isinstance(schedule, list) or not schedule or not all(isinstance(i, dict) for i in schedule):
            logger.warning("Advisor schedule missing or malformed")
            return None
        logger.info("Advisor produced a %d item schedule", len(schedule))
        return schedule

    def suggest_improvements(self, metrics):
        parsed = self._ask(SUGGESTIONS_PROMPT.format(metrics=json.dumps(metrics)), "suggestions")
        if parsed is None:
            return None
        suggestions = parsed.get("suggestions")
        if not _is_string_list(suggestions):
            logger.warning("Advisor suggestions missing or not a list of strings")
            return None
        return suggestions

    def explain_burnout(self, metrics):
        parsed = self._ask(BURNOUT_PROMPT.format(metrics=json.dumps(metrics)), "burnout")
        if parsed is None:
            return None
        reasons = parsed.get("reasons")
        tips = parsed.get("tips")
        if not _is_string_list(reasons) or not _is_string_list(tips):
            logger.warning("Advisor burnout analysis needs both reasons and tips")
            return None
        return reasons, tips

    def estimate_duration(self, title, description):
        prompt = ESTIMATE_PROMPT.format(title=title, description=description or "No details")
        parsed = self._ask(prompt, "estimate")
        if parsed is None:
            return None
        minutes = parsed.get("minutes")
        reasoning = parsed.get("reasoning")
        # bool is an int subclass; reject it explicitly
        if isinstance(minutes, bool) or not isinstance(minutes, (int, float)) or minutes <= 0:
            logger.warning("Advisor estimate has no usable minutes: %r", minutes)
            return None
        if not isinstance(reasoning, str):
            logger.warning("Advisor estimate has no reasoning")
            return None
        return minutes, reasoning

    def coach(self, tasks, stats):
        prompt = COACH_PROMPT.format(
            tasks=json.dumps(tasks),
            average_time=stats["average_time"],
            high_priority=stats["high_priority"],
            total=stats["total"],
        )
        parsed = self._ask(prompt, "coach")
        if parsed is None:
            return None
        advice = parsed.get("advice")
        if not isinstance(advice, str) or not advice.strip():
            logger.warning("Advisor coaching advice missing")
            return None
        return advice


def build_advisor(settings: Settings) -> Advisor:
    """Return a Claude-backed advisor when a key is configured, else the no-op one."""
    if not settings.advisor_enabled:
        logger.info("ANTHROPIC_API_KEY not configured; using deterministic analytics only")
        return Advisor()
    client = anthropic.Anthropic(
        api_key=settings.anthropic_api_key,
        timeout=settings.advisor_timeout,
        max_retries=0,
    )
    return ClaudeAdvisor(client, settings.advisor_model)
