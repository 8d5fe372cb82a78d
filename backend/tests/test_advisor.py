"""
Tests for advisor.py and config.py.
Claude is replaced by a fake client; nothing goes over the network.
"""
import pytest
import sys
import os
from types import SimpleNamespace

import anthropic
import httpx

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from advisor import Advisor, ClaudeAdvisor, build_advisor, consult, strip_code_fence
from config import Settings, BACKEND_DIR, DEFAULT_ADVISOR_MODEL, DEFAULT_ADVISOR_TIMEOUT, resolve_database_path


class FakeMessages:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.requests = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(content=[SimpleNamespace(text=self.reply)])


def fake_advisor(reply=None, error=None) -> ClaudeAdvisor:
    client = SimpleNamespace(messages=FakeMessages(reply, error))
    return ClaudeAdvisor(client, model="test-model")


def connection_error():
    return anthropic.APIConnectionError(request=httpx.Request("POST", "https://api.anthropic.com/v1/messages"))


class TestStripCodeFence:
    """Tests for markdown fence removal."""

    def test_plain_json_untouched(self):
        assert strip_code_fence('  {"a": 1}\n') == '{"a": 1}'

    def test_fenced_json(self):
        assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_unclosed_fence(self):
        assert strip_code_fence('```\n{"a": 1}') == '{"a": 1}'


class TestBaseAdvisor:
    """The no-op advisor never advises."""

    def test_all_methods_return_none(self):
        advisor = Advisor()
        assert advisor.plan_schedule([], []) is None
        assert advisor.suggest_improvements({}) is None
        assert advisor.explain_burnout({}) is None
        assert advisor.estimate_duration("x", "") is None
        assert advisor.coach([], {}) is None

    def test_consult_without_advisor(self):
        assert consult(None, "suggest_improvements", {}) is None

    def test_consult_swallows_errors(self):
        class Exploding(Advisor):
            def coach(self, tasks, stats):
                raise KeyError("boom")

        assert consult(Exploding(), "coach", [], {}) is None


class TestClaudeAdvisor:
    """Tests for reply validation in ClaudeAdvisor."""

    def test_schedule(self):
        advisor = fake_advisor('{"schedule": [{"title": "A", "start": "9:00", "end": "9:30"}]}')
        assert advisor.plan_schedule([{"title": "A"}], []) == [{"title": "A", "start": "9:00", "end": "9:30"}]

        request = advisor.client.messages.requests[0]
        assert request["model"] == "test-model"
        assert '"title": "A"' in request["messages"][0]["content"]

    def test_schedule_in_code_fence(self):
        advisor = fake_advisor('```json\n{"schedule": [{"title": "A"}]}\n```')
        assert advisor.plan_schedule([{"title": "A"}], []) == [{"title": "A"}]

    @pytest.mark.parametrize("reply", [
        '{"schedule": []}',
        '{"schedule": "9:00 do stuff"}',
        '{"schedule": ["A", "B"]}',
        '{"plan": [{"title": "A"}]}',
        '[{"title": "A"}]',
        "Here is your schedule!",
    ])
    def test_schedule_malformed(self, reply):
        assert fake_advisor(reply).plan_schedule([{"title": "A"}], []) is None

    def test_suggestions(self):
        advisor = fake_advisor('{"suggestions": ["One", "Two", "Three"]}')
        assert advisor.suggest_improvements({"score": 40}) == ["One", "Two", "Three"]

    def test_suggestions_must_be_strings(self):
        assert fake_advisor('{"suggestions": ["One", 2]}').suggest_improvements({}) is None
        assert fake_advisor('{"suggestions": "One"}').suggest_improvements({}) is None

    def test_burnout(self):
        advisor = fake_advisor('{"reasons": ["r1"], "tips": ["t1", "t2"]}')
        assert advisor.explain_burnout({"score": 80}) == (["r1"], ["t1", "t2"])

    def test_burnout_needs_both_lists(self):
        assert fake_advisor('{"reasons": ["r1"]}').explain_burnout({}) is None
        assert fake_advisor('{"tips": ["t1"]}').explain_burnout({}) is None

    def test_estimate(self):
        advisor = fake_advisor('{"minutes": 44.6, "reasoning": "Small change."}')
        assert advisor.estimate_duration("Fix typo", "") == (44.6, "Small change.")
        assert "No details" in advisor.client.messages.requests[0]["messages"][0]["content"]

    @pytest.mark.parametrize("reply", [
        '{"minutes": "45", "reasoning": "x"}',
        '{"minutes": true, "reasoning": "x"}',
        '{"minutes": 0, "reasoning": "x"}',
        '{"minutes": 45}',
    ])
    def test_estimate_malformed(self, reply):
        assert fake_advisor(reply).estimate_duration("Fix typo", "") is None

    def test_coach(self):
        advisor = fake_advisor('{"advice": "Keep going."}')
        assert advisor.coach([{"title": "A"}], {"average_time": 30, "high_priority": 0, "total": 1}) == "Keep going."

    def test_api_error(self):
        advisor = fake_advisor(error=connection_error())
        assert advisor.suggest_improvements({}) is None
        assert advisor.plan_schedule([{"title": "A"}], []) is None

    def test_timeout(self):
        error = anthropic.APITimeoutError(request=httpx.Request("POST", "https://api.anthropic.com/v1/messages"))
        assert fake_advisor(error=error).estimate_duration("x", "") is None

    def test_empty_content(self):
        client = SimpleNamespace(messages=SimpleNamespace(create=lambda **kw: SimpleNamespace(content=[])))
        assert ClaudeAdvisor(client, "m").suggest_improvements({}) is None


class TestSettings:
    """Tests for environment configuration."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        monkeypatch.delenv("TASKPULSE_ADVISOR_MODEL", raising=False)
        monkeypatch.delenv("TASKPULSE_ADVISOR_TIMEOUT", raising=False)
        monkeypatch.delenv("TASKPULSE_DATABASE_PATH", raising=False)
        settings = Settings.from_env()
        assert settings.anthropic_api_key is None
        assert settings.advisor_model == DEFAULT_ADVISOR_MODEL
        assert settings.advisor_timeout == DEFAULT_ADVISOR_TIMEOUT
        assert settings.advisor_enabled is False
        assert settings.database_file == os.path.join(BACKEND_DIR, "taskpulse.db")

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
        monkeypatch.setenv("TASKPULSE_ADVISOR_MODEL", "claude-haiku-4-5")
        monkeypatch.setenv("TASKPULSE_ADVISOR_TIMEOUT", "3.5")
        settings = Settings.from_env()
        assert settings.advisor_enabled is True
        assert settings.advisor_model == "claude-haiku-4-5"
        assert settings.advisor_timeout == 3.5

    def test_bad_timeout_uses_default(self, monkeypatch):
        monkeypatch.setenv("TASKPULSE_ADVISOR_TIMEOUT", "soon")
        assert Settings.from_env().advisor_timeout == DEFAULT_ADVISOR_TIMEOUT

    def test_placeholder_key_disables_advisor(self):
        assert Settings(anthropic_api_key="your-api-key-here").advisor_enabled is False
        assert Settings(anthropic_api_key="  ").advisor_enabled is False

    def test_relative_database_path_is_anchored_at_backend(self, monkeypatch):
        monkeypatch.setenv("TASKPULSE_DATABASE_PATH", "data/tasks.db")
        settings = Settings.from_env()
        assert settings.database_file == os.path.join(BACKEND_DIR, "data", "tasks.db")
        assert settings.database_url == "sqlite:///" + settings.database_file

    def test_absolute_database_path_kept(self, tmp_path):
        path = str(tmp_path / "tasks.db")
        assert resolve_database_path(path) == path
        assert Settings(database_path=path).database_url == f"sqlite:///{path}"

    def test_store_uses_configured_file(self):
        import database
        assert database.DATABASE_PATH == Settings.from_env().database_file


class TestBuildAdvisor:
    """Tests for advisor selection."""

    def test_without_key(self):
        advisor = build_advisor(Settings())
        assert type(advisor) is Advisor

    def test_with_key(self):
        advisor = build_advisor(Settings(anthropic_api_key="sk-test", advisor_model="m", advisor_timeout=2.0))
        assert isinstance(advisor, ClaudeAdvisor)
        assert advisor.model == "m"
        assert advisor.client.max_retries == 0
