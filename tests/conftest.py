"""
Pytest fixtures shared across the suite
"""
import json
from types import SimpleNamespace

import pytest

from eduko.config import Settings


class FakeMessages:
    """Stands in for ``Anthropic().messages``; replays canned replies in order."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if not isinstance(reply, str):
            reply = json.dumps(reply)
        return SimpleNamespace(content=[SimpleNamespace(type="text", text=reply)])


class FakeClient:
    def __init__(self, *replies):
        self.messages = FakeMessages(replies)

    @property
    def last_prompt(self) -> str:
        return self.messages.calls[-1]["messages"][-1]["content"]


@pytest.fixture
def fake_client():
    return FakeClient


@pytest.fixture
def settings():
    return Settings(api_key=None, model="test-model", max_tokens=500)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "ANTHROPIC_API_KEY",
        "EDUKO_MODEL",
        "EDUKO_MAX_TOKENS",
        "EDUKO_TEMPERATURE",
        "EDUKO_HOST",
        "PORT",
        "EDUKO_MAX_PEERS_PER_SESSION",
        "EDUKO_LOG_LEVEL",
        "EDUKO_RUNS_DIR",
    ):
        monkeypatch.delenv(name, raising=False)


TIMETABLE_INPUT = {
    "subjects": "Math, Physics, Chemistry",
    "weakAreas": "Organic chemistry",
    "strongAreas": "Algebra",
    "studyHours": 4,
    "examDates": "Math 2026-11-20",
    "lifestyleSchedule": "School 8-2, football on Tuesdays",
}

TIMETABLE_OUTPUT = {
    "weeklyTimetable": "Mon: Math 4-5pm, Chemistry 5-6pm",
    "warnings": "Tuesday is light because of football.",
}

TUTOR_OUTPUT = {
    "explanation": "Integrate x^2 by raising the power and dividing.",
    "steps": ["Raise the power to 3", "Divide by 3", "Add C"],
    "quiz": {
        "question": "What is the integral of x?",
        "options": ["x", "x^2/2 + C", "2x", "1"],
        "answer": "x^2/2 + C",
        "explain_answer": "Raise the power by one and divide.",
    },
    "actions": [{"type": "animate", "name": "write_board"}],
    "difficulty": "medium",
}
