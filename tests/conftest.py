import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="applicant-tracker-tests-")
os.environ["SQLITE_PATH"] = os.path.join(_DB_DIR, "test.sqlite3")
os.environ["GEMINI_API_KEY"] = ""
os.environ["GEMINI_MODEL"] = ""
os.environ["AI_EVALUATION_ENABLED"] = "true"
os.environ["LLM_MAX_ATTEMPTS"] = "1"

import pytest

from app.settings import settings
from infra.db.session import init_db

MOTIVATION = (
    "I enjoy building products with a small team. "
    "Over the last years I shipped several React applications to production. "
    "I keep learning new tools every month and share notes with colleagues. "
    "I want to join a company where quality matters and users come first."
)

STRONG_ANSWERS = {
    "technologies": "React, TypeScript, Prisma",
    "motivation": MOTIVATION,
    "yearsExperience": 6,
}


@pytest.fixture(scope="session", autouse=True)
def _database():
    init_db()
    yield


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "test-key")
    return "test-key"


@pytest.fixture
def ai_disabled(monkeypatch):
    monkeypatch.setattr(settings, "AI_EVALUATION_ENABLED", False)


def fake_generate(replies):
    """Build a generate callable answering per model name.

    A reply that is an Exception instance is raised instead of returned.
    """
    calls = []

    async def _generate(prompt, model):
        calls.append(model)
        reply = replies[model]
        if isinstance(reply, Exception):
            raise reply
        return reply

    _generate.calls = calls
    return _generate
