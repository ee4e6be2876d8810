"""
Shared pytest fixtures for the quiz pipeline tests.
Isolates tests from external services (Gemini, YouTube, the real database).
"""

import os
import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# config.py reads these at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("GOOGLE_API_KEY", "test_google_key")
os.environ.setdefault("YOUTUBE_API_KEY", "test_youtube_key")


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, now=datetime(2026, 1, 1, 12, 0, 0)):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, delta):
        self.now = self.now + delta


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session_factory():
    """In-memory SQLite shared by every session in the test."""
    from sqlalchemy import create_engine
    from sqlalchemy.orm import sessionmaker
    from sqlalchemy.pool import StaticPool

    from db import Base
    import models  # noqa: F401

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def cache_store(session_factory, clock):
    from cache import TranscriptCacheStore

    return TranscriptCacheStore(session_factory, clock=clock)


@pytest.fixture
def sample_record():
    from schemas import ContentRecord

    return ContentRecord(
        video_id="dQw4w9WgXcQ",
        title="Python Tutorial for Beginners",
        description="Learn Python programming from scratch",
        channel_title="Test Channel",
        published_at=datetime(2024, 5, 1, 8, 30),
        duration="PT1H2M10S",
        duration_minutes=62,
        transcript="variables hold values " * 50,
    )


def make_raw_question(text, answer="A", topic="Basics", answer_field="correct_answer"):
    return {
        "question": text,
        "options": ["A) first", "B) second", "C) third", "D) fourth"],
        answer_field: answer,
        "topic": topic,
    }


@pytest.fixture
def raw_question():
    return make_raw_question


@pytest.fixture
def make_question():
    from schemas import Question

    def _make(text, question_id=None, answer="A", topic="General"):
        return Question(
            question_id=question_id,
            question=text,
            options=["one", "two", "three", "four"],
            correct_answer=answer,
            topic=topic,
        )

    return _make
