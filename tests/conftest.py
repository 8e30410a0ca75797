from datetime import datetime, timedelta, timezone

import pytest

from personalization.engine import PersonalizationEngine
from personalization.schemas import MemoryRecord
from personalization.store import MemoryStore

NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock for deterministic scheduling"""

    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


def make_record(question_id, category="finance", memory_strength=0.6, days_until_review=1,
                repetitions=1, total_attempts=1, incorrect_count=0, now=NOW, **overrides):
    """Build a MemoryRecord with a review date relative to now"""
    fields = dict(
        question_id=question_id,
        category=category,
        memory_strength=memory_strength,
        repetitions=repetitions,
        easiness=2.5,
        interval=1,
        last_review_date=now - timedelta(days=1),
        next_review_date=now + timedelta(days=days_until_review),
        total_attempts=total_attempts,
        incorrect_count=incorrect_count,
        correct_streak=total_attempts - incorrect_count,
        average_response_time=1500.0,
    )
    fields.update(overrides)
    return MemoryRecord(**fields)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def engine(store, clock):
    return PersonalizationEngine(store, clock=clock)
