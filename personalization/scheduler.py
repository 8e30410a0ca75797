from datetime import datetime, timedelta
from functools import cmp_to_key
from typing import List, Optional

from personalization.memory import MemoryStrengthAlgorithm, utcnow
from personalization.schemas import MemoryRecord, ReviewSchedule

# Strength differences at or below this are treated as a tie
STRENGTH_TIE_MARGIN = 0.1


def _review_order(now: datetime):
    def compare(a: MemoryRecord, b: MemoryRecord) -> float:
        # Weakest memories first, then the most overdue
        strength_diff = a.memory_strength - b.memory_strength
        if abs(strength_diff) > STRENGTH_TIE_MARGIN:
            return strength_diff
        return (
            MemoryStrengthAlgorithm.get_days_overdue(b, now)
            - MemoryStrengthAlgorithm.get_days_overdue(a, now)
        )

    return cmp_to_key(compare)


def questions_for_review(
    records: List[MemoryRecord],
    limit: int = 10,
    reference_time: Optional[datetime] = None
) -> List[MemoryRecord]:
    """
    Rank the records that need review.

    A record qualifies when its review date has passed or its memory
    strength is below 0.5. Qualifying records are ordered weakest first,
    with near-equal strengths broken by days overdue.
    """
    now = reference_time or utcnow()
    due = [r for r in records if MemoryStrengthAlgorithm.is_due_for_review(r, now)]
    return sorted(due, key=_review_order(now))[:max(0, limit)]


def review_schedule(
    records: List[MemoryRecord],
    reference_time: Optional[datetime] = None
) -> ReviewSchedule:
    """Bucket records into today / this week / next week by review date"""
    now = reference_time or utcnow()
    tomorrow = now + timedelta(days=1)
    in_a_week = now + timedelta(days=7)
    in_two_weeks = now + timedelta(days=14)

    return ReviewSchedule(
        today=[r for r in records if r.next_review_date <= tomorrow],
        this_week=[r for r in records if tomorrow < r.next_review_date <= in_a_week],
        next_week=[r for r in records if in_a_week < r.next_review_date <= in_two_weeks],
    )
