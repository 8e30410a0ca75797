import math
from datetime import datetime, timedelta, timezone
from typing import Optional

from personalization.schemas import MemoryRecord

MIN_EASINESS = 1.3
INITIAL_EASINESS = 2.5
PASSING_QUALITY = 3
# Upper bound on the review interval
MAX_INTERVAL_DAYS = 36500


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class MemoryStrengthAlgorithm:
    """
    SM-2 style memory strength tracking for quiz questions.
    Based on SuperMemo 2 algorithm by Piotr Wozniak, extended with a
    0-1 memory strength estimate and running attempt statistics.
    """

    @staticmethod
    def quality_from_attempt(is_correct: bool, difficulty_rating: float = 3) -> float:
        """Map an attempt to the 0-5 SuperMemo quality scale"""
        if not is_correct:
            return 0
        return max(PASSING_QUALITY, 5 - difficulty_rating)

    @staticmethod
    def initialize_record(
        question_id: str,
        category: str,
        is_correct: bool,
        response_time: float,
        difficulty_rating: float = 3,
        reference_time: Optional[datetime] = None  # Optional: use custom time instead of now
    ) -> MemoryRecord:
        """
        Create the memory record for a first attempt at a question.

        Args:
            question_id: Question identifier
            category: Question category
            is_correct: Whether the first attempt was correct
            response_time: Response latency in milliseconds
            difficulty_rating: Perceived difficulty (1-5)
            reference_time: Optional reference time (defaults to now)

        Returns:
            New MemoryRecord
        """
        now = reference_time or utcnow()
        interval = 1
        return MemoryRecord(
            question_id=question_id,
            category=category,
            memory_strength=0.7 if is_correct else 0.3,
            repetitions=1,
            easiness=INITIAL_EASINESS,
            interval=interval,
            last_review_date=now,
            next_review_date=now + timedelta(days=interval),
            correct_streak=1 if is_correct else 0,
            incorrect_count=0 if is_correct else 1,
            total_attempts=1,
            average_response_time=response_time,
            difficulty_rating=difficulty_rating,
        )

    @staticmethod
    def apply_attempt(
        record: MemoryRecord,
        is_correct: bool,
        response_time: float,
        difficulty_rating: float = 3,
        reference_time: Optional[datetime] = None
    ) -> MemoryRecord:
        """
        Update an existing record in place after another attempt.

        Args:
            record: Existing memory record (mutated)
            is_correct: Whether the attempt was correct
            response_time: Response latency in milliseconds
            difficulty_rating: Perceived difficulty (1-5)
            reference_time: Optional reference time (defaults to now)

        Returns:
            The same record, updated
        """
        now = reference_time or utcnow()
        quality = MemoryStrengthAlgorithm.quality_from_attempt(is_correct, difficulty_rating)

        if quality >= PASSING_QUALITY:
            record.correct_streak += 1
            record.repetitions += 1

            # Interval uses the easiness from before this attempt
            if record.repetitions == 1:
                record.interval = 1
            elif record.repetitions == 2:
                record.interval = 6
            else:
                record.interval = min(MAX_INTERVAL_DAYS, _round_half_up(record.interval * record.easiness))

            record.easiness = max(
                MIN_EASINESS,
                record.easiness + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02))
            )
            record.memory_strength = min(1.0, record.memory_strength + 0.2 * (quality / 5))
        else:
            # Failed recall: repetitions and easiness are left as they were
            record.correct_streak = 0
            record.incorrect_count += 1
            record.interval = 1
            record.memory_strength = max(0.0, record.memory_strength - 0.3)

        record.total_attempts += 1
        n = record.total_attempts
        record.average_response_time = (record.average_response_time * (n - 1) + response_time) / n
        record.difficulty_rating = (record.difficulty_rating * (n - 1) + difficulty_rating) / n
        record.last_review_date = now
        record.next_review_date = now + timedelta(days=record.interval)

        return record

    @staticmethod
    def is_due_for_review(record: MemoryRecord, reference_time: Optional[datetime] = None) -> bool:
        """Check if a question is due by date or weak enough to revisit"""
        now = reference_time or utcnow()
        return record.next_review_date <= now or record.memory_strength < 0.5

    @staticmethod
    def get_days_overdue(record: MemoryRecord, reference_time: Optional[datetime] = None) -> float:
        """Fractional days past the scheduled review, 0 when not yet due"""
        now = reference_time or utcnow()
        return max(0.0, (now - record.next_review_date) / timedelta(days=1))
