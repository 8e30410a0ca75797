import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from personalization.memory import MemoryStrengthAlgorithm, utcnow
from personalization.scheduler import questions_for_review, review_schedule
from personalization.schemas import (
    LearningEfficiencyMetrics,
    MemoryRecord,
    PerformanceStats,
    PersonalizedConfig,
    ReviewSchedule,
    SessionSelection,
)
from personalization.selector import select_questions
from personalization.session_metrics import apply_session
from personalization.stats import learning_efficiency, performance_stats
from personalization.store import BaseStore, get_store

logger = logging.getLogger(__name__)


class PersonalizationEngine:
    """
    Spaced repetition and personalization for quiz sessions.

    Each operation loads the user's data from the store, computes in memory
    and, when it changes anything, writes the whole collection back.
    """

    def __init__(self, store: BaseStore = None, clock: Callable[[], datetime] = utcnow):
        self.store = store if store is not None else get_store()
        self.clock = clock

    def update_memory(
        self,
        user_id: str,
        question_id: str,
        category: str,
        is_correct: bool,
        response_time_ms: float,
        difficulty_rating: float = 3
    ) -> MemoryRecord:
        """Record a quiz attempt and return the updated memory record"""
        records = self.store.load_records(user_id)
        now = self.clock()

        record = next((r for r in records if r.question_id == question_id), None)
        if record is None:
            record = MemoryStrengthAlgorithm.initialize_record(
                question_id, category, is_correct, response_time_ms,
                difficulty_rating, reference_time=now
            )
            records.append(record)
        else:
            MemoryStrengthAlgorithm.apply_attempt(
                record, is_correct, response_time_ms,
                difficulty_rating, reference_time=now
            )

        logger.debug(
            "User %s answered %s (%s): strength=%.2f interval=%d",
            user_id, question_id, "correct" if is_correct else "incorrect",
            record.memory_strength, record.interval
        )
        self.store.save_records(user_id, records)
        return record

    def questions_for_review(self, user_id: str, limit: int = 10) -> List[MemoryRecord]:
        return questions_for_review(self.store.load_records(user_id), limit, self.clock())

    def review_schedule(self, user_id: str) -> ReviewSchedule:
        return review_schedule(self.store.load_records(user_id), self.clock())

    def select_questions(
        self,
        user_id: str,
        available_questions: List[Dict[str, Any]],
        session_length: int = 10
    ) -> SessionSelection:
        """Recommend the questions for the user's next session"""
        return select_questions(
            self.store.load_records(user_id),
            self.store.load_config(user_id),
            available_questions,
            session_length,
            self.clock(),
        )

    def performance_stats(self, user_id: str) -> PerformanceStats:
        return performance_stats(self.store.load_records(user_id))

    def learning_efficiency(self, user_id: str, stats: Optional[PerformanceStats] = None) -> float:
        return learning_efficiency(self.store.load_records(user_id), stats)

    def record_session(
        self,
        user_id: str,
        duration_ms: float,
        questions_answered: int,
        accuracy: float,
        time_of_day: str
    ) -> LearningEfficiencyMetrics:
        """Update the user's efficiency metrics after a finished session"""
        metrics = apply_session(
            self.store.load_metrics(user_id),
            duration_ms, questions_answered, accuracy, time_of_day
        )
        logger.debug(
            "Session for %s: velocity=%.2f optimal_length=%d",
            user_id, metrics.learning_velocity, metrics.optimal_session_length
        )
        self.store.save_metrics(metrics)
        return metrics

    def get_config(self, user_id: str) -> PersonalizedConfig:
        return self.store.load_config(user_id)

    def save_config(self, config: PersonalizedConfig) -> bool:
        return self.store.save_config(config)

    def get_metrics(self, user_id: str) -> LearningEfficiencyMetrics:
        return self.store.load_metrics(user_id)

    def save_metrics(self, metrics: LearningEfficiencyMetrics) -> bool:
        return self.store.save_metrics(metrics)
