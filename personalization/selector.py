import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from personalization.scheduler import questions_for_review
from personalization.schemas import MemoryRecord, PersonalizedConfig, SessionSelection
from personalization.stats import learning_efficiency, performance_stats, recommend_difficulty

REVIEW_SHARE = 0.6
NEW_SHARE = 0.4


def select_questions(
    records: List[MemoryRecord],
    config: PersonalizedConfig,
    available_questions: List[Dict[str, Any]],
    session_length: int = 10,
    reference_time: Optional[datetime] = None
) -> SessionSelection:
    """
    Build a session question list from due reviews and unseen questions.

    Args:
        records: All memory records for the user
        config: The user's quiz config (category allow-list)
        available_questions: Question dicts with at least "id" and "category"
        session_length: Maximum number of questions in the session
        reference_time: Optional reference time (defaults to now)

    Returns:
        SessionSelection with the combined list, its two sources,
        a recommended difficulty and the learning efficiency score
    """
    review = questions_for_review(
        records, math.floor(session_length * REVIEW_SHARE), reference_time
    )

    # Unseen questions come from the whole pool, category allow-list or not
    attempted_ids = {r.question_id for r in records}
    new_questions = [
        q for q in available_questions if q.get("id") not in attempted_ids
    ][:max(0, math.ceil(session_length * NEW_SHARE))]

    stats = performance_stats(records)

    pool = available_questions
    if config.categories:
        pool = [q for q in available_questions if q.get("category") in config.categories]

    review_ids = {r.question_id for r in review}
    questions = [q for q in pool if q.get("id") in review_ids] + new_questions

    return SessionSelection(
        questions=questions[:max(0, session_length)],
        review_questions=review,
        new_questions=new_questions,
        recommended_difficulty=recommend_difficulty(stats.average_accuracy),
        learning_efficiency=learning_efficiency(records, stats),
    )
