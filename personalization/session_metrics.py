import logging

from personalization.schemas import LearningEfficiencyMetrics

logger = logging.getLogger(__name__)

MIN_SESSION_LENGTH = 5
MAX_SESSION_LENGTH = 20


def apply_session(
    metrics: LearningEfficiencyMetrics,
    duration_ms: float,
    questions_answered: int,
    accuracy: float,
    time_of_day: str
) -> LearningEfficiencyMetrics:
    """
    Fold one finished session into the user's efficiency metrics.

    Velocity is averaged with the previous value. The optimal session
    length grows after accurate sessions and shrinks after poor ones.
    time_of_day is accepted but best_time_of_day is not derived from it yet.
    """
    if duration_ms > 0:
        velocity_this_session = questions_answered / (duration_ms / 60000)
        metrics.learning_velocity = (metrics.learning_velocity + velocity_this_session) / 2
    else:
        logger.debug("Session for %s has no duration, velocity unchanged", metrics.user_id)

    if accuracy > 0.8:
        metrics.optimal_session_length = min(MAX_SESSION_LENGTH, metrics.optimal_session_length + 1)
    elif accuracy < 0.6:
        metrics.optimal_session_length = max(MIN_SESSION_LENGTH, metrics.optimal_session_length - 1)

    return metrics
