"""Performance aggregation over a user's memory records"""

from typing import Dict, List, Optional

from personalization.schemas import CategoryStats, MemoryRecord, PerformanceStats

NEUTRAL_ACCURACY = 0.5
STRONG_MEMORY_THRESHOLD = 0.7


def performance_stats(records: List[MemoryRecord]) -> PerformanceStats:
    """
    Pooled accuracy and response time statistics.

    Accuracy is pooled across all attempts so heavily repeated questions
    weigh more. Response time is the mean of each record's own running
    mean. A user without records gets a neutral 0.5 accuracy.
    """
    if not records:
        return PerformanceStats(
            average_accuracy=NEUTRAL_ACCURACY,
            average_response_time=0,
            total_questions=0,
            category_stats={},
        )

    total_attempts = sum(r.total_attempts for r in records)
    total_correct = sum(r.total_attempts - r.incorrect_count for r in records)
    total_response_time = sum(r.average_response_time for r in records)

    per_category: Dict[str, Dict[str, int]] = {}
    for r in records:
        bucket = per_category.setdefault(r.category, {"correct": 0, "attempts": 0})
        bucket["correct"] += r.total_attempts - r.incorrect_count
        bucket["attempts"] += r.total_attempts

    category_stats = {
        category: CategoryStats(
            accuracy=counts["correct"] / counts["attempts"] if counts["attempts"] else 0.0,
            attempts=counts["attempts"],
        )
        for category, counts in per_category.items()
    }

    return PerformanceStats(
        average_accuracy=total_correct / total_attempts if total_attempts else NEUTRAL_ACCURACY,
        average_response_time=total_response_time / len(records),
        total_questions=len(records),
        category_stats=category_stats,
    )


def learning_efficiency(
    records: List[MemoryRecord],
    stats: Optional[PerformanceStats] = None
) -> float:
    """Composite 0-1 score from retention, spaced repetition results and accuracy"""
    if not records:
        return 0.5
    if stats is None:
        stats = performance_stats(records)

    strong = [r for r in records if r.memory_strength > STRONG_MEMORY_THRESHOLD]
    retention_rate = len(strong) / len(records)

    repeated = [r for r in records if r.repetitions > 2]
    if repeated:
        spaced_repetition_effectiveness = sum(r.memory_strength for r in repeated) / len(repeated)
    else:
        spaced_repetition_effectiveness = 0.5

    efficiency = (
        retention_rate * 0.4
        + spaced_repetition_effectiveness * 0.3
        + stats.average_accuracy * 0.3
    )
    return max(0.0, min(1.0, efficiency))


def recommend_difficulty(average_accuracy: float) -> str:
    if average_accuracy > 0.8:
        return "hard"
    if average_accuracy < 0.6:
        return "easy"
    return "medium"
