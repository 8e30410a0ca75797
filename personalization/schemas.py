from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Literal
from datetime import datetime, timezone

PreferredDifficulty = Literal["adaptive", "easy", "medium", "hard"]
FocusMode = Literal["review", "new", "mixed"]
ReviewPriority = Literal["memory_strength", "time_since_review", "error_rate"]


class MemoryRecord(BaseModel):
    """Memory strength and review schedule for one question"""
    question_id: str
    category: str
    memory_strength: float  # 0 = forgotten, 1 = perfect recall
    repetitions: int
    easiness: float  # SuperMemo easiness factor, >= 1.3
    interval: int  # days until next review
    last_review_date: datetime
    next_review_date: datetime
    correct_streak: int = 0
    incorrect_count: int = 0
    total_attempts: int = 0
    average_response_time: float = 0.0  # ms
    difficulty_rating: float = 3.0  # 1-5 scale

    @field_validator("last_review_date", "next_review_date")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # Timestamps without an offset are stored as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class PersonalizedConfig(BaseModel):
    """Per-user quiz preferences"""
    user_id: str
    preferred_difficulty: PreferredDifficulty = "adaptive"
    focus_mode: FocusMode = "mixed"
    session_length: int = Field(10, ge=1)
    categories: List[str] = Field(default_factory=list)
    enable_spaced_repetition: bool = True
    adaptive_difficulty: bool = True
    review_priority: ReviewPriority = "memory_strength"


class LearningEfficiencyMetrics(BaseModel):
    """Per-user learning efficiency tracking"""
    user_id: str
    optimal_session_length: int = 10
    best_time_of_day: str = "afternoon"
    average_focus_span: float = 15  # minutes
    category_mastery: Dict[str, float] = Field(default_factory=dict)
    learning_velocity: float = 0.0
    retention_rate: float = 0.0


class CategoryStats(BaseModel):
    """Pooled accuracy for one category"""
    accuracy: float
    attempts: int


class PerformanceStats(BaseModel):
    """Aggregate performance across all memory records"""
    average_accuracy: float
    average_response_time: float
    total_questions: int
    category_stats: Dict[str, CategoryStats] = Field(default_factory=dict)


class SessionSelection(BaseModel):
    """Recommended question list for a quiz session"""
    questions: List[Dict[str, Any]]
    review_questions: List[MemoryRecord]
    new_questions: List[Dict[str, Any]]
    recommended_difficulty: Literal["easy", "medium", "hard"]
    learning_efficiency: float


class ReviewSchedule(BaseModel):
    """Upcoming reviews bucketed by due window"""
    today: List[MemoryRecord]
    this_week: List[MemoryRecord]
    next_week: List[MemoryRecord]
