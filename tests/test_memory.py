"""
Tests for the memory strength update algorithm.
"""

from datetime import timedelta

import pytest
from hypothesis import given, strategies as st

from personalization.memory import MemoryStrengthAlgorithm, MIN_EASINESS
from tests.conftest import NOW, make_record


class TestQuality:

    def test_incorrect_is_zero(self):
        assert MemoryStrengthAlgorithm.quality_from_attempt(False, 1) == 0

    def test_correct_is_at_least_three(self):
        assert MemoryStrengthAlgorithm.quality_from_attempt(True, 3) == 3
        assert MemoryStrengthAlgorithm.quality_from_attempt(True, 5) == 3

    def test_easy_question_scores_higher(self):
        assert MemoryStrengthAlgorithm.quality_from_attempt(True, 1) == 4


class TestInitializeRecord:

    def test_first_correct_attempt(self):
        record = MemoryStrengthAlgorithm.initialize_record("Q1", "finance", True, 2000, reference_time=NOW)

        assert record.memory_strength == 0.7
        assert record.repetitions == 1
        assert record.easiness == 2.5
        assert record.interval == 1
        assert record.correct_streak == 1
        assert record.incorrect_count == 0
        assert record.total_attempts == 1
        assert record.average_response_time == 2000
        assert record.difficulty_rating == 3
        assert record.last_review_date == NOW
        assert record.next_review_date == NOW + timedelta(days=1)

    def test_first_incorrect_attempt(self):
        record = MemoryStrengthAlgorithm.initialize_record("Q1", "finance", False, 3000, 4, reference_time=NOW)

        assert record.memory_strength == 0.3
        assert record.repetitions == 1
        assert record.correct_streak == 0
        assert record.incorrect_count == 1
        assert record.difficulty_rating == 4


class TestApplyAttempt:

    def test_second_correct_attempt_sets_six_day_interval(self):
        record = MemoryStrengthAlgorithm.initialize_record("Q1", "finance", True, 2000, reference_time=NOW)
        later = NOW + timedelta(days=1)

        MemoryStrengthAlgorithm.apply_attempt(record, True, 1000, 3, reference_time=later)

        assert record.repetitions == 2
        assert record.interval == 6
        # quality 3 lowers easiness: 2.5 + (0.1 - 2 * (0.08 + 2 * 0.02))
        assert record.easiness == pytest.approx(2.36)
        assert record.memory_strength == pytest.approx(0.82)
        assert record.correct_streak == 2
        assert record.total_attempts == 2
        assert record.average_response_time == pytest.approx(1500)
        assert record.next_review_date == later + timedelta(days=6)

    def test_third_correct_attempt_multiplies_interval(self):
        record = make_record("Q1", repetitions=2, interval=6, easiness=2.5, total_attempts=2)

        MemoryStrengthAlgorithm.apply_attempt(record, True, 1000, 1, reference_time=NOW)

        # interval uses the easiness from before the update
        assert record.interval == 15
        assert record.easiness == pytest.approx(2.5)

    def test_interval_rounds_half_up(self):
        record = make_record("Q1", repetitions=3, interval=1, easiness=2.5, total_attempts=4, incorrect_count=1)

        MemoryStrengthAlgorithm.apply_attempt(record, True, 1000, 1, reference_time=NOW)

        assert record.interval == 3

    def test_incorrect_attempt_resets_interval_and_streak(self):
        record = make_record("Q1", memory_strength=0.82, repetitions=2, interval=6,
                             easiness=2.36, total_attempts=2, correct_streak=2)

        MemoryStrengthAlgorithm.apply_attempt(record, False, 4000, 3, reference_time=NOW)

        assert record.correct_streak == 0
        assert record.interval == 1
        assert record.incorrect_count == 1
        assert record.total_attempts == 3
        assert record.memory_strength == pytest.approx(0.52)
        assert record.repetitions == 2
        assert record.easiness == pytest.approx(2.36)
        assert record.next_review_date == NOW + timedelta(days=1)

    def test_strength_floors_at_zero(self):
        record = make_record("Q1", memory_strength=0.1)

        MemoryStrengthAlgorithm.apply_attempt(record, False, 1000, reference_time=NOW)

        assert record.memory_strength == 0.0

    def test_easiness_floors_at_minimum(self):
        record = make_record("Q1", easiness=1.35, repetitions=3, interval=4)

        MemoryStrengthAlgorithm.apply_attempt(record, True, 1000, 5, reference_time=NOW)

        assert record.easiness == MIN_EASINESS

    def test_out_of_range_difficulty_is_absorbed(self):
        record = make_record("Q1", memory_strength=0.95)

        MemoryStrengthAlgorithm.apply_attempt(record, True, -50, -10, reference_time=NOW)

        assert record.memory_strength == 1.0
        assert record.easiness >= MIN_EASINESS


class TestDueness:

    def test_due_by_date(self):
        record = make_record("Q1", memory_strength=0.9, days_until_review=-1)
        assert MemoryStrengthAlgorithm.is_due_for_review(record, NOW)

    def test_due_when_weak(self):
        record = make_record("Q1", memory_strength=0.4, days_until_review=5)
        assert MemoryStrengthAlgorithm.is_due_for_review(record, NOW)

    def test_not_due(self):
        record = make_record("Q1", memory_strength=0.9, days_until_review=5)
        assert not MemoryStrengthAlgorithm.is_due_for_review(record, NOW)

    def test_days_overdue_is_fractional(self):
        record = make_record("Q1", next_review_date=NOW - timedelta(hours=36))
        assert MemoryStrengthAlgorithm.get_days_overdue(record, NOW) == pytest.approx(1.5)

    def test_days_overdue_zero_when_in_future(self):
        record = make_record("Q1", days_until_review=3)
        assert MemoryStrengthAlgorithm.get_days_overdue(record, NOW) == 0.0


attempts = st.lists(
    st.tuples(
        st.booleans(),
        st.floats(min_value=-1000, max_value=60000, allow_nan=False),
        st.floats(min_value=-10, max_value=10, allow_nan=False),
    ),
    min_size=1,
    max_size=40,
)


class TestInvariants:

    @given(attempts)
    def test_bounds_hold_for_any_sequence(self, sequence):
        first_correct, first_time, first_difficulty = sequence[0]
        record = MemoryStrengthAlgorithm.initialize_record(
            "Q1", "finance", first_correct, first_time, first_difficulty, reference_time=NOW
        )
        correct = int(first_correct)

        for is_correct, response_time, difficulty in sequence[1:]:
            MemoryStrengthAlgorithm.apply_attempt(record, is_correct, response_time, difficulty, reference_time=NOW)
            correct += int(is_correct)

            assert 0.0 <= record.memory_strength <= 1.0
            assert record.easiness >= MIN_EASINESS
            assert record.interval >= 1

        assert record.total_attempts == len(sequence)
        assert record.total_attempts == record.incorrect_count + correct
