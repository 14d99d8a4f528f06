from __future__ import annotations

from cbt_app.core.models import OptionTag
from cbt_app.core.scoring import is_passing, percentage_of, score_answers

from conftest import make_questions, make_survey


def _answers(correct: int, wrong: int = 0) -> dict[int, OptionTag]:
    answers = {index: OptionTag.A for index in range(correct)}
    answers.update({correct + index: OptionTag.C for index in range(wrong)})
    return answers


def test_twenty_six_of_thirty_passes_at_seventy():
    result = score_answers("u1:s1", make_questions(), _answers(26, 4), make_survey())

    assert result.correct == 26
    assert result.attempted == 30
    assert result.percentage == 87
    assert result.passed is True


def test_threshold_is_inclusive():
    at_threshold = score_answers("u1:s1", make_questions(), _answers(21), make_survey())
    below = score_answers("u1:s1", make_questions(), _answers(20), make_survey())

    assert at_threshold.percentage == 70
    assert at_threshold.passed is True
    assert below.percentage == 67
    assert below.passed is False


def test_unanswered_questions_count_as_incorrect():
    result = score_answers("u1:s1", make_questions(), {0: OptionTag.A}, make_survey())

    assert result.total_questions == 30
    assert result.attempted == 1
    assert result.correct == 1
    assert result.percentage == 3


def test_section_scores_and_points():
    result = score_answers(
        "u1:s1",
        make_questions(4),
        {0: OptionTag.A, 1: OptionTag.B, 3: OptionTag.A, 9: OptionTag.A},
        make_survey(),
        time_taken_seconds=120,
    )

    assert result.section_scores == {"A": 1, "B": 1}
    assert result.total_points == 4
    assert result.obtained_points == 2
    assert result.time_taken_seconds == 120
    assert result.attempted == 3


def test_percentage_rounds_half_up():
    assert percentage_of(83, 200) == 42
    assert percentage_of(1, 3) == 33
    assert percentage_of(2, 3) == 67
    assert percentage_of(0, 0) == 0


def test_is_passing():
    assert is_passing(70, 70)
    assert not is_passing(69, 70)
