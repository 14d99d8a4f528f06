"""Scoring of submitted answers against the owning survey's pass mark."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from cbt_app.core.models import OptionTag, Question, Survey, TestResult


def percentage_of(correct: int, total: int) -> int:
    """Whole-number percentage, rounding halves up (41.5 -> 42)."""
    if total <= 0:
        return 0
    return (200 * correct + total) // (2 * total)


def is_passing(percentage: int, passing_percentage: int) -> bool:
    return percentage >= passing_percentage


def score_answers(
    session_id: str,
    questions: Sequence[Question],
    answers: Mapping[int, OptionTag],
    survey: Survey,
    *,
    time_taken_seconds: int = 0,
) -> TestResult:
    """Score an answer map keyed by question index.

    Unanswered questions count as incorrect and stay in the denominator.
    Answers for indices outside the question list are ignored.
    """
    total = len(questions)
    attempted = 0
    correct = 0
    total_points = 0
    obtained_points = 0
    section_scores: dict[str, int] = {}

    for index, question in enumerate(questions):
        total_points += question.points
        section_scores.setdefault(question.section_id, 0)
        selected = answers.get(index)
        if selected is None:
            continue
        attempted += 1
        if OptionTag.parse(selected) == question.correct_option:
            correct += 1
            obtained_points += question.points
            section_scores[question.section_id] += 1

    percentage = percentage_of(correct, total)
    return TestResult(
        session_id=session_id,
        total_questions=total,
        attempted=attempted,
        correct=correct,
        percentage=percentage,
        passed=is_passing(percentage, survey.passing_percentage),
        total_points=total_points,
        obtained_points=obtained_points,
        time_taken_seconds=time_taken_seconds,
        section_scores=section_scores,
    )
