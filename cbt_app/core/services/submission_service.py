"""Submission of a finished session's answers for scoring."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol

from cbt_app.core.models import OptionTag, Question, Survey, TestResult
from cbt_app.core.scoring import score_answers


class SubmissionError(RuntimeError):
    """Raised when a submission could not be completed; the caller may retry."""


class SubmissionService(Protocol):
    def submit(
        self,
        session_id: str,
        answers: Mapping[int, OptionTag],
        *,
        time_taken_seconds: int = 0,
    ) -> TestResult: ...


class LocalSubmissionService:
    """Scores submissions in-process against the session's question list."""

    def __init__(self, questions: Sequence[Question], survey: Survey) -> None:
        self._questions = tuple(questions)
        self._survey = survey

    def submit(
        self,
        session_id: str,
        answers: Mapping[int, OptionTag],
        *,
        time_taken_seconds: int = 0,
    ) -> TestResult:
        try:
            normalized = {int(index): OptionTag.parse(option) for index, option in answers.items()}
        except ValueError as exc:
            raise SubmissionError(f"Submission for {session_id} rejected: {exc}") from exc
        return score_answers(
            session_id,
            self._questions,
            normalized,
            self._survey,
            time_taken_seconds=time_taken_seconds,
        )
