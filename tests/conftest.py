from __future__ import annotations

from collections.abc import Callable, Mapping

import pytest

from cbt_app.core.models import OptionTag, Question, Survey, TestResult
from cbt_app.core.scheduling import ManualScheduler
from cbt_app.core.services.progress_store import InMemoryProgressStore, ProgressStoreError
from cbt_app.core.services.question_bank import QuestionBank
from cbt_app.core.services.submission_service import LocalSubmissionService, SubmissionError
from cbt_app.core.services.test_session import TestSessionEngine


def make_survey(survey_id: str = "s1", *, duration_minutes: int = 35, passing_percentage: int = 70) -> Survey:
    return Survey(
        id=survey_id,
        name="Field Methods",
        duration_minutes=duration_minutes,
        total_questions=30,
        passing_percentage=passing_percentage,
        max_attempts=3,
    )


def make_questions(count: int = 30, survey_id: str = "s1") -> list[Question]:
    """Questions whose correct answer is always A; the first half is section A."""
    return [
        Question(
            id=f"q{index + 1}",
            survey_id=survey_id,
            section_id="A" if index < count // 2 else "B",
            question_text=f"Question {index + 1}?",
            options=("first", "second", "third", "fourth"),
            correct_option=OptionTag.A,
        )
        for index in range(count)
    ]


class CountingProgressStore(InMemoryProgressStore):
    def __init__(self) -> None:
        super().__init__()
        self.saves = 0

    def save(self, session_id, snapshot) -> None:
        self.saves += 1
        super().save(session_id, snapshot)


class HookedProgressStore(InMemoryProgressStore):
    """Runs ``before_save`` once, just before the next write lands."""

    def __init__(self) -> None:
        super().__init__()
        self.before_save: Callable[[], None] | None = None

    def save(self, session_id, snapshot) -> None:
        hook, self.before_save = self.before_save, None
        if hook is not None:
            hook()
        super().save(session_id, snapshot)


class FailingProgressStore(InMemoryProgressStore):
    """Rejects every write; reads behave normally."""

    def save(self, session_id, snapshot) -> None:
        raise ProgressStoreError("disk full")


class UnreadableProgressStore(InMemoryProgressStore):
    def load(self, session_id):
        raise ProgressStoreError("corrupt progress file")


class FlakySubmissionService:
    """Fails the first ``failures`` submissions, then scores locally."""

    def __init__(self, questions, survey, failures: int = 1) -> None:
        self._local = LocalSubmissionService(questions, survey)
        self.failures = failures
        self.calls = 0

    def submit(self, session_id: str, answers: Mapping[int, OptionTag], *, time_taken_seconds: int = 0) -> TestResult:
        self.calls += 1
        if self.failures > 0:
            self.failures -= 1
            raise SubmissionError("scoring service unavailable")
        return self._local.submit(session_id, answers, time_taken_seconds=time_taken_seconds)


class RecordingSubmissionService:
    """Scores locally and runs an optional hook while the submission is in flight."""

    def __init__(self, questions, survey) -> None:
        self._local = LocalSubmissionService(questions, survey)
        self.calls: list[dict[int, OptionTag]] = []
        self.time_taken: list[int] = []
        self.during_submit: Callable[[], None] | None = None

    def submit(self, session_id: str, answers: Mapping[int, OptionTag], *, time_taken_seconds: int = 0) -> TestResult:
        self.calls.append(dict(answers))
        self.time_taken.append(time_taken_seconds)
        if self.during_submit is not None:
            self.during_submit()
        return self._local.submit(session_id, answers, time_taken_seconds=time_taken_seconds)


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def survey() -> Survey:
    return make_survey()


@pytest.fixture()
def questions() -> list[Question]:
    return make_questions()


@pytest.fixture()
def store() -> InMemoryProgressStore:
    return InMemoryProgressStore()


@pytest.fixture()
def question_bank(survey, questions) -> QuestionBank:
    bank = QuestionBank()
    bank.add_survey(survey)
    bank.load_questions(survey.id, questions)
    return bank


@pytest.fixture()
def make_engine(scheduler, survey, questions, store):
    """Factory for engines sharing the test's scheduler; keyword arguments override collaborators."""

    def factory(**overrides) -> TestSessionEngine:
        engine_survey = overrides.pop("survey", survey)
        engine_questions = overrides.pop("questions", questions)
        service = overrides.pop("submission_service", None) or RecordingSubmissionService(
            engine_questions, engine_survey
        )
        return TestSessionEngine(
            overrides.pop("session_id", "u1:s1"),
            engine_questions,
            engine_survey,
            overrides.pop("progress_store", store),
            service,
            overrides.pop("scheduler", scheduler),
            **overrides,
        )

    return factory
