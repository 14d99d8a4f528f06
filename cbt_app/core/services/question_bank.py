"""Service for holding surveys and their question banks."""

from __future__ import annotations

from dataclasses import replace

from cbt_app.core.models import OptionTag, Question, Survey


class QuestionBank:
    """Read-mostly source of surveys and the questions delivered for each test."""

    def __init__(self) -> None:
        self._surveys: dict[str, Survey] = {}
        self._questions: dict[str, list[Question]] = {}

    def add_survey(self, survey: Survey) -> None:
        if not survey.name.strip():
            raise ValueError("Survey name must not be empty.")
        if survey.duration_minutes <= 0:
            raise ValueError("Survey duration must be a positive number of minutes.")
        if not 0 <= survey.passing_percentage <= 100:
            raise ValueError("Passing percentage must be between 0 and 100.")
        self._surveys[survey.id] = survey
        self._questions.setdefault(survey.id, [])

    def get_survey(self, survey_id: str) -> Survey:
        try:
            return self._surveys[survey_id]
        except KeyError:
            raise KeyError(f"Unknown survey {survey_id!r}") from None

    def list_surveys(self) -> list[Survey]:
        return list(self._surveys.values())

    def add_question(self, question: Question) -> None:
        if question.survey_id not in self._surveys:
            raise KeyError(f"Unknown survey {question.survey_id!r}")
        self._questions[question.survey_id].append(self._prepare_question(question))

    def load_questions(self, survey_id: str, questions: list[Question]) -> None:
        """Replace the question bank of a survey."""
        if survey_id not in self._surveys:
            raise KeyError(f"Unknown survey {survey_id!r}")
        if not questions:
            raise ValueError("A survey must contain at least one question.")
        self._questions[survey_id] = [self._prepare_question(q) for q in questions]

    def questions_for_test(self, test_id: str) -> tuple[Question, ...]:
        """Return the active questions of a test in bank order."""
        if test_id not in self._surveys:
            raise KeyError(f"Unknown survey {test_id!r}")
        return tuple(q for q in self._questions[test_id] if q.is_active)

    def get_question_count(self, survey_id: str) -> int:
        return len(self.questions_for_test(survey_id))

    def _prepare_question(self, question: Question) -> Question:
        """Validate and normalize a question before storage."""
        cleaned_text = question.question_text.strip()
        if not cleaned_text:
            raise ValueError("Question text must not be empty.")
        if question.points <= 0:
            raise ValueError("Question points must be a positive integer.")
        return replace(
            question,
            question_text=cleaned_text,
            options=self._validate_options(list(question.options)),
            correct_option=OptionTag.parse(question.correct_option),
        )

    @staticmethod
    def _validate_options(options: list[str]) -> tuple[str, str, str, str]:
        if len(options) != 4:
            raise ValueError("Each question must have exactly four options.")
        cleaned = [option.strip() for option in options]
        if any(not option for option in cleaned):
            raise ValueError("Option text cannot be empty.")
        return (cleaned[0], cleaned[1], cleaned[2], cleaned[3])
