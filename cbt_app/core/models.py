"""Domain models for the test platform."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class Role(Enum):
    """User roles, from the widest access to the narrowest."""

    ADMIN = "admin"
    ZONAL_OFFICER = "zo"
    REGIONAL_OFFICER = "ro"
    SUPERVISOR = "supervisor"
    ENUMERATOR = "enumerator"

    @property
    def label(self) -> str:
        return _ROLE_LABELS[self]

    @classmethod
    def parse(cls, value: Role | str | None) -> Role | None:
        """Return the role for a tag, or None when the tag is unknown."""
        if isinstance(value, Role):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


_ROLE_LABELS = {
    Role.ADMIN: "Administrator",
    Role.ZONAL_OFFICER: "Zonal Officer",
    Role.REGIONAL_OFFICER: "Regional Officer",
    Role.SUPERVISOR: "Supervisor",
    Role.ENUMERATOR: "Enumerator",
}


class OptionTag(str, Enum):
    """The four answer slots of a multiple-choice question."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"

    @property
    def index(self) -> int:
        return _OPTION_ORDER.index(self)

    @classmethod
    def parse(cls, value: OptionTag | str) -> OptionTag:
        if isinstance(value, OptionTag):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError as exc:
            raise ValueError(f"Option must be one of A, B, C or D, got {value!r}.") from exc


_OPTION_ORDER = [OptionTag.A, OptionTag.B, OptionTag.C, OptionTag.D]


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class SessionState(str, Enum):
    """Lifecycle states of a test session; exactly one holds at a time."""

    RUNNING = "running"
    PAUSED = "paused"
    SUBMITTING = "submitting"
    TERMINATED = "terminated"


class PauseReason(str, Enum):
    CONNECTIVITY = "connectivity"
    MANUAL = "manual"


class QuestionStatus(str, Enum):
    """Navigator status of a question, as shown to the test taker."""

    ANSWERED = "answered"
    MARKED = "marked"
    NOT_ATTEMPTED = "not-attempted"


@dataclass(frozen=True, slots=True)
class PermissionInfo:
    """Catalog entry for a permission; the category is for display only."""

    id: str
    name: str
    description: str
    category: str


@dataclass(frozen=True, slots=True)
class MenuEntry:
    """A dashboard menu item and the access it requires."""

    id: str
    label: str
    icon: str
    required_permissions: frozenset[str]
    roles: frozenset[Role]


@dataclass(frozen=True, slots=True)
class Question:
    """Multiple-choice question with exactly four options (A-D)."""

    id: str
    survey_id: str
    section_id: str
    question_text: str
    options: tuple[str, str, str, str]
    correct_option: OptionTag
    difficulty: Difficulty = Difficulty.MEDIUM
    points: int = 1
    explanation: str | None = None
    topic: str | None = None
    is_active: bool = True

    def option_text(self, option: OptionTag) -> str:
        return self.options[option.index]


@dataclass(frozen=True, slots=True)
class Survey:
    """Test metadata read once when a session starts."""

    id: str
    name: str
    duration_minutes: int
    total_questions: int
    passing_percentage: int
    max_attempts: int = 1
    description: str | None = None

    @property
    def duration_seconds(self) -> int:
        return self.duration_minutes * 60


@dataclass(slots=True)
class ProgressSnapshot:
    """Persisted progress of a session; the dict form is the storage contract."""

    session_id: str
    current_index: int
    answers: dict[int, OptionTag]
    marked_for_review: set[int]
    remaining_seconds: int
    test_id: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "testId": self.test_id,
            "currentIndex": self.current_index,
            "answers": {str(index): option.value for index, option in sorted(self.answers.items())},
            "markedForReview": sorted(self.marked_for_review),
            "remainingSeconds": self.remaining_seconds,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProgressSnapshot:
        raw_answers = data.get("answers") or {}
        raw_marks = data.get("markedForReview") or []
        raw_timestamp = data.get("timestamp")
        timestamp = (
            datetime.fromisoformat(str(raw_timestamp))
            if raw_timestamp
            else datetime.now(timezone.utc)
        )
        return cls(
            session_id=str(data["sessionId"]),
            test_id=data.get("testId"),
            current_index=int(data.get("currentIndex", 0)),
            answers={int(index): OptionTag.parse(option) for index, option in raw_answers.items()},
            marked_for_review={int(index) for index in raw_marks},
            remaining_seconds=int(data["remainingSeconds"]),
            timestamp=timestamp,
        )


@dataclass(frozen=True, slots=True)
class TestResult:
    """Outcome of a submitted session."""

    __test__ = False  # not a pytest test class

    session_id: str
    total_questions: int
    attempted: int
    correct: int
    percentage: int
    passed: bool
    total_points: int = 0
    obtained_points: int = 0
    time_taken_seconds: int = 0
    section_scores: dict[str, int] = field(default_factory=dict)
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True, slots=True)
class ProgressSummary:
    """Navigator counters for the question sidebar."""

    total: int
    answered: int
    marked: int
    not_attempted: int


@dataclass(slots=True)
class Certificate:
    """Certificate issued for a passed result."""

    certificate_number: str
    session_id: str
    survey_id: str
    holder_id: str
    percentage: int
    issued_at: datetime
    verification_token: str
    is_valid: bool = True
