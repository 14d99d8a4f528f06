"""Demo survey and questions loaded by the desktop host at startup."""

from __future__ import annotations

from cbt_app.core.models import Difficulty, OptionTag, Question, Survey

SAMPLE_SURVEY = Survey(
    id="1",
    name="Data Collection Methodology Assessment",
    description="Comprehensive assessment covering data collection techniques and field practices",
    duration_minutes=35,
    total_questions=5,
    passing_percentage=70,
    max_attempts=3,
)

SAMPLE_QUESTIONS: list[Question] = [
    Question(
        id="q1",
        survey_id=SAMPLE_SURVEY.id,
        section_id="A",
        question_text="What is the primary purpose of random sampling in data collection?",
        options=(
            "To reduce survey costs",
            "To ensure representative sample selection",
            "To speed up data collection",
            "To eliminate interviewer bias",
        ),
        correct_option=OptionTag.B,
        difficulty=Difficulty.EASY,
        topic="Sampling",
    ),
    Question(
        id="q2",
        survey_id=SAMPLE_SURVEY.id,
        section_id="A",
        question_text="Which of the following is NOT a type of probability sampling?",
        options=(
            "Simple random sampling",
            "Stratified sampling",
            "Convenience sampling",
            "Systematic sampling",
        ),
        correct_option=OptionTag.C,
        topic="Sampling",
    ),
    Question(
        id="q3",
        survey_id=SAMPLE_SURVEY.id,
        section_id="B",
        question_text="In hypothesis testing, what does a p-value of 0.03 indicate?",
        options=(
            "There is a 3% chance the null hypothesis is true",
            "There is a 3% chance of observing the data if null hypothesis is true",
            "The alternative hypothesis has 97% probability",
            "The result is not statistically significant",
        ),
        correct_option=OptionTag.B,
        difficulty=Difficulty.HARD,
        points=2,
        topic="Inference",
    ),
    Question(
        id="q4",
        survey_id=SAMPLE_SURVEY.id,
        section_id="B",
        question_text="What is the standard deviation of a normal distribution with variance 16?",
        options=("2", "4", "8", "16"),
        correct_option=OptionTag.B,
        explanation="The standard deviation is the square root of the variance.",
        topic="Descriptive statistics",
    ),
    Question(
        id="q5",
        survey_id=SAMPLE_SURVEY.id,
        section_id="C",
        question_text="Which quality control measure is most important in data collection?",
        options=(
            "Speed of data entry",
            "Cost reduction",
            "Data validation and verification",
            "Automated processing",
        ),
        correct_option=OptionTag.C,
        topic="Quality control",
    ),
]
