from typing import Sequence

from interview_assistant.schemas.candidate import NO_ANSWER_SENTINEL, Answer
from interview_assistant.services.scoring_config import (
    STRENGTH_THRESHOLD,
    STRUGGLE_THRESHOLD,
    SUMMARY_THRESHOLDS,
)
from interview_assistant.services.scoring_engine import score_percentage
from interview_assistant.utils.enums import Difficulty

PERFORMANCE_STATEMENTS = {
    "EXCELLENT": "Excellent performance with comprehensive answers demonstrating strong technical knowledge.",
    "GOOD": "Good performance with solid understanding of most concepts.",
    "AVERAGE": "Average performance with some areas needing improvement.",
    "BELOW_AVERAGE": "Below average performance. Candidate may need additional preparation or training.",
}

STRUGGLE_NOTE = "Struggles with fundamental concepts."
IMPROVEMENT_NOTE = "Needs improvement in intermediate-level topics."
STRENGTH_NOTE = "Shows strong problem-solving abilities in complex scenarios."


def determine_performance_tier(score: int) -> str:
    if score >= SUMMARY_THRESHOLDS["EXCELLENT"]:
        return "EXCELLENT"
    elif score >= SUMMARY_THRESHOLDS["GOOD"]:
        return "GOOD"
    elif score >= SUMMARY_THRESHOLDS["AVERAGE"]:
        return "AVERAGE"
    return "BELOW_AVERAGE"


def is_answered(answer: Answer) -> bool:
    text = (answer.answer or "").strip()
    return bool(text) and text != NO_ANSWER_SENTINEL


def generate_summary(answers: Sequence[Answer], overall_score: int) -> str:
    total = len(answers)
    answered = sum(1 for answer in answers if is_answered(answer))

    summary = (
        f"Candidate completed {answered}/{total} questions "
        f"with a score of {overall_score}/100. "
    )
    summary += PERFORMANCE_STATEMENTS[determine_performance_tier(overall_score)]

    # An empty subset scores 0, so missing tiers count as weak ones.
    subset_scores = {
        difficulty: score_percentage([a for a in answers if a.difficulty == difficulty])
        for difficulty in Difficulty
    }

    if subset_scores[Difficulty.EASY] < STRUGGLE_THRESHOLD:
        summary += f" {STRUGGLE_NOTE}"
    if subset_scores[Difficulty.MEDIUM] < STRUGGLE_THRESHOLD:
        summary += f" {IMPROVEMENT_NOTE}"
    if subset_scores[Difficulty.HARD] >= STRENGTH_THRESHOLD:
        summary += f" {STRENGTH_NOTE}"

    return summary
