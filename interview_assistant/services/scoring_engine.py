import logging
import math
from collections import defaultdict
from typing import Dict, List, Sequence, Tuple

from interview_assistant.schemas.candidate import (
    NO_ANSWER_SENTINEL,
    Answer,
    InterviewScore,
    ScoreBreakdown,
)
from interview_assistant.services.scoring_config import (
    FAST_ANSWER_MIN_WORDS,
    FAST_ANSWER_MULTIPLIER,
    FAST_ANSWER_RATIO,
    LONG_ANSWER_FRACTION,
    SCORING_RULES,
    SLOW_ANSWER_MULTIPLIER,
    SLOW_ANSWER_RATIO,
    WORD_COUNT_TIERS,
)
from interview_assistant.utils.enums import Difficulty

logger = logging.getLogger(__name__)


def count_words(text: str) -> int:
    if not text or text.strip() == NO_ANSWER_SENTINEL:
        return 0
    return len(text.split())


def score_answer(answer: Answer) -> Tuple[float, int]:
    """Return ``(earned, max_score)`` for a single answer."""
    rule = SCORING_RULES.get(answer.difficulty, SCORING_RULES[Difficulty.EASY])
    max_score = rule["max_score"]

    word_count = count_words(answer.answer)
    if word_count == 0:
        return 0.0, max_score

    fraction = LONG_ANSWER_FRACTION
    for upper_bound, tier_fraction in WORD_COUNT_TIERS:
        if word_count < upper_bound:
            fraction = tier_fraction
            break
    earned = max_score * fraction

    if answer.time_limit > 0:
        time_ratio = answer.time_taken / answer.time_limit
        if time_ratio < FAST_ANSWER_RATIO and word_count > FAST_ANSWER_MIN_WORDS:
            earned *= FAST_ANSWER_MULTIPLIER
        elif time_ratio > SLOW_ANSWER_RATIO:
            earned *= SLOW_ANSWER_MULTIPLIER

    return min(earned, max_score), max_score


def score_percentage(answers: Sequence[Answer]) -> int:
    if not answers:
        return 0

    earned_total = 0.0
    max_total = 0
    for answer in answers:
        earned, max_score = score_answer(answer)
        earned_total += earned
        max_total += max_score

    return _round_half_up(earned_total / max_total * 100)


def calculate_score(answers: Sequence[Answer]) -> InterviewScore:
    by_difficulty: Dict[Difficulty, List[Answer]] = defaultdict(list)
    for answer in answers:
        by_difficulty[answer.difficulty].append(answer)

    breakdown = ScoreBreakdown(**{
        difficulty.value: score_percentage(by_difficulty[difficulty])
        if by_difficulty.get(difficulty)
        else None
        for difficulty in Difficulty
    })

    score = InterviewScore(overall=score_percentage(answers), breakdown=breakdown)
    logger.debug("Scored %d answers: %s", len(answers), score)
    return score


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
