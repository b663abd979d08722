import pytest

from conftest import make_answer, words
from interview_assistant.schemas.candidate import NO_ANSWER_SENTINEL
from interview_assistant.services.scoring_engine import (
    calculate_score,
    count_words,
    score_answer,
)
from interview_assistant.utils.enums import Difficulty


def test_no_answers_scores_zero_with_absent_breakdown():
    score = calculate_score([])
    assert score.overall == 0
    assert score.breakdown.easy is None
    assert score.breakdown.medium is None
    assert score.breakdown.hard is None


def test_single_empty_easy_answer_scores_zero():
    score = calculate_score([make_answer(Difficulty.EASY, "")])
    assert score.overall == 0
    assert score.breakdown.easy == 0
    assert score.breakdown.medium is None


def test_fast_long_hard_answer_gets_bonus_but_stays_within_max():
    answer = make_answer(Difficulty.HARD, words(40), time_taken=12, time_limit=120)

    earned, max_score = score_answer(answer)

    assert max_score == 30
    assert earned == pytest.approx(29.7)
    assert earned <= max_score
    assert calculate_score([answer]).overall == 99


@pytest.mark.parametrize(
    "word_count, expected",
    [
        (0, 0),
        (3, 20),
        (5, 50),
        (14, 50),
        (15, 70),
        (29, 70),
        (30, 90),
    ],
)
def test_word_count_tiers(word_count, expected):
    answer = make_answer(Difficulty.EASY, words(word_count), time_taken=10, time_limit=20)
    assert calculate_score([answer]).overall == expected


def test_fast_bonus_requires_more_than_five_words():
    five = make_answer(Difficulty.EASY, words(5), time_taken=2, time_limit=20)
    six = make_answer(Difficulty.EASY, words(6), time_taken=2, time_limit=20)

    assert calculate_score([five]).overall == 50
    assert calculate_score([six]).overall == 55


def test_slow_answer_penalty():
    answer = make_answer(Difficulty.MEDIUM, words(20), time_taken=58, time_limit=60)
    assert calculate_score([answer]).overall == 56


def test_time_taken_may_exceed_time_limit():
    answer = make_answer(Difficulty.MEDIUM, words(20), time_taken=90, time_limit=60)
    assert calculate_score([answer]).overall == 56


def test_time_expired_sentinel_counts_as_no_words():
    answer = make_answer(
        Difficulty.EASY, NO_ANSWER_SENTINEL, time_taken=20, time_limit=20, time_expired=True
    )
    assert count_words(NO_ANSWER_SENTINEL) == 0
    assert calculate_score([answer]).overall == 0


def test_whitespace_only_answer_counts_as_no_words():
    assert count_words("   \n\t ") == 0
    assert count_words("two  words") == 2


def test_overall_weights_by_difficulty_and_breakdown_per_tier():
    answers = [
        make_answer(Difficulty.EASY, words(10), time_taken=10, time_limit=20),
        make_answer(Difficulty.HARD, words(40), time_taken=60, time_limit=120),
    ]

    score = calculate_score(answers)

    assert score.overall == 80
    assert score.breakdown.easy == 50
    assert score.breakdown.medium is None
    assert score.breakdown.hard == 90


def test_overall_rounds_half_up():
    answers = [
        make_answer(Difficulty.EASY, words(10), time_taken=10, time_limit=20),
        make_answer(Difficulty.HARD, "", time_taken=60, time_limit=120),
    ]
    # 5 of 40 points is 12.5%
    assert calculate_score(answers).overall == 13


def test_non_positive_time_limit_skips_time_adjustment():
    answer = make_answer(Difficulty.EASY, words(10), time_taken=0, time_limit=0)
    assert calculate_score([answer]).overall == 50


def test_scoring_is_deterministic():
    answers = [
        make_answer(Difficulty.EASY, words(7), time_taken=3, time_limit=20),
        make_answer(Difficulty.MEDIUM, words(22), time_taken=59, time_limit=60),
        make_answer(Difficulty.HARD, words(31), time_taken=30, time_limit=120),
    ]
    assert calculate_score(answers) == calculate_score(list(answers))
