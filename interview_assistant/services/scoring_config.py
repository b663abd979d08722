from interview_assistant.utils.enums import Difficulty

SCORING_RULES = {
    Difficulty.EASY: {
        "max_score": 10,
    },
    Difficulty.MEDIUM: {
        "max_score": 20,
    },
    Difficulty.HARD: {
        "max_score": 30,
    },
}

# (upper word-count bound, exclusive; fraction of max_score)
WORD_COUNT_TIERS = [
    (5, 0.2),
    (15, 0.5),
    (30, 0.7),
]
LONG_ANSWER_FRACTION = 0.9

FAST_ANSWER_RATIO = 0.3
FAST_ANSWER_MIN_WORDS = 5
FAST_ANSWER_MULTIPLIER = 1.1

SLOW_ANSWER_RATIO = 0.9
SLOW_ANSWER_MULTIPLIER = 0.8

SUMMARY_THRESHOLDS = {
    "EXCELLENT": 80,
    "GOOD": 60,
    "AVERAGE": 40,
}

STRUGGLE_THRESHOLD = 50
STRENGTH_THRESHOLD = 70
