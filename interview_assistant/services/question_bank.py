import random
from typing import Dict, List, Optional, Sequence

from interview_assistant.core.errors import InputMalformedError
from interview_assistant.schemas.interview import (
    CustomQuestion,
    InterviewConfig,
    QuestionSnapshot,
)
from interview_assistant.utils.enums import Difficulty

DEFAULT_QUESTIONS: Dict[Difficulty, List[str]] = {
    Difficulty.EASY: [
        "What is the difference between let, const, and var in JavaScript?",
        "Explain what a React component is and how it differs from a regular function.",
        "What is the purpose of the useState hook in React?",
        "What is the difference between == and === in JavaScript?",
    ],
    Difficulty.MEDIUM: [
        "Explain the concept of closures in JavaScript with an example.",
        "What is the Virtual DOM in React and why is it useful?",
        "How do you handle state management in a React application?",
        "Explain the differences between REST and GraphQL APIs.",
    ],
    Difficulty.HARD: [
        "Implement a debounce function in JavaScript and explain when you would use it.",
        "Explain React's reconciliation process and how keys work in lists.",
        "Design a scalable Node.js application architecture for handling high traffic.",
        "How would you optimize a React application for performance?",
    ],
}


class QuestionBank:
    """In-memory question source, one list of question texts per tier."""

    def __init__(
        self,
        questions: Optional[Dict[Difficulty, List[str]]] = None,
        rng: Optional[random.Random] = None,
    ):
        self._questions = questions if questions is not None else DEFAULT_QUESTIONS
        self._rng = rng or random.Random()

    def random_questions(self, difficulty: Difficulty, count: int) -> List[dict]:
        pool = [
            {"id": f"{difficulty.value}-{index + 1}", "text": text, "difficulty": difficulty}
            for index, text in enumerate(self._questions.get(difficulty, []))
        ]
        if count >= len(pool):
            self._rng.shuffle(pool)
            return pool
        return self._rng.sample(pool, count)


def build_question_plan(
    config: InterviewConfig,
    bank: QuestionBank,
    custom_questions: Optional[Sequence[CustomQuestion]] = None,
) -> List[QuestionSnapshot]:
    """Ordered plan: easy, then medium, then hard, unless a custom list is given."""
    if custom_questions:
        return [
            QuestionSnapshot(
                id=question.id or f"custom-{index + 1}",
                text=question.text,
                difficulty=question.difficulty,
                time_limit=question.time_limit or config.time_limit(question.difficulty),
            )
            for index, question in enumerate(custom_questions)
        ]

    plan = []
    for difficulty in Difficulty:
        for question in bank.random_questions(difficulty, config.question_count(difficulty)):
            plan.append(
                QuestionSnapshot(
                    id=question["id"],
                    text=question["text"],
                    difficulty=difficulty,
                    time_limit=config.time_limit(difficulty),
                )
            )

    if not plan:
        raise InputMalformedError("Interview configuration produces no questions")
    return plan
