from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional

from interview_assistant.core.config import Settings
from interview_assistant.utils.enums import Difficulty, SessionStatus


class InterviewConfig(BaseModel):
    easy_questions: int = Field(2, ge=0)
    medium_questions: int = Field(2, ge=0)
    hard_questions: int = Field(2, ge=0)
    easy_time_limit: int = Field(20, ge=1)
    medium_time_limit: int = Field(60, ge=1)
    hard_time_limit: int = Field(120, ge=1)

    @classmethod
    def from_settings(cls, settings: Settings) -> "InterviewConfig":
        return cls(
            easy_questions=settings.EASY_QUESTIONS,
            medium_questions=settings.MEDIUM_QUESTIONS,
            hard_questions=settings.HARD_QUESTIONS,
            easy_time_limit=settings.EASY_TIME_LIMIT,
            medium_time_limit=settings.MEDIUM_TIME_LIMIT,
            hard_time_limit=settings.HARD_TIME_LIMIT,
        )

    def question_count(self, difficulty: Difficulty) -> int:
        return getattr(self, f"{difficulty.value}_questions")

    def time_limit(self, difficulty: Difficulty) -> int:
        return getattr(self, f"{difficulty.value}_time_limit")


class QuestionSnapshot(BaseModel):
    id: str
    text: str
    difficulty: Difficulty
    time_limit: int

    class Config:
        frozen = True


class CustomQuestion(BaseModel):
    id: Optional[str] = None
    text: str
    difficulty: Difficulty
    time_limit: Optional[int] = Field(None, ge=1)


class InterviewCreate(BaseModel):
    candidate_id: str
    configuration: Optional[InterviewConfig] = None
    custom_questions: List[CustomQuestion] = []


class AnswerSubmit(BaseModel):
    answer: str = ""
    time_expired: bool = False
    question_id: Optional[str] = None


class DraftUpdate(BaseModel):
    text: str = ""


class InterviewSessionView(BaseModel):
    session_id: str
    candidate_id: str
    status: SessionStatus
    questions: List[QuestionSnapshot]
    current_question_index: int
    current_question: Optional[QuestionSnapshot] = None
    time_remaining: int
    is_active: bool
    is_paused: bool
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
