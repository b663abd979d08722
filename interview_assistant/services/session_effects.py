"""Side effects produced by session transitions.

The session machine never touches storage or timers itself. Each
transition returns a list of these records and the runner performs them
in order.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from interview_assistant.schemas.candidate import Answer, ChatEntry, InterviewScore
from interview_assistant.schemas.interview import QuestionSnapshot
from interview_assistant.utils.enums import CandidateStatus, SessionStatus


@dataclass(frozen=True)
class QuestionPlanBuilt:
    questions: Tuple[QuestionSnapshot, ...]


@dataclass(frozen=True)
class CandidateStatusChanged:
    status: CandidateStatus
    at: datetime


@dataclass(frozen=True)
class SessionStateChanged:
    status: SessionStatus
    current_question_index: int
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None


@dataclass(frozen=True)
class ChatMessagePosted:
    message: ChatEntry


@dataclass(frozen=True)
class AnswerRecorded:
    answer: Answer


@dataclass(frozen=True)
class InterviewCompleted:
    score: InterviewScore
    summary: str
    completed_at: datetime


@dataclass(frozen=True)
class TimerStarted:
    pass


@dataclass(frozen=True)
class TimerStopped:
    pass
