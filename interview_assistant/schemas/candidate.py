from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional

from interview_assistant.core.errors import InvalidTransitionError
from interview_assistant.utils.enums import (
    CANDIDATE_STATUS_ORDER,
    CandidateStatus,
    Difficulty,
    MessageKind,
)
from interview_assistant.utils.helpers import missing_fields

NO_ANSWER_SENTINEL = "(no answer / time expired)"


class ExtractedFields(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    skills: List[str] = []
    experience: List[str] = []
    education: List[str] = []
    certifications: List[str] = []
    raw_text: str = ""


class Answer(BaseModel):
    question_id: str
    question_text: str
    difficulty: Difficulty
    answer: str = ""
    time_limit: int
    time_taken: int
    time_expired: bool = False
    answered_at: datetime

    class Config:
        frozen = True
        from_attributes = True


class ChatEntry(BaseModel):
    kind: MessageKind
    content: str
    timestamp: datetime

    class Config:
        frozen = True
        from_attributes = True


class ScoreBreakdown(BaseModel):
    easy: Optional[int] = None
    medium: Optional[int] = None
    hard: Optional[int] = None


class InterviewScore(BaseModel):
    overall: int = 0
    breakdown: ScoreBreakdown = Field(default_factory=ScoreBreakdown)


class ResumeFile(BaseModel):
    original_name: str
    mimetype: Optional[str] = None
    size: Optional[int] = None


class CandidateRecord(BaseModel):
    """Durable aggregate for one candidate.

    Status only moves forward (pending -> ready-for-interview ->
    in-progress -> completed) apart from cancellation. Answers are
    append-only and the score/summary pair is written once.
    """

    id: str
    name: str = ""
    email: str = ""
    phone: str = ""
    resume_file: Optional[ResumeFile] = None
    skills: List[str] = []
    experience: List[str] = []
    education: List[str] = []
    certifications: List[str] = []
    chat_history: List[ChatEntry] = []
    answers: List[Answer] = []
    status: CandidateStatus = CandidateStatus.PENDING
    score: Optional[InterviewScore] = None
    summary: Optional[str] = None
    interview_started_at: Optional[datetime] = None
    interview_completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def missing_fields(self) -> List[str]:
        return missing_fields(self.name, self.email, self.phone)

    @property
    def interview_duration_minutes(self) -> Optional[int]:
        if self.interview_started_at and self.interview_completed_at:
            elapsed = self.interview_completed_at - self.interview_started_at
            return round(elapsed.total_seconds() / 60)
        return None

    def can_transition_to(self, status: CandidateStatus) -> bool:
        if self.status in (CandidateStatus.COMPLETED, CandidateStatus.CANCELLED):
            return False
        if status == CandidateStatus.CANCELLED:
            return True
        return CANDIDATE_STATUS_ORDER.index(status) >= CANDIDATE_STATUS_ORDER.index(self.status)

    def advance_status(self, status: CandidateStatus) -> None:
        if status == self.status:
            return
        if not self.can_transition_to(status):
            raise InvalidTransitionError(
                f"Candidate status cannot move from {self.status.value} to {status.value}"
            )
        self.status = status

    def append_answer(self, answer: Answer) -> None:
        self.answers.append(answer)

    def add_message(self, kind: MessageKind, content: str, timestamp: datetime) -> ChatEntry:
        entry = ChatEntry(kind=kind, content=content, timestamp=timestamp)
        self.chat_history.append(entry)
        return entry

    def complete(self, score: InterviewScore, summary: str, completed_at: datetime) -> None:
        if self.score is not None or self.summary is not None:
            raise InvalidTransitionError("Interview has already been scored")
        self.advance_status(CandidateStatus.COMPLETED)
        self.score = score
        self.summary = summary
        self.interview_completed_at = completed_at


class CandidateUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class ChatMessageCreate(BaseModel):
    kind: MessageKind
    content: str
