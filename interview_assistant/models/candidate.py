from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from datetime import datetime
from interview_assistant.core.database import Base


class Candidate(Base):
    __tablename__ = "candidates"

    id = Column(String, primary_key=True, index=True)

    name = Column(String, default="")
    email = Column(String, default="", index=True)
    phone = Column(String, default="")

    resume_original_name = Column(String, nullable=True)
    resume_mimetype = Column(String, nullable=True)
    resume_size = Column(Integer, nullable=True)
    raw_text = Column(Text, default="")

    skills = Column(JSON, default=list)
    experience = Column(JSON, default=list)
    education = Column(JSON, default=list)
    certifications = Column(JSON, default=list)

    status = Column(String, default="pending", index=True)

    score_overall = Column(Integer, nullable=True)
    score_easy = Column(Integer, nullable=True)
    score_medium = Column(Integer, nullable=True)
    score_hard = Column(Integer, nullable=True)
    summary = Column(Text, nullable=True)

    interview_started_at = Column(DateTime, nullable=True)
    interview_completed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    answers = relationship(
        "CandidateAnswer",
        order_by="CandidateAnswer.position",
        cascade="all, delete-orphan",
    )
    chat_history = relationship(
        "ChatMessage",
        order_by="ChatMessage.position",
        cascade="all, delete-orphan",
    )

    @property
    def score(self):
        if self.score_overall is None:
            return None
        return {
            "overall": self.score_overall,
            "breakdown": {
                "easy": self.score_easy,
                "medium": self.score_medium,
                "hard": self.score_hard,
            },
        }

    @property
    def resume_file(self):
        if not self.resume_original_name:
            return None
        return {
            "original_name": self.resume_original_name,
            "mimetype": self.resume_mimetype,
            "size": self.resume_size,
        }


class CandidateAnswer(Base):
    __tablename__ = "answers"

    id = Column(String, primary_key=True, index=True)
    candidate_id = Column(String, ForeignKey("candidates.id"), index=True)
    position = Column(Integer, nullable=False)

    question_id = Column(String, nullable=False)
    question_text = Column(Text, nullable=False)
    difficulty = Column(String, nullable=False)
    answer = Column(Text, default="")
    time_limit = Column(Integer, nullable=False)
    time_taken = Column(Integer, nullable=False)
    time_expired = Column(Boolean, default=False)

    answered_at = Column(DateTime, default=datetime.utcnow)


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(String, primary_key=True, index=True)
    candidate_id = Column(String, ForeignKey("candidates.id"), index=True)
    position = Column(Integer, nullable=False)

    kind = Column(String, nullable=False)  # user | bot
    content = Column(Text, nullable=False)
    timestamp = Column(DateTime, default=datetime.utcnow)
