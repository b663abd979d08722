from sqlalchemy import Column, String, DateTime, Integer, JSON, ForeignKey
from datetime import datetime
from interview_assistant.core.database import Base


class InterviewSession(Base):
    __tablename__ = "interview_sessions"

    id = Column(String, primary_key=True, index=True)
    candidate_id = Column(String, ForeignKey("candidates.id"), index=True)

    # not-started | active | paused | completed | ended | cancelled
    status = Column(String, default="not-started", index=True)

    configuration = Column(JSON, default=dict)
    custom_questions = Column(JSON, default=list)
    questions = Column(JSON, default=list)
    current_question_index = Column(Integer, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    started_at = Column(DateTime, nullable=True)
    ended_at = Column(DateTime, nullable=True)
