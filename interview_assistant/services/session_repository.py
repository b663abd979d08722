from sqlalchemy.orm import Session
from typing import List, Optional, Sequence

from interview_assistant.core.errors import NotFoundError
from interview_assistant.models.interview_session import InterviewSession
from interview_assistant.schemas.interview import (
    CustomQuestion,
    InterviewConfig,
    QuestionSnapshot,
)
from interview_assistant.services.session_effects import SessionStateChanged
from interview_assistant.utils.enums import SessionStatus

OPEN_SESSION_STATUSES = (
    SessionStatus.NOT_STARTED.value,
    SessionStatus.ACTIVE.value,
    SessionStatus.PAUSED.value,
)


def create_session(
    db: Session,
    session_id: str,
    candidate_id: str,
    config: InterviewConfig,
    custom_questions: Sequence[CustomQuestion] = (),
) -> InterviewSession:
    session = InterviewSession(
        id=session_id,
        candidate_id=candidate_id,
        status=SessionStatus.NOT_STARTED.value,
        configuration=config.model_dump(),
        custom_questions=[question.model_dump(mode="json") for question in custom_questions],
        questions=[],
        current_question_index=0,
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def get_session(db: Session, session_id: str) -> InterviewSession:
    session = db.query(InterviewSession).filter_by(id=session_id).first()
    if not session:
        raise NotFoundError("Interview session not found")
    return session


def find_open_session(db: Session, candidate_id: str) -> Optional[InterviewSession]:
    return (
        db.query(InterviewSession)
        .filter(InterviewSession.candidate_id == candidate_id)
        .filter(InterviewSession.status.in_(OPEN_SESSION_STATUSES))
        .first()
    )


def save_plan(db: Session, session_id: str, plan: Sequence[QuestionSnapshot]) -> InterviewSession:
    session = get_session(db, session_id)
    session.questions = [question.model_dump(mode="json") for question in plan]
    db.commit()
    return session


def save_state(db: Session, session_id: str, change: SessionStateChanged) -> InterviewSession:
    session = get_session(db, session_id)
    session.status = change.status.value
    session.current_question_index = change.current_question_index
    if change.started_at is not None:
        session.started_at = change.started_at
    if change.ended_at is not None:
        session.ended_at = change.ended_at
    db.commit()
    return session


def load_plan(session: InterviewSession) -> List[QuestionSnapshot]:
    return [QuestionSnapshot.model_validate(question) for question in session.questions or []]


def load_config(session: InterviewSession) -> InterviewConfig:
    return InterviewConfig.model_validate(session.configuration or {})


def load_custom_questions(session: InterviewSession) -> List[CustomQuestion]:
    return [CustomQuestion.model_validate(question) for question in session.custom_questions or []]
