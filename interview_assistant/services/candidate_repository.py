from sqlalchemy.orm import Session
from datetime import datetime
from typing import Dict, List, Optional
from uuid import uuid4

from interview_assistant.core.errors import NotFoundError
from interview_assistant.models.candidate import Candidate, CandidateAnswer, ChatMessage
from interview_assistant.schemas.candidate import (
    Answer,
    CandidateRecord,
    ChatEntry,
    ExtractedFields,
    InterviewScore,
)
from interview_assistant.utils.enums import CandidateStatus


def create_candidate(
    db: Session,
    fields: ExtractedFields,
    original_name: Optional[str] = None,
    mimetype: Optional[str] = None,
    size: Optional[int] = None,
) -> Candidate:
    candidate = Candidate(
        id=str(uuid4()),
        name=fields.name or "",
        email=(fields.email or "").lower(),
        phone=fields.phone or "",
        resume_original_name=original_name,
        resume_mimetype=mimetype,
        resume_size=size,
        raw_text=fields.raw_text,
        skills=list(fields.skills),
        experience=list(fields.experience),
        education=list(fields.education),
        certifications=list(fields.certifications),
        status=CandidateStatus.PENDING.value,
    )
    db.add(candidate)
    db.commit()
    db.refresh(candidate)
    return candidate


def get_candidate(db: Session, candidate_id: str) -> Candidate:
    candidate = db.query(Candidate).filter_by(id=candidate_id).first()
    if not candidate:
        raise NotFoundError("Candidate not found")
    return candidate


def load_record(db: Session, candidate_id: str) -> CandidateRecord:
    return CandidateRecord.model_validate(get_candidate(db, candidate_id))


def list_candidates(
    db: Session,
    status: Optional[CandidateStatus] = None,
    search: Optional[str] = None,
) -> List[Candidate]:
    query = db.query(Candidate)
    if status:
        query = query.filter(Candidate.status == status.value)
    if search:
        pattern = f"%{search}%"
        query = query.filter(Candidate.name.ilike(pattern) | Candidate.email.ilike(pattern))
    return query.order_by(Candidate.created_at.desc()).all()


def update_candidate(db: Session, candidate_id: str, updates: Dict[str, str]) -> Candidate:
    candidate = get_candidate(db, candidate_id)
    for field, value in updates.items():
        setattr(candidate, field, value)
    db.commit()
    db.refresh(candidate)
    return candidate


def add_chat_message(db: Session, candidate_id: str, message: ChatEntry) -> ChatMessage:
    candidate = get_candidate(db, candidate_id)
    row = ChatMessage(
        id=str(uuid4()),
        candidate_id=candidate.id,
        position=len(candidate.chat_history),
        kind=message.kind.value,
        content=message.content,
        timestamp=message.timestamp,
    )
    db.add(row)
    db.commit()
    return row


def add_answer(db: Session, candidate_id: str, answer: Answer) -> CandidateAnswer:
    candidate = get_candidate(db, candidate_id)
    row = CandidateAnswer(
        id=str(uuid4()),
        candidate_id=candidate.id,
        position=len(candidate.answers),
        question_id=answer.question_id,
        question_text=answer.question_text,
        difficulty=answer.difficulty.value,
        answer=answer.answer,
        time_limit=answer.time_limit,
        time_taken=answer.time_taken,
        time_expired=answer.time_expired,
        answered_at=answer.answered_at,
    )
    db.add(row)
    db.commit()
    return row


def save_status(db: Session, candidate_id: str, status: CandidateStatus, at: datetime) -> Candidate:
    candidate = get_candidate(db, candidate_id)
    candidate.status = status.value
    if status == CandidateStatus.IN_PROGRESS and candidate.interview_started_at is None:
        candidate.interview_started_at = at
    db.commit()
    return candidate


def save_completion(
    db: Session,
    candidate_id: str,
    score: InterviewScore,
    summary: str,
    completed_at: datetime,
) -> Candidate:
    candidate = get_candidate(db, candidate_id)
    candidate.status = CandidateStatus.COMPLETED.value
    candidate.score_overall = score.overall
    candidate.score_easy = score.breakdown.easy
    candidate.score_medium = score.breakdown.medium
    candidate.score_hard = score.breakdown.hard
    candidate.summary = summary
    candidate.interview_completed_at = completed_at
    db.commit()
    return candidate
