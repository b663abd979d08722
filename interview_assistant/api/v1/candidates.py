import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from interview_assistant.api.deps import to_http_exception
from interview_assistant.core.config import settings
from interview_assistant.core.database import get_db
from interview_assistant.core.errors import InputMalformedError, InterviewAssistantError
from interview_assistant.schemas.candidate import (
    CandidateRecord,
    CandidateUpdate,
    ChatMessageCreate,
)
from interview_assistant.services import candidate_repository
from interview_assistant.services.document_converter import convert_document
from interview_assistant.services.text_extractor import extract_resume_data
from interview_assistant.utils.enums import CandidateStatus
from interview_assistant.utils.helpers import (
    format_phone,
    sanitize_input,
    validate_email,
    validate_phone,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _candidate_payload(record: CandidateRecord, detailed: bool = True) -> dict:
    exclude = None if detailed else {"chat_history", "answers"}
    payload = record.model_dump(mode="json", exclude=exclude)
    payload["missing_fields"] = record.missing_fields
    payload["interview_duration_minutes"] = record.interview_duration_minutes
    return payload


@router.post("/candidates", status_code=201)
async def upload_resume(
    resume: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    try:
        content = await resume.read()
    finally:
        await resume.close()

    try:
        if not content:
            raise InputMalformedError("Please upload a resume file")
        if len(content) > settings.MAX_RESUME_BYTES:
            raise InputMalformedError("Resume file is too large")

        text = convert_document(content, resume.content_type)
        fields = extract_resume_data(text)
        candidate = candidate_repository.create_candidate(
            db,
            fields,
            original_name=resume.filename,
            mimetype=resume.content_type,
            size=len(content),
        )
    except InterviewAssistantError as e:
        logger.warning("Rejected resume upload %s: %s", resume.filename, e)
        raise to_http_exception(e)

    record = CandidateRecord.model_validate(candidate)
    logger.info("Created candidate %s from %s", record.id, resume.filename)
    return {
        "candidate": _candidate_payload(record),
        "missing_fields": record.missing_fields,
        "requires_info_collection": bool(record.missing_fields),
    }


@router.get("/candidates")
async def list_candidates(
    status: Optional[CandidateStatus] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
):
    candidates = candidate_repository.list_candidates(db, status=status, search=search)
    return {
        "candidates": [
            _candidate_payload(CandidateRecord.model_validate(c), detailed=False)
            for c in candidates
        ],
        "total": len(candidates),
    }


@router.get("/candidates/{candidate_id}")
async def get_candidate(candidate_id: str, db: Session = Depends(get_db)):
    try:
        record = candidate_repository.load_record(db, candidate_id)
    except InterviewAssistantError as e:
        raise to_http_exception(e)
    return {"candidate": _candidate_payload(record)}


@router.put("/candidates/{candidate_id}")
async def update_candidate(
    candidate_id: str,
    payload: CandidateUpdate,
    db: Session = Depends(get_db),
):
    updates = {}

    if payload.name:
        name = sanitize_input(payload.name)
        if len(name) < 2:
            raise HTTPException(status_code=400, detail="Name must be at least 2 characters long")
        updates["name"] = name

    if payload.email:
        if not validate_email(payload.email):
            raise HTTPException(status_code=400, detail="Please provide a valid email address")
        updates["email"] = payload.email.strip().lower()

    if payload.phone:
        if not validate_phone(payload.phone):
            raise HTTPException(status_code=400, detail="Please provide a valid phone number")
        updates["phone"] = format_phone(payload.phone)

    try:
        candidate = candidate_repository.update_candidate(db, candidate_id, updates)
    except InterviewAssistantError as e:
        raise to_http_exception(e)

    record = CandidateRecord.model_validate(candidate)
    return {
        "candidate": _candidate_payload(record, detailed=False),
        "missing_fields": record.missing_fields,
    }


@router.post("/candidates/{candidate_id}/chat", status_code=201)
async def add_chat_message(
    candidate_id: str,
    payload: ChatMessageCreate,
    db: Session = Depends(get_db),
):
    content = sanitize_input(payload.content)
    if not content:
        raise HTTPException(status_code=400, detail="Message content is required")

    try:
        record = candidate_repository.load_record(db, candidate_id)
        message = record.add_message(payload.kind, content, datetime.utcnow())
        candidate_repository.add_chat_message(db, candidate_id, message)
    except InterviewAssistantError as e:
        raise to_http_exception(e)

    return {"chat_message": message.model_dump(mode="json")}
