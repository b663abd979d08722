from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from interview_assistant.api.deps import to_http_exception
from interview_assistant.core.database import get_db
from interview_assistant.core.errors import InterviewAssistantError
from interview_assistant.services import candidate_repository
from interview_assistant.services.report_builder import build_interview_report, build_overview

router = APIRouter()


@router.get("/reports/overview")
async def get_overview(db: Session = Depends(get_db)):
    return build_overview(db)


@router.get("/reports/{candidate_id}")
async def get_interview_report(candidate_id: str, db: Session = Depends(get_db)):
    try:
        record = candidate_repository.load_record(db, candidate_id)
    except InterviewAssistantError as e:
        raise to_http_exception(e)
    return build_interview_report(record)
