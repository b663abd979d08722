from fastapi import APIRouter, Depends

from interview_assistant.api.deps import get_runner, to_http_exception
from interview_assistant.core.config import settings
from interview_assistant.core.errors import InterviewAssistantError
from interview_assistant.schemas.interview import (
    AnswerSubmit,
    DraftUpdate,
    InterviewConfig,
    InterviewCreate,
)
from interview_assistant.services.interview_runner import InterviewRunner

router = APIRouter()


@router.post("/interviews", status_code=201)
async def create_interview(
    payload: InterviewCreate,
    runner: InterviewRunner = Depends(get_runner),
):
    config = payload.configuration or InterviewConfig.from_settings(settings)
    try:
        session = runner.create(payload.candidate_id, config, payload.custom_questions)
    except InterviewAssistantError as e:
        raise to_http_exception(e)
    return {"interview": session.model_dump(mode="json")}


@router.get("/interviews/{session_id}")
async def get_interview(session_id: str, runner: InterviewRunner = Depends(get_runner)):
    try:
        session = runner.get(session_id)
    except InterviewAssistantError as e:
        raise to_http_exception(e)
    return {"interview": session.model_dump(mode="json")}


@router.post("/interviews/{session_id}/start")
async def start_interview(session_id: str, runner: InterviewRunner = Depends(get_runner)):
    try:
        session = runner.start(session_id)
    except InterviewAssistantError as e:
        raise to_http_exception(e)
    return {"interview": session.model_dump(mode="json")}


@router.post("/interviews/{session_id}/answer")
async def submit_answer(
    session_id: str,
    payload: AnswerSubmit,
    runner: InterviewRunner = Depends(get_runner),
):
    try:
        session = runner.submit_answer(
            session_id,
            payload.answer,
            time_expired=payload.time_expired,
            question_id=payload.question_id,
        )
    except InterviewAssistantError as e:
        raise to_http_exception(e)
    return {"interview": session.model_dump(mode="json")}


@router.put("/interviews/{session_id}/draft")
async def save_draft(
    session_id: str,
    payload: DraftUpdate,
    runner: InterviewRunner = Depends(get_runner),
):
    try:
        session = runner.buffer_answer(session_id, payload.text)
    except InterviewAssistantError as e:
        raise to_http_exception(e)
    return {"interview": session.model_dump(mode="json")}


@router.post("/interviews/{session_id}/pause")
async def pause_interview(session_id: str, runner: InterviewRunner = Depends(get_runner)):
    try:
        session = runner.pause(session_id)
    except InterviewAssistantError as e:
        raise to_http_exception(e)
    return {"interview": session.model_dump(mode="json")}


@router.post("/interviews/{session_id}/resume")
async def resume_interview(session_id: str, runner: InterviewRunner = Depends(get_runner)):
    try:
        session = runner.resume(session_id)
    except InterviewAssistantError as e:
        raise to_http_exception(e)
    return {"interview": session.model_dump(mode="json")}


@router.post("/interviews/{session_id}/end")
async def end_interview(session_id: str, runner: InterviewRunner = Depends(get_runner)):
    try:
        session = runner.end(session_id)
    except InterviewAssistantError as e:
        raise to_http_exception(e)
    return {"interview": session.model_dump(mode="json")}


@router.post("/interviews/{session_id}/cancel")
async def cancel_interview(session_id: str, runner: InterviewRunner = Depends(get_runner)):
    try:
        session = runner.cancel(session_id)
    except InterviewAssistantError as e:
        raise to_http_exception(e)
    return {"interview": session.model_dump(mode="json")}
