from fastapi import HTTPException, Request

from interview_assistant.core.errors import (
    InterviewAssistantError,
    InvalidTransitionError,
    NotFoundError,
)
from interview_assistant.services.interview_runner import InterviewRunner


def get_runner(request: Request) -> InterviewRunner:
    return request.app.state.interview_runner


def to_http_exception(exc: InterviewAssistantError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, InvalidTransitionError):
        return HTTPException(status_code=409, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))
