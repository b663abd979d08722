from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from interview_assistant.api.v1 import candidates, interviews, reports
from interview_assistant.core.clock import Clock
from interview_assistant.core.config import settings
from interview_assistant.core.database import SessionLocal, init_db
from interview_assistant.core.logging import configure_logging
from interview_assistant.services.interview_runner import InterviewRunner
from interview_assistant.services.question_bank import QuestionBank


def create_app(
    session_factory=None,
    clock: Clock = None,
    question_bank: QuestionBank = None,
) -> FastAPI:
    configure_logging(settings.LOG_LEVEL)
    use_default_db = session_factory is None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if use_default_db:
            init_db()
        yield
        app.state.interview_runner.shutdown()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Backend for AI-assisted technical interviews",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.interview_runner = InterviewRunner(
        session_factory or SessionLocal,
        clock=clock,
        question_bank=question_bank,
        tick_interval=settings.TICK_INTERVAL_SECONDS,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check
    @app.get("/health", tags=["Health"])
    async def health_check():
        return {"status": "ok"}

    # API Routers
    app.include_router(candidates.router, prefix=settings.API_V1_PREFIX, tags=["Candidates"])
    app.include_router(interviews.router, prefix=settings.API_V1_PREFIX, tags=["Interviews"])
    app.include_router(reports.router, prefix=settings.API_V1_PREFIX, tags=["Reports"])

    return app


app = create_app()
