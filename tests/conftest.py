import random
from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from interview_assistant.core.clock import ManualClock
from interview_assistant.core.database import get_db, init_db
from interview_assistant.main import create_app
from interview_assistant.schemas.candidate import Answer, CandidateRecord, ExtractedFields
from interview_assistant.services import candidate_repository
from interview_assistant.services.interview_runner import InterviewRunner
from interview_assistant.services.question_bank import QuestionBank
from interview_assistant.utils.enums import Difficulty


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return ManualClock(start=datetime(2024, 5, 1, 10, 0, 0))


@pytest.fixture
def question_bank():
    return QuestionBank(rng=random.Random(7))


@pytest.fixture
def runner(session_factory, clock, question_bank):
    runner = InterviewRunner(session_factory, clock=clock, question_bank=question_bank)
    yield runner
    runner.shutdown()


@pytest.fixture
def candidate(db):
    fields = ExtractedFields(
        name="Jane Doe",
        email="jane.doe@example.com",
        phone="(555) 987-6543",
        skills=["python", "react"],
        raw_text="Jane Doe\njane.doe@example.com",
    )
    return candidate_repository.create_candidate(db, fields, original_name="jane.pdf")


@pytest.fixture
def client(session_factory, clock, question_bank):
    app = create_app(session_factory=session_factory, clock=clock, question_bank=question_bank)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def record():
    return CandidateRecord(id="cand-1", name="Jane Doe", email="jane.doe@example.com")


def make_answer(
    difficulty: Difficulty,
    text: str = "",
    time_taken: int = 10,
    time_limit: int = 20,
    time_expired: bool = False,
) -> Answer:
    return Answer(
        question_id=f"{difficulty.value}-1",
        question_text="Explain something.",
        difficulty=difficulty,
        answer=text,
        time_limit=time_limit,
        time_taken=time_taken,
        time_expired=time_expired,
        answered_at=datetime(2024, 5, 1, 10, 0, 0),
    )


def words(count: int) -> str:
    return " ".join(["word"] * count)
