from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from interview_assistant.core.config import settings


def _connect_args(url: str) -> dict:
    # Timer callbacks and request handlers may use different threads.
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    future=True,
    connect_args=_connect_args(settings.DATABASE_URL),
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

Base = declarative_base()


def init_db(bind=None) -> None:
    # Import models so they register on Base.metadata
    from interview_assistant.models import candidate, interview_session  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
