from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "AI Interview Assistant"
    API_V1_PREFIX: str = "/api/v1"

    DATABASE_URL: str = "sqlite:///./interview_assistant.db"
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # Interview defaults
    TICK_INTERVAL_SECONDS: float = 1.0
    EASY_QUESTIONS: int = 2
    MEDIUM_QUESTIONS: int = 2
    HARD_QUESTIONS: int = 2
    EASY_TIME_LIMIT: int = 20
    MEDIUM_TIME_LIMIT: int = 60
    HARD_TIME_LIMIT: int = 120

    MAX_RESUME_BYTES: int = 10 * 1024 * 1024

    class Config:
        env_file = ".env"


settings = Settings()
