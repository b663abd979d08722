from enum import Enum


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class CandidateStatus(str, Enum):
    PENDING = "pending"
    READY_FOR_INTERVIEW = "ready-for-interview"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SessionStatus(str, Enum):
    NOT_STARTED = "not-started"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    ENDED = "ended"
    CANCELLED = "cancelled"


class MessageKind(str, Enum):
    USER = "user"
    BOT = "bot"


# Forward order of candidate statuses; CANCELLED sits outside it.
CANDIDATE_STATUS_ORDER = [
    CandidateStatus.PENDING,
    CandidateStatus.READY_FOR_INTERVIEW,
    CandidateStatus.IN_PROGRESS,
    CandidateStatus.COMPLETED,
]
