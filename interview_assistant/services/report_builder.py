from sqlalchemy import func
from sqlalchemy.orm import Session

from interview_assistant.models.candidate import Candidate
from interview_assistant.schemas.candidate import CandidateRecord
from interview_assistant.services.summary_generator import determine_performance_tier, is_answered
from interview_assistant.utils.enums import CandidateStatus, Difficulty
from interview_assistant.utils.helpers import format_duration


def build_interview_report(record: CandidateRecord) -> dict:
    answers = record.answers
    answered = sum(1 for answer in answers if is_answered(answer))
    expired = sum(1 for answer in answers if answer.time_expired)

    duration = None
    if record.interview_started_at and record.interview_completed_at:
        elapsed = record.interview_completed_at - record.interview_started_at
        duration = format_duration(int(elapsed.total_seconds()))

    # Interpretation (Static)
    interpretation = {}
    breakdown = record.score.breakdown if record.score else None

    if breakdown is not None:
        for difficulty in Difficulty:
            value = getattr(breakdown, difficulty.value)
            if value is not None:
                interpretation[difficulty.value] = (
                    f"Scored {value}/100 on {difficulty.value} questions"
                )

    if expired > 0:
        interpretation["timing"] = f"Time expired on {expired} of {len(answers)} questions"

    return {
        "candidate_id": record.id,

        "candidate": {
            "name": record.name,
            "email": record.email,
            "phone": record.phone,
            "skills": record.skills,
            "status": record.status.value,
        },

        "summary": {
            "overall_score": record.score.overall if record.score else None,
            "rating": determine_performance_tier(record.score.overall).lower() if record.score else None,
            "breakdown": breakdown.model_dump() if breakdown else None,
            "assessment": record.summary,
            "questions_answered": answered,
            "questions_total": len(answers),
            "duration": duration,
        },

        "answers": [
            {
                "question": answer.question_text,
                "difficulty": answer.difficulty.value,
                "answer": answer.answer,
                "time_taken": answer.time_taken,
                "time_limit": answer.time_limit,
                "time_expired": answer.time_expired,
            }
            for answer in answers
        ],

        "transcript": [
            {
                "kind": message.kind.value,
                "content": message.content,
                "timestamp": message.timestamp.isoformat(),
            }
            for message in record.chat_history
        ],

        "interpretation": interpretation,

        "final_decision_note": (
            "Scores are heuristic and based on answer length and timing. "
            "Final interview decisions should always be made by the interviewer."
        ),
    }


def build_overview(db: Session) -> dict:
    counts = dict(
        db.query(Candidate.status, func.count(Candidate.id))
        .group_by(Candidate.status)
        .all()
    )
    average = (
        db.query(func.avg(Candidate.score_overall))
        .filter(Candidate.score_overall.isnot(None))
        .scalar()
    )

    return {
        "total": sum(counts.values()),
        "by_status": {status.value: counts.get(status.value, 0) for status in CandidateStatus},
        "average_score": round(average) if average is not None else None,
    }
