"""Interview session state machine.

States::

    not-started -> active <-> paused
                     |          |
                     v          v
                 completed    ended          (cancelled from any non-completed state)

Every public operation either raises ``InvalidTransitionError`` or returns
the side effects (see ``session_effects``) that the caller has to perform.
The only state mutated here is the machine's own and the in-memory
``CandidateRecord`` it was given.
"""
import logging
from datetime import datetime
from typing import List, Optional, Sequence
from uuid import uuid4

from interview_assistant.core.clock import Clock, SystemClock
from interview_assistant.core.errors import InvalidTransitionError
from interview_assistant.schemas.candidate import (
    NO_ANSWER_SENTINEL,
    Answer,
    CandidateRecord,
)
from interview_assistant.schemas.interview import (
    CustomQuestion,
    InterviewConfig,
    InterviewSessionView,
    QuestionSnapshot,
)
from interview_assistant.services.question_bank import QuestionBank, build_question_plan
from interview_assistant.services.scoring_engine import calculate_score
from interview_assistant.services.session_effects import (
    AnswerRecorded,
    CandidateStatusChanged,
    ChatMessagePosted,
    InterviewCompleted,
    QuestionPlanBuilt,
    SessionStateChanged,
    TimerStarted,
    TimerStopped,
)
from interview_assistant.services.summary_generator import generate_summary
from interview_assistant.utils.enums import CandidateStatus, MessageKind, SessionStatus
from interview_assistant.utils.helpers import format_time

logger = logging.getLogger(__name__)

STARTABLE_CANDIDATE_STATUSES = (CandidateStatus.PENDING, CandidateStatus.READY_FOR_INTERVIEW)
TIME_UP_MESSAGE = "Time's up! Let's move on to the next question."


class InterviewSessionMachine:
    def __init__(
        self,
        record: CandidateRecord,
        config: Optional[InterviewConfig] = None,
        question_bank: Optional[QuestionBank] = None,
        clock: Optional[Clock] = None,
        session_id: Optional[str] = None,
        custom_questions: Optional[Sequence[CustomQuestion]] = None,
    ):
        self.session_id = session_id or str(uuid4())
        self.record = record
        self.config = config or InterviewConfig()
        self.question_bank = question_bank or QuestionBank()
        self.clock = clock or SystemClock()
        self.custom_questions = list(custom_questions or [])

        self.status = SessionStatus.NOT_STARTED
        self.questions: List[QuestionSnapshot] = []
        self.current_question_index = 0
        self.time_remaining = 0
        self.is_active = False
        self.is_paused = False
        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None
        self.buffered_answer = ""
        self._completed = False

    @classmethod
    def restore(
        cls,
        session_id: str,
        record: CandidateRecord,
        plan: Sequence[QuestionSnapshot],
        config: Optional[InterviewConfig] = None,
        clock: Optional[Clock] = None,
    ) -> "InterviewSessionMachine":
        """Rebuild an interrupted session from its plan and the recorded answers.

        The session comes back paused on the first unanswered question with
        that question's full time limit. A plan that was answered in full
        comes back paused on its last question and has to be finished with
        `finish()`.
        """
        if not plan:
            raise InvalidTransitionError("Interview has no question plan to restore")

        answered_ids = {answer.question_id for answer in record.answers}
        index = next(
            (i for i, question in enumerate(plan) if question.id not in answered_ids),
            None,
        )

        machine = cls(record, config=config, clock=clock, session_id=session_id)
        machine.questions = list(plan)
        if index is None:
            machine.current_question_index = len(plan) - 1
            machine.time_remaining = 0
        else:
            machine.current_question_index = index
            machine.time_remaining = plan[index].time_limit
        machine.status = SessionStatus.PAUSED
        machine.is_active = True
        machine.is_paused = True
        machine.start_time = record.interview_started_at
        logger.info(
            "Restored session %s at question %d (paused)",
            session_id,
            machine.current_question_index + 1,
        )
        return machine

    @property
    def current_question(self) -> Optional[QuestionSnapshot]:
        if not self.is_active or self.current_question_index >= len(self.questions):
            return None
        return self.questions[self.current_question_index]

    @property
    def is_last_question(self) -> bool:
        return self.current_question_index >= len(self.questions) - 1

    @property
    def all_answered(self) -> bool:
        answered_ids = {answer.question_id for answer in self.record.answers}
        return bool(self.questions) and all(q.id in answered_ids for q in self.questions)

    def start(self) -> list:
        if self.status != SessionStatus.NOT_STARTED:
            raise InvalidTransitionError("Interview cannot be started in its current status")
        if self.record.status not in STARTABLE_CANDIDATE_STATUSES:
            raise InvalidTransitionError(
                f"Interview cannot be started for a candidate in status {self.record.status.value}"
            )

        plan = build_question_plan(self.config, self.question_bank, self.custom_questions)
        now = self.clock.now()

        self.questions = plan
        self.current_question_index = 0
        self.time_remaining = plan[0].time_limit
        self.status = SessionStatus.ACTIVE
        self.is_active = True
        self.is_paused = False
        self.start_time = now
        self.end_time = None

        self.record.advance_status(CandidateStatus.IN_PROGRESS)
        self.record.interview_started_at = now

        logger.info(
            "Started session %s for candidate %s with %d questions",
            self.session_id,
            self.record.id,
            len(plan),
        )

        effects = [
            QuestionPlanBuilt(questions=tuple(plan)),
            self._state_changed(),
            CandidateStatusChanged(status=CandidateStatus.IN_PROGRESS, at=now),
        ]
        effects.append(self._post_question(now))
        effects.append(TimerStarted())
        return effects

    def tick(self) -> list:
        # Late or stray ticks after pause/end/completion change nothing.
        if self.status != SessionStatus.ACTIVE:
            return []

        self.time_remaining = max(self.time_remaining - 1, 0)
        if self.time_remaining > 0:
            return []

        logger.info(
            "Time expired on question %d of session %s",
            self.current_question_index + 1,
            self.session_id,
        )
        text = self.buffered_answer.strip() or NO_ANSWER_SENTINEL
        return self._record_answer(text, time_expired=True)

    def submit_answer(
        self,
        text: str,
        time_expired: bool = False,
        question_id: Optional[str] = None,
    ) -> list:
        self.ensure_can_submit(question_id)

        effects = []
        text = (text or "").strip()
        if text:
            # An explicit answer always beats the clock.
            time_expired = False
            effects.append(self._post(MessageKind.USER, text, self.clock.now()))
        elif time_expired:
            text = NO_ANSWER_SENTINEL

        effects.extend(self._record_answer(text, time_expired))
        return effects

    def ensure_can_submit(self, question_id: Optional[str] = None) -> None:
        question = self.current_question
        if self.status != SessionStatus.ACTIVE or question is None:
            raise InvalidTransitionError("There is no active question to answer")
        if question_id is not None and question_id != question.id:
            raise InvalidTransitionError("Answer does not belong to the current question")

    def buffer_answer(self, text: str) -> list:
        if self.status not in (SessionStatus.ACTIVE, SessionStatus.PAUSED):
            raise InvalidTransitionError("Drafts can only be saved during an interview")
        self.buffered_answer = text or ""
        return []

    def pause(self) -> list:
        if self.status != SessionStatus.ACTIVE:
            raise InvalidTransitionError("Only active interviews can be paused")
        self.status = SessionStatus.PAUSED
        self.is_paused = True
        logger.info("Paused session %s with %ds remaining", self.session_id, self.time_remaining)
        return [TimerStopped(), self._state_changed()]

    def resume(self) -> list:
        if self.status != SessionStatus.PAUSED:
            raise InvalidTransitionError("Only paused interviews can be resumed")
        if self.all_answered:
            raise InvalidTransitionError("Every question has been answered already")
        self.status = SessionStatus.ACTIVE
        self.is_paused = False
        logger.info("Resumed session %s with %ds remaining", self.session_id, self.time_remaining)
        return [self._state_changed(), TimerStarted()]

    def end(self) -> list:
        if self.status not in (SessionStatus.ACTIVE, SessionStatus.PAUSED):
            raise InvalidTransitionError("Only active or paused interviews can be ended")
        self.status = SessionStatus.ENDED
        self.is_active = False
        self.is_paused = False
        self.end_time = self.clock.now()
        logger.info("Ended session %s without scoring", self.session_id)
        return [TimerStopped(), self._state_changed()]

    def cancel(self) -> list:
        if self.status in (SessionStatus.COMPLETED, SessionStatus.CANCELLED):
            raise InvalidTransitionError("Interview can no longer be cancelled")
        now = self.clock.now()
        self.status = SessionStatus.CANCELLED
        self.is_active = False
        self.is_paused = False
        self.end_time = self.end_time or now
        self.record.advance_status(CandidateStatus.CANCELLED)
        logger.info("Cancelled session %s", self.session_id)
        return [
            TimerStopped(),
            CandidateStatusChanged(status=CandidateStatus.CANCELLED, at=now),
            self._state_changed(),
        ]

    def finish(self) -> list:
        """Complete a restored session whose plan was answered in full."""
        if self.status != SessionStatus.PAUSED or not self.all_answered:
            raise InvalidTransitionError("Interview still has unanswered questions")
        return self._complete(self.clock.now())

    def snapshot(self) -> InterviewSessionView:
        return InterviewSessionView(
            session_id=self.session_id,
            candidate_id=self.record.id,
            status=self.status,
            questions=self.questions,
            current_question_index=self.current_question_index,
            current_question=self.current_question,
            time_remaining=self.time_remaining,
            is_active=self.is_active,
            is_paused=self.is_paused,
            start_time=self.start_time,
            end_time=self.end_time,
        )

    def _record_answer(self, text: str, time_expired: bool) -> list:
        question = self.current_question
        now = self.clock.now()

        if time_expired:
            time_taken = question.time_limit
        else:
            time_taken = max(question.time_limit - self.time_remaining, 0)

        answer = Answer(
            question_id=question.id,
            question_text=question.text,
            difficulty=question.difficulty,
            answer=text,
            time_limit=question.time_limit,
            time_taken=time_taken,
            time_expired=time_expired,
            answered_at=now,
        )
        self.record.append_answer(answer)
        self.buffered_answer = ""
        effects = [AnswerRecorded(answer=answer)]

        if self.is_last_question:
            effects.extend(self._complete(now))
            return effects

        if time_expired:
            effects.append(self._post(MessageKind.BOT, TIME_UP_MESSAGE, now))

        self.current_question_index += 1
        self.time_remaining = self.current_question.time_limit
        effects.append(self._state_changed())
        effects.append(self._post_question(now))
        effects.append(TimerStarted())
        return effects

    def _complete(self, now: datetime) -> list:
        if self._completed:
            return []
        self._completed = True

        self.status = SessionStatus.COMPLETED
        self.is_active = False
        self.is_paused = False
        self.time_remaining = 0
        self.end_time = now

        if self.record.score is not None:
            # Scored before an interrupted write; only the session row lags.
            self.end_time = self.record.interview_completed_at or now
            logger.info("Session %s was already scored, closing it", self.session_id)
            return [TimerStopped(), self._state_changed()]

        score = calculate_score(self.record.answers)
        summary = generate_summary(self.record.answers, score.overall)
        self.record.complete(score, summary, now)

        logger.info(
            "Completed session %s for candidate %s with score %d",
            self.session_id,
            self.record.id,
            score.overall,
        )

        completion = (
            "Interview complete! Thank you for your time.\n"
            f"Final score: {score.overall}/100\n"
            f"Summary: {summary}"
        )
        return [
            TimerStopped(),
            InterviewCompleted(score=score, summary=summary, completed_at=now),
            self._state_changed(),
            self._post(MessageKind.BOT, completion, now),
        ]

    def _post_question(self, now: datetime) -> ChatMessagePosted:
        question = self.current_question
        content = (
            f"Question {self.current_question_index + 1}/{len(self.questions)} "
            f"({question.difficulty.value}, {format_time(question.time_limit)}): {question.text}"
        )
        return self._post(MessageKind.BOT, content, now)

    def _post(self, kind: MessageKind, content: str, now: datetime) -> ChatMessagePosted:
        return ChatMessagePosted(message=self.record.add_message(kind, content, now))

    def _state_changed(self) -> SessionStateChanged:
        return SessionStateChanged(
            status=self.status,
            current_question_index=self.current_question_index,
            started_at=self.start_time,
            ended_at=self.end_time,
        )
