import logging
import threading
from contextlib import contextmanager
from typing import Callable, Dict, Optional, Sequence

from interview_assistant.core.clock import Clock, SystemClock
from interview_assistant.core.errors import InvalidTransitionError
from interview_assistant.models.interview_session import InterviewSession
from interview_assistant.schemas.interview import (
    CustomQuestion,
    InterviewConfig,
    InterviewSessionView,
)
from interview_assistant.services import candidate_repository, session_repository
from interview_assistant.services.question_bank import QuestionBank
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
from interview_assistant.services.session_machine import InterviewSessionMachine
from interview_assistant.services.session_timer import SessionTimer
from interview_assistant.utils.enums import CandidateStatus, SessionStatus

logger = logging.getLogger(__name__)

CREATABLE_CANDIDATE_STATUSES = (CandidateStatus.PENDING, CandidateStatus.READY_FOR_INTERVIEW)
TERMINAL_SESSION_STATUSES = (
    SessionStatus.COMPLETED,
    SessionStatus.ENDED,
    SessionStatus.CANCELLED,
)


class _LiveSession:
    def __init__(self, machine: InterviewSessionMachine, timer: SessionTimer):
        self.machine = machine
        self.timer = timer
        self.lock = threading.RLock()


class InterviewRunner:
    """Owns the live interview sessions of one application instance.

    Operations on a session are serialised by a per-session lock. The
    runner performs the effects each transition returns: persistence
    through the repositories and timer control through ``SessionTimer``.
    """

    def __init__(
        self,
        session_factory: Callable,
        clock: Optional[Clock] = None,
        question_bank: Optional[QuestionBank] = None,
        tick_interval: float = 1.0,
    ):
        self._session_factory = session_factory
        self._clock = clock or SystemClock()
        self._question_bank = question_bank or QuestionBank()
        self._tick_interval = tick_interval
        self._sessions: Dict[str, _LiveSession] = {}
        self._registry_lock = threading.Lock()

    @contextmanager
    def _db(self):
        db = self._session_factory()
        try:
            yield db
        finally:
            db.close()

    def create(
        self,
        candidate_id: str,
        config: InterviewConfig,
        custom_questions: Sequence[CustomQuestion] = (),
    ) -> InterviewSessionView:
        with self._db() as db:
            record = candidate_repository.load_record(db, candidate_id)
            if record.status not in CREATABLE_CANDIDATE_STATUSES:
                raise InvalidTransitionError(
                    f"Cannot schedule an interview for a candidate in status {record.status.value}"
                )
            if session_repository.find_open_session(db, candidate_id):
                raise InvalidTransitionError("Candidate already has an active interview session")

            machine = InterviewSessionMachine(
                record,
                config=config,
                question_bank=self._question_bank,
                clock=self._clock,
                custom_questions=custom_questions,
            )
            session_repository.create_session(
                db, machine.session_id, candidate_id, config, custom_questions
            )
            record.advance_status(CandidateStatus.READY_FOR_INTERVIEW)
            candidate_repository.save_status(
                db, candidate_id, CandidateStatus.READY_FOR_INTERVIEW, self._clock.now()
            )

        self._register(machine)
        logger.info("Scheduled session %s for candidate %s", machine.session_id, candidate_id)
        return machine.snapshot()

    def get(self, session_id: str) -> InterviewSessionView:
        live = self._sessions.get(session_id)
        if live is not None:
            with live.lock:
                return live.machine.snapshot()

        with self._db() as db:
            return _view_from_row(session_repository.get_session(db, session_id))

    def start(self, session_id: str) -> InterviewSessionView:
        return self._run(session_id, lambda machine: machine.start())

    def submit_answer(
        self,
        session_id: str,
        text: str,
        time_expired: bool = False,
        question_id: Optional[str] = None,
    ) -> InterviewSessionView:
        live = self._live(session_id)
        with live.lock:
            live.machine.ensure_can_submit(question_id)
            # No tick may be pending while an accepted answer is applied.
            live.timer.stop()
            effects = live.machine.submit_answer(text, time_expired, question_id)
            self._apply(live, effects)
            return live.machine.snapshot()

    def buffer_answer(self, session_id: str, text: str) -> InterviewSessionView:
        return self._run(session_id, lambda machine: machine.buffer_answer(text))

    def pause(self, session_id: str) -> InterviewSessionView:
        return self._run(session_id, lambda machine: machine.pause())

    def resume(self, session_id: str) -> InterviewSessionView:
        return self._run(session_id, lambda machine: machine.resume())

    def end(self, session_id: str) -> InterviewSessionView:
        return self._run(session_id, lambda machine: machine.end())

    def cancel(self, session_id: str) -> InterviewSessionView:
        if session_id not in self._sessions:
            with self._db() as db:
                row = session_repository.get_session(db, session_id)
                if SessionStatus(row.status) == SessionStatus.ENDED:
                    return self._cancel_ended(db, row)
        return self._run(session_id, lambda machine: machine.cancel())

    def _cancel_ended(self, db, row: InterviewSession) -> InterviewSessionView:
        # Ended sessions are no longer live, so the records are updated directly.
        record = candidate_repository.load_record(db, row.candidate_id)
        record.advance_status(CandidateStatus.CANCELLED)
        now = self._clock.now()
        candidate_repository.save_status(db, row.candidate_id, CandidateStatus.CANCELLED, now)
        row = session_repository.save_state(
            db,
            row.id,
            SessionStateChanged(
                status=SessionStatus.CANCELLED,
                current_question_index=row.current_question_index or 0,
                ended_at=row.ended_at or now,
            ),
        )
        logger.info("Cancelled ended session %s", row.id)
        return _view_from_row(row)

    def tick(self, session_id: str) -> None:
        live = self._sessions.get(session_id)
        if live is None:
            return
        try:
            with live.lock:
                effects = live.machine.tick()
                if effects:
                    self._apply(live, effects)
        except Exception:
            # Timer callbacks have no caller to report to.
            logger.exception("Tick failed for session %s, reloading it from storage", session_id)
            self._reload(session_id)

    def shutdown(self) -> None:
        with self._registry_lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for live in sessions:
            live.timer.stop()

    def _run(self, session_id: str, operation) -> InterviewSessionView:
        live = self._live(session_id)
        with live.lock:
            effects = operation(live.machine)
            self._apply(live, effects)
            return live.machine.snapshot()

    def _register(self, machine: InterviewSessionMachine) -> _LiveSession:
        session_id = machine.session_id
        timer = SessionTimer(self._clock, lambda: self.tick(session_id), self._tick_interval)
        live = _LiveSession(machine, timer)
        with self._registry_lock:
            self._sessions[session_id] = live
        return live

    def _live(self, session_id: str) -> _LiveSession:
        live = self._sessions.get(session_id)
        if live is not None:
            return live

        with self._db() as db:
            row = session_repository.get_session(db, session_id)
            status = SessionStatus(row.status)
            if status in TERMINAL_SESSION_STATUSES:
                raise InvalidTransitionError(f"Interview session is already {status.value}")

            record = candidate_repository.load_record(db, row.candidate_id)
            config = session_repository.load_config(row)
            if status == SessionStatus.NOT_STARTED:
                machine = InterviewSessionMachine(
                    record,
                    config=config,
                    question_bank=self._question_bank,
                    clock=self._clock,
                    session_id=row.id,
                    custom_questions=session_repository.load_custom_questions(row),
                )
            else:
                machine = InterviewSessionMachine.restore(
                    row.id,
                    record,
                    session_repository.load_plan(row),
                    config=config,
                    clock=self._clock,
                )
            if machine.status == SessionStatus.PAUSED and not machine.all_answered:
                session_repository.save_state(
                    db,
                    row.id,
                    SessionStateChanged(
                        status=machine.status,
                        current_question_index=machine.current_question_index,
                    ),
                )

        with self._registry_lock:
            existing = self._sessions.get(session_id)
        if existing is not None:
            return existing

        live = self._register(machine)
        if machine.status == SessionStatus.PAUSED and machine.all_answered:
            with live.lock:
                self._apply(live, machine.finish())
        return live

    def _reload(self, session_id: str) -> None:
        try:
            self._live(session_id)
        except Exception:
            logger.exception("Could not reload session %s", session_id)

    def _unregister(self, live: _LiveSession) -> None:
        live.timer.stop()
        with self._registry_lock:
            if self._sessions.get(live.machine.session_id) is live:
                del self._sessions[live.machine.session_id]

    def _apply(self, live: _LiveSession, effects: list) -> None:
        machine = live.machine
        candidate_id = machine.record.id
        logger.debug("Applying %d effects for session %s", len(effects), machine.session_id)

        try:
            with self._db() as db:
                for effect in effects:
                    self._apply_one(db, live, candidate_id, effect)
        except Exception:
            # Storage is behind the in-memory machine; rebuild it on next use.
            logger.error("Could not apply effects for session %s, evicting it", machine.session_id)
            self._unregister(live)
            raise

        if machine.status in TERMINAL_SESSION_STATUSES:
            self._unregister(live)

    def _apply_one(self, db, live: _LiveSession, candidate_id: str, effect) -> None:
        session_id = live.machine.session_id
        if isinstance(effect, TimerStarted):
            live.timer.start()
        elif isinstance(effect, TimerStopped):
            live.timer.stop()
        elif isinstance(effect, QuestionPlanBuilt):
            session_repository.save_plan(db, session_id, effect.questions)
        elif isinstance(effect, SessionStateChanged):
            session_repository.save_state(db, session_id, effect)
        elif isinstance(effect, CandidateStatusChanged):
            candidate_repository.save_status(db, candidate_id, effect.status, effect.at)
        elif isinstance(effect, ChatMessagePosted):
            candidate_repository.add_chat_message(db, candidate_id, effect.message)
        elif isinstance(effect, AnswerRecorded):
            candidate_repository.add_answer(db, candidate_id, effect.answer)
        elif isinstance(effect, InterviewCompleted):
            candidate_repository.save_completion(
                db, candidate_id, effect.score, effect.summary, effect.completed_at
            )
        else:
            raise TypeError(f"Unknown session effect: {effect!r}")


def _view_from_row(row: InterviewSession) -> InterviewSessionView:
    """Session as stored, for sessions that are not loaded in this runner."""
    plan = session_repository.load_plan(row)
    status = SessionStatus(row.status)
    index = row.current_question_index or 0

    current_question = None
    if status in (SessionStatus.ACTIVE, SessionStatus.PAUSED) and index < len(plan):
        current_question = plan[index]

    return InterviewSessionView(
        session_id=row.id,
        candidate_id=row.candidate_id,
        status=status,
        questions=plan,
        current_question_index=index,
        current_question=current_question,
        time_remaining=current_question.time_limit if current_question else 0,
        is_active=current_question is not None,
        is_paused=status == SessionStatus.PAUSED,
        start_time=row.started_at,
        end_time=row.ended_at,
    )
