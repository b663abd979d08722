import pytest

from conftest import words
from interview_assistant.core.errors import InvalidTransitionError, NotFoundError
from interview_assistant.schemas.candidate import NO_ANSWER_SENTINEL
from interview_assistant.schemas.interview import InterviewConfig
from interview_assistant.services import candidate_repository, session_repository
from interview_assistant.services.interview_runner import InterviewRunner
from interview_assistant.utils.enums import CandidateStatus, MessageKind, SessionStatus

ONE_PER_TIER = InterviewConfig(easy_questions=1, medium_questions=1, hard_questions=1)


def stored_record(db, candidate_id):
    db.expire_all()
    return candidate_repository.load_record(db, candidate_id)


def stored_session(db, session_id):
    db.expire_all()
    return session_repository.get_session(db, session_id)


def test_create_schedules_session_and_marks_candidate_ready(runner, db, candidate):
    view = runner.create(candidate.id, ONE_PER_TIER)

    assert view.status == SessionStatus.NOT_STARTED
    assert view.questions == []
    assert stored_record(db, candidate.id).status == CandidateStatus.READY_FOR_INTERVIEW
    assert stored_session(db, view.session_id).status == SessionStatus.NOT_STARTED.value


def test_create_rejects_second_open_session(runner, candidate):
    runner.create(candidate.id, ONE_PER_TIER)
    with pytest.raises(InvalidTransitionError):
        runner.create(candidate.id, ONE_PER_TIER)


def test_create_for_unknown_candidate(runner):
    with pytest.raises(NotFoundError):
        runner.create("missing", ONE_PER_TIER)


def test_get_unknown_session(runner):
    with pytest.raises(NotFoundError):
        runner.get("missing")


def test_start_persists_plan_and_first_question(runner, db, candidate, clock):
    session_id = runner.create(candidate.id, ONE_PER_TIER).session_id

    view = runner.start(session_id)

    assert view.status == SessionStatus.ACTIVE
    assert view.time_remaining == 20
    assert clock.pending == 1

    row = stored_session(db, session_id)
    assert row.status == SessionStatus.ACTIVE.value
    assert [q["id"] for q in row.questions] == [q.id for q in view.questions]
    assert row.started_at == clock.now()

    record = stored_record(db, candidate.id)
    assert record.status == CandidateStatus.IN_PROGRESS
    assert record.interview_started_at == clock.now()
    assert len(record.chat_history) == 1
    assert record.chat_history[0].content.startswith("Question 1/3 (easy, 00:20): ")


def test_clock_expiry_records_answer_and_advances(runner, db, candidate, clock):
    session_id = runner.create(candidate.id, ONE_PER_TIER).session_id
    runner.start(session_id)

    clock.advance(19)
    assert runner.get(session_id).time_remaining == 1
    clock.advance(1)

    view = runner.get(session_id)
    assert view.current_question_index == 1
    assert view.time_remaining == 60

    record = stored_record(db, candidate.id)
    assert [a.answer for a in record.answers] == [NO_ANSWER_SENTINEL]
    assert record.answers[0].time_expired is True
    assert [entry.kind for entry in record.chat_history] == [MessageKind.BOT] * 3
    assert stored_session(db, session_id).current_question_index == 1


def test_draft_is_recorded_on_expiry(runner, db, candidate, clock):
    session_id = runner.create(candidate.id, ONE_PER_TIER).session_id
    runner.start(session_id)

    runner.buffer_answer(session_id, "let is block scoped")
    clock.advance(20)

    record = stored_record(db, candidate.id)
    assert record.answers[0].answer == "let is block scoped"
    assert record.answers[0].time_expired is True


def test_pause_stops_the_clock(runner, candidate, clock):
    session_id = runner.create(candidate.id, ONE_PER_TIER).session_id
    runner.start(session_id)
    clock.advance(5)

    view = runner.pause(session_id)
    clock.advance(100)

    assert view.is_paused is True
    assert clock.pending == 0
    assert runner.get(session_id).time_remaining == 15
    with pytest.raises(InvalidTransitionError):
        runner.pause(session_id)

    runner.resume(session_id)
    clock.advance(1)
    assert runner.get(session_id).time_remaining == 14


def test_completion_persists_score_and_releases_session(runner, db, candidate, clock):
    session_id = runner.create(candidate.id, ONE_PER_TIER).session_id
    runner.start(session_id)

    for _ in range(3):
        clock.advance(5)
        view = runner.submit_answer(session_id, words(30))

    assert view.status == SessionStatus.COMPLETED
    assert clock.pending == 0

    record = stored_record(db, candidate.id)
    assert record.status == CandidateStatus.COMPLETED
    assert record.score is not None
    assert record.score.overall == 99
    assert record.summary.startswith("Candidate completed 3/3 questions with a score of 99/100.")
    assert record.interview_duration_minutes == 0
    assert len(record.answers) == 3
    assert [a.time_taken for a in record.answers] == [5, 5, 5]
    assert record.chat_history[-1].content.startswith("Interview complete!")

    row_view = runner.get(session_id)
    assert row_view.status == SessionStatus.COMPLETED
    assert row_view.is_active is False
    assert row_view.end_time == clock.now()

    runner.tick(session_id)
    with pytest.raises(InvalidTransitionError):
        runner.submit_answer(session_id, "too late")
    assert len(stored_record(db, candidate.id).answers) == 3


def test_stale_answer_is_rejected(runner, db, candidate):
    session_id = runner.create(candidate.id, ONE_PER_TIER).session_id
    first = runner.start(session_id).current_question
    runner.submit_answer(session_id, "first", question_id=first.id)

    with pytest.raises(InvalidTransitionError):
        runner.submit_answer(session_id, "again", question_id=first.id)
    assert len(stored_record(db, candidate.id).answers) == 1


def test_end_keeps_answers_without_scoring(runner, db, candidate, clock):
    session_id = runner.create(candidate.id, ONE_PER_TIER).session_id
    runner.start(session_id)
    runner.submit_answer(session_id, "one answer")

    view = runner.end(session_id)

    assert view.status == SessionStatus.ENDED
    assert clock.pending == 0
    record = stored_record(db, candidate.id)
    assert record.status == CandidateStatus.IN_PROGRESS
    assert record.score is None
    assert len(record.answers) == 1
    assert stored_session(db, session_id).ended_at == clock.now()
    with pytest.raises(InvalidTransitionError):
        runner.resume(session_id)


def test_cancel_marks_candidate_cancelled(runner, db, candidate):
    session_id = runner.create(candidate.id, ONE_PER_TIER).session_id
    runner.start(session_id)

    view = runner.cancel(session_id)

    assert view.status == SessionStatus.CANCELLED
    assert stored_record(db, candidate.id).status == CandidateStatus.CANCELLED
    assert stored_session(db, session_id).status == SessionStatus.CANCELLED.value
    with pytest.raises(InvalidTransitionError):
        runner.create(candidate.id, ONE_PER_TIER)


def test_cancel_before_start(runner, db, candidate):
    session_id = runner.create(candidate.id, ONE_PER_TIER).session_id

    runner.cancel(session_id)

    assert stored_record(db, candidate.id).status == CandidateStatus.CANCELLED


def test_restart_restores_session_paused(runner, session_factory, db, candidate, clock, question_bank):
    session_id = runner.create(candidate.id, ONE_PER_TIER).session_id
    plan = runner.start(session_id).questions
    clock.advance(8)
    runner.submit_answer(session_id, "first answer")
    clock.advance(10)
    runner.shutdown()

    restarted = InterviewRunner(session_factory, clock=clock, question_bank=question_bank)
    try:
        # Mutating calls restore the session; the first one finds it paused.
        with pytest.raises(InvalidTransitionError):
            restarted.pause(session_id)
        assert stored_session(db, session_id).status == SessionStatus.PAUSED.value

        view = restarted.get(session_id)
        assert view.status == SessionStatus.PAUSED
        assert view.current_question == plan[1]
        assert view.time_remaining == plan[1].time_limit

        view = restarted.resume(session_id)
        assert view.status == SessionStatus.ACTIVE
        clock.advance(plan[1].time_limit)

        record = stored_record(db, candidate.id)
        assert [a.question_id for a in record.answers] == [plan[0].id, plan[1].id]
        assert record.answers[1].time_expired is True
        assert restarted.get(session_id).current_question == plan[2]
    finally:
        restarted.shutdown()


def test_restart_before_start_keeps_session_startable(runner, session_factory, candidate, clock, question_bank):
    session_id = runner.create(candidate.id, ONE_PER_TIER).session_id
    runner.shutdown()

    restarted = InterviewRunner(session_factory, clock=clock, question_bank=question_bank)
    try:
        assert restarted.get(session_id).status == SessionStatus.NOT_STARTED
        assert restarted.start(session_id).status == SessionStatus.ACTIVE
    finally:
        restarted.shutdown()


def test_cancel_after_end(runner, db, candidate, clock):
    session_id = runner.create(candidate.id, ONE_PER_TIER).session_id
    runner.start(session_id)
    clock.advance(3)
    runner.end(session_id)
    ended_at = clock.now()
    clock.advance(60)

    view = runner.cancel(session_id)

    assert view.status == SessionStatus.CANCELLED
    assert view.end_time == ended_at
    assert stored_record(db, candidate.id).status == CandidateStatus.CANCELLED
    with pytest.raises(InvalidTransitionError):
        runner.cancel(session_id)


def fail_once(monkeypatch, module, name):
    original = getattr(module, name)
    calls = []

    def failing(*args, **kwargs):
        calls.append(args)
        if len(calls) == 1:
            raise RuntimeError("database is unavailable")
        return original(*args, **kwargs)

    monkeypatch.setattr(module, name, failing)
    return calls


def test_get_after_restart_reads_stored_state(runner, session_factory, db, candidate, clock, question_bank):
    session_id = runner.create(candidate.id, ONE_PER_TIER).session_id
    plan = runner.start(session_id).questions
    runner.submit_answer(session_id, "first answer")
    runner.shutdown()

    restarted = InterviewRunner(session_factory, clock=clock, question_bank=question_bank)
    try:
        view = restarted.get(session_id)

        assert view.status == SessionStatus.ACTIVE
        assert view.current_question_index == 1
        assert view.current_question == plan[1]
        assert view.time_remaining == plan[1].time_limit
        assert view.is_active is True
        assert view.is_paused is False
        assert stored_session(db, session_id).status == SessionStatus.ACTIVE.value
        assert clock.pending == 0
    finally:
        restarted.shutdown()


def test_rejected_submissions_do_not_hold_the_clock(runner, db, candidate, clock):
    session_id = runner.create(candidate.id, ONE_PER_TIER).session_id
    runner.start(session_id)

    for _ in range(18):
        clock.advance(0.9)
        with pytest.raises(InvalidTransitionError):
            runner.submit_answer(session_id, "x", question_id="not-current")

    view = runner.get(session_id)
    assert view.status == SessionStatus.ACTIVE
    assert view.current_question_index == 0
    assert view.time_remaining == 4
    assert clock.pending == 1
    assert stored_record(db, candidate.id).answers == []


def test_rejected_submission_while_paused_keeps_timer_stopped(runner, candidate, clock):
    session_id = runner.create(candidate.id, ONE_PER_TIER).session_id
    runner.start(session_id)
    runner.pause(session_id)

    with pytest.raises(InvalidTransitionError):
        runner.submit_answer(session_id, "x")

    assert clock.pending == 0
    assert runner.get(session_id).time_remaining == 20


def test_failed_completion_write_is_completed_on_next_call(monkeypatch, runner, db, candidate, clock):
    session_id = runner.create(candidate.id, ONE_PER_TIER).session_id
    runner.start(session_id)
    calls = fail_once(monkeypatch, candidate_repository, "save_completion")

    for _ in range(2):
        clock.advance(5)
        runner.submit_answer(session_id, words(30))
    clock.advance(5)
    with pytest.raises(RuntimeError):
        runner.submit_answer(session_id, words(30))

    assert clock.pending == 0
    assert stored_record(db, candidate.id).score is None

    with pytest.raises(InvalidTransitionError):
        runner.submit_answer(session_id, "retry")

    assert len(calls) == 2
    record = stored_record(db, candidate.id)
    assert record.status == CandidateStatus.COMPLETED
    assert record.score.overall == 99
    assert len(record.answers) == 3
    assert record.chat_history[-1].content.startswith("Interview complete!")
    assert stored_session(db, session_id).status == SessionStatus.COMPLETED.value
    assert runner.get(session_id).status == SessionStatus.COMPLETED
    assert clock.pending == 0


def test_failed_completion_write_is_completed_after_restart(
    monkeypatch, runner, session_factory, db, candidate, clock, question_bank
):
    session_id = runner.create(candidate.id, ONE_PER_TIER).session_id
    runner.start(session_id)
    fail_once(monkeypatch, candidate_repository, "save_completion")
    runner.submit_answer(session_id, words(30))
    runner.submit_answer(session_id, words(30))
    with pytest.raises(RuntimeError):
        runner.submit_answer(session_id, words(30))
    runner.shutdown()

    restarted = InterviewRunner(session_factory, clock=clock, question_bank=question_bank)
    try:
        assert restarted.get(session_id).status == SessionStatus.ACTIVE
        with pytest.raises(InvalidTransitionError):
            restarted.cancel(session_id)
    finally:
        restarted.shutdown()

    record = stored_record(db, candidate.id)
    assert record.status == CandidateStatus.COMPLETED
    assert record.score is not None
    assert stored_session(db, session_id).status == SessionStatus.COMPLETED.value


def test_scored_session_with_unsaved_state_is_closed(monkeypatch, runner, db, candidate, clock):
    session_id = runner.create(candidate.id, ONE_PER_TIER).session_id
    runner.start(session_id)
    runner.submit_answer(session_id, words(30))
    runner.submit_answer(session_id, words(30))
    completed_at = clock.now()
    fail_once(monkeypatch, session_repository, "save_state")
    with pytest.raises(RuntimeError):
        runner.submit_answer(session_id, words(30))
    assert stored_session(db, session_id).status == SessionStatus.ACTIVE.value
    clock.advance(30)

    with pytest.raises(InvalidTransitionError):
        runner.pause(session_id)

    record = stored_record(db, candidate.id)
    assert record.status == CandidateStatus.COMPLETED
    assert record.interview_completed_at == completed_at
    assert not any(entry.content.startswith("Interview complete!") for entry in record.chat_history)
    row = stored_session(db, session_id)
    assert row.status == SessionStatus.COMPLETED.value
    assert row.ended_at == completed_at


def test_failed_tick_write_reloads_session_paused(monkeypatch, runner, db, candidate, clock, caplog):
    session_id = runner.create(candidate.id, ONE_PER_TIER).session_id
    plan = runner.start(session_id).questions
    fail_once(monkeypatch, candidate_repository, "add_answer")

    clock.advance(20)

    assert "Tick failed for session" in caplog.text
    view = runner.get(session_id)
    assert view.status == SessionStatus.PAUSED
    assert view.current_question_index == 0
    assert view.time_remaining == plan[0].time_limit
    assert clock.pending == 0
    assert stored_record(db, candidate.id).answers == []
    assert stored_session(db, session_id).status == SessionStatus.PAUSED.value

    runner.resume(session_id)
    clock.advance(plan[0].time_limit)

    record = stored_record(db, candidate.id)
    assert [a.question_id for a in record.answers] == [plan[0].id]
    assert record.answers[0].time_expired is True
    view = runner.get(session_id)
    assert view.current_question_index == 1
    assert view.status == SessionStatus.ACTIVE
    assert clock.pending == 1
