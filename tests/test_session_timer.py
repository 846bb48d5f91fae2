"""Tests for the workout session timer state machine.

Covers:
- Full runs (elapsed total, completion callback, single-exercise plans)
- Lead-in countdown on start and resume
- Pause semantics and ticks while paused
- skip_rest / extend_rest behaviour and invalid transitions
- quit, completion failures and plan validation
"""

import pytest
from pydantic import ValidationError

from models.schemas import ExerciseSpec, SessionPhase, WorkoutPlan
from models.session_timer import InvalidPlanError, SessionTimer


def run_ticks(timer: SessionTimer, count: int):
    for _ in range(count):
        timer.tick()


def run_to_completion(timer: SessionTimer, limit: int = 10_000) -> int:
    ticks = 0
    while not timer.is_finished and ticks < limit:
        timer.tick()
        ticks += 1
    return ticks


@pytest.fixture
def completions():
    return []


@pytest.fixture
def timer(two_exercise_plan, completions) -> SessionTimer:
    return SessionTimer(two_exercise_plan, on_complete=completions.append, lead_in_seconds=0)


def test_initial_state(timer):
    assert timer.phase == SessionPhase.NOT_STARTED
    assert timer.current_exercise_index == 0
    assert timer.time_left_in_phase == 30
    assert timer.total_elapsed_seconds == 0
    assert timer.is_paused is True


def test_tick_before_start_is_noop(timer):
    assert timer.tick() is False
    assert timer.time_left_in_phase == 30
    assert timer.total_elapsed_seconds == 0


def test_two_exercise_walkthrough(timer, completions):
    assert timer.start() is True
    assert timer.phase == SessionPhase.ACTIVE
    assert timer.is_paused is False

    run_ticks(timer, 30)
    assert timer.phase == SessionPhase.RESTING
    assert timer.time_left_in_phase == 20

    run_ticks(timer, 20)
    assert timer.phase == SessionPhase.ACTIVE
    assert timer.current_exercise_index == 1
    assert timer.time_left_in_phase == 45

    run_ticks(timer, 45)
    assert timer.phase == SessionPhase.COMPLETED
    assert timer.total_elapsed_seconds == 95

    assert len(completions) == 1
    record = completions[0]
    assert record.totalElapsedSeconds == 95
    assert record.caloriesEstimate == 150
    assert [r.exerciseId for r in record.exerciseRecords] == ["ex_0", "ex_1"]
    assert record.exerciseRecords[0].sets == 3
    assert record.exerciseRecords[0].reps == 10
    assert record.exerciseRecords[1].duration == 45


@pytest.mark.parametrize(
    "durations, rest",
    [
        ([10], 0),
        ([10], 30),
        ([5, 5, 5], 0),
        ([30, 45, 60], 15),
        ([1, 2, 3, 4, 5], 7),
    ],
)
def test_full_run_elapsed_equals_work_plus_rest(plan_factory, durations, rest):
    timer = SessionTimer(plan_factory(durations, rest=rest), lead_in_seconds=0)
    timer.start()
    run_to_completion(timer)

    assert timer.phase == SessionPhase.COMPLETED
    assert timer.total_elapsed_seconds == sum(durations) + rest * (len(durations) - 1)


def test_single_exercise_plan_never_rests(plan_factory, completions):
    timer = SessionTimer(plan_factory([10], rest=30), on_complete=completions.append,
                         lead_in_seconds=0)
    phases = []
    timer.add_listener(lambda old, new, state: phases.append(new))

    timer.start()
    run_ticks(timer, 10)

    assert timer.phase == SessionPhase.COMPLETED
    assert SessionPhase.RESTING not in phases
    assert phases == [SessionPhase.ACTIVE, SessionPhase.COMPLETED]
    assert len(completions) == 1


def test_zero_rest_passes_through_on_next_tick(plan_factory):
    timer = SessionTimer(plan_factory([3, 4], rest=0), lead_in_seconds=0)
    timer.start()
    run_ticks(timer, 3)
    assert timer.phase == SessionPhase.RESTING
    assert timer.time_left_in_phase == 0

    timer.tick()
    assert timer.phase == SessionPhase.ACTIVE
    assert timer.current_exercise_index == 1
    assert timer.time_left_in_phase == 4
    assert timer.total_elapsed_seconds == 3


def test_completion_callback_invoked_once(timer, completions):
    timer.start()
    run_to_completion(timer)
    assert timer.tick() is False
    run_ticks(timer, 10)
    assert len(completions) == 1


def test_exercise_index_is_monotonic_and_bounded(plan_factory):
    plan = plan_factory([3, 2, 4, 1], rest=2)
    timer = SessionTimer(plan, lead_in_seconds=0)
    timer.start()

    seen = [timer.current_exercise_index]
    while not timer.is_finished:
        timer.tick()
        seen.append(timer.current_exercise_index)

    assert seen == sorted(seen)
    assert max(seen) == len(plan.exercises) - 1


# ----------------------------------------------------------------------
# Lead-in and pause
# ----------------------------------------------------------------------

def test_start_runs_lead_in_countdown(two_exercise_plan):
    timer = SessionTimer(two_exercise_plan, lead_in_seconds=3)
    timer.start()
    assert timer.phase == SessionPhase.COUNTING_DOWN
    assert timer.countdown_value == 3
    assert timer.is_paused is True

    run_ticks(timer, 2)
    assert timer.phase == SessionPhase.COUNTING_DOWN
    assert timer.countdown_value == 1

    timer.tick()
    assert timer.phase == SessionPhase.ACTIVE
    assert timer.is_paused is False
    assert timer.countdown_value is None
    # The lead-in never eats into the exercise or the elapsed total
    assert timer.time_left_in_phase == 30
    assert timer.total_elapsed_seconds == 0


def test_ticks_while_paused_change_nothing(timer):
    timer.start()
    run_ticks(timer, 5)
    assert timer.pause() is True

    before = (timer.time_left_in_phase, timer.total_elapsed_seconds)
    results = [timer.tick() for _ in range(10)]

    assert results == [False] * 10
    assert (timer.time_left_in_phase, timer.total_elapsed_seconds) == before
    assert before == (25, 5)


def test_resume_returns_to_resting_through_lead_in(two_exercise_plan):
    timer = SessionTimer(two_exercise_plan, lead_in_seconds=3)
    timer.start()
    run_ticks(timer, 3)
    run_ticks(timer, 30)
    assert timer.phase == SessionPhase.RESTING

    run_ticks(timer, 5)
    timer.pause()
    assert timer.resume() is True
    assert timer.phase == SessionPhase.COUNTING_DOWN

    run_ticks(timer, 3)
    assert timer.phase == SessionPhase.RESTING
    assert timer.is_paused is False
    assert timer.time_left_in_phase == 15
    assert timer.total_elapsed_seconds == 35


def test_start_on_paused_session_resumes(two_exercise_plan):
    timer = SessionTimer(two_exercise_plan, lead_in_seconds=3)
    timer.start()
    run_ticks(timer, 3)
    timer.pause()

    assert timer.start() is True
    assert timer.phase == SessionPhase.COUNTING_DOWN


def test_pause_during_lead_in_cancels_countdown(two_exercise_plan):
    timer = SessionTimer(two_exercise_plan, lead_in_seconds=3)
    timer.start()
    timer.tick()

    assert timer.pause() is True
    assert timer.phase == SessionPhase.ACTIVE
    assert timer.is_paused is True
    assert timer.countdown_value is None
    assert timer.tick() is False


def test_invalid_start_and_resume_are_noops(timer):
    assert timer.resume() is False
    assert timer.pause() is False
    timer.start()
    assert timer.start() is False
    assert timer.resume() is False
    assert timer.phase == SessionPhase.ACTIVE


# ----------------------------------------------------------------------
# Rest controls
# ----------------------------------------------------------------------

@pytest.mark.parametrize("ticks_into_rest", [0, 5, 19])
def test_skip_rest_matches_ticking_through(two_exercise_plan, ticks_into_rest):
    skipped = SessionTimer(two_exercise_plan, lead_in_seconds=0)
    ticked = SessionTimer(two_exercise_plan, lead_in_seconds=0)
    for timer in (skipped, ticked):
        timer.start()
        run_ticks(timer, 30 + ticks_into_rest)
        assert timer.phase == SessionPhase.RESTING

    remaining = skipped.time_left_in_phase
    assert skipped.skip_rest() is True
    run_ticks(ticked, remaining)

    assert skipped.snapshot() == ticked.snapshot()
    assert skipped.phase == SessionPhase.ACTIVE
    assert skipped.current_exercise_index == 1


def test_skip_zero_length_rest(plan_factory):
    timer = SessionTimer(plan_factory([3, 4], rest=0), lead_in_seconds=0)
    timer.start()
    run_ticks(timer, 3)

    assert timer.skip_rest() is True
    assert timer.phase == SessionPhase.ACTIVE
    assert timer.total_elapsed_seconds == 3


def test_extend_rest_adds_time_without_elapsed(timer):
    timer.start()
    run_ticks(timer, 32)
    assert timer.time_left_in_phase == 18
    elapsed = timer.total_elapsed_seconds

    assert timer.extend_rest(15) is True
    assert timer.time_left_in_phase == 33
    assert timer.total_elapsed_seconds == elapsed


def test_extend_rest_uses_configured_default(timer, isolated_config):
    isolated_config.default_extend_seconds = 15
    timer.start()
    run_ticks(timer, 30)

    timer.extend_rest()
    assert timer.time_left_in_phase == 35


def test_rest_controls_ignored_while_active(timer):
    timer.start()
    run_ticks(timer, 10)
    before = timer.snapshot()

    assert timer.skip_rest() is False
    assert timer.extend_rest(15) is False
    assert timer.snapshot() == before


def test_extend_rest_rejects_non_positive_delta(timer):
    timer.start()
    run_ticks(timer, 30)
    assert timer.extend_rest(0) is False
    assert timer.extend_rest(-5) is False
    assert timer.time_left_in_phase == 20


# ----------------------------------------------------------------------
# Quit, failures, validation
# ----------------------------------------------------------------------

def test_quit_discards_without_recording(timer, completions):
    timer.start()
    run_ticks(timer, 40)

    assert timer.quit() is True
    assert timer.phase == SessionPhase.QUIT
    snapshot = timer.snapshot()

    run_ticks(timer, 200)
    assert timer.snapshot() == snapshot
    assert completions == []
    assert timer.quit() is False
    assert timer.start() is False
    assert timer.skip_rest() is False


def test_quit_before_start(timer, completions):
    assert timer.quit() is True
    assert timer.tick() is False
    assert completions == []


def test_completion_failure_keeps_session_completed(plan_factory):
    def failing_recorder(record):
        raise RuntimeError("database offline")

    timer = SessionTimer(plan_factory([2]), on_complete=failing_recorder, lead_in_seconds=0)
    timer.start()
    run_ticks(timer, 2)

    assert timer.phase == SessionPhase.COMPLETED
    assert timer.completion_error == "database offline"
    assert timer.snapshot().completionError == "database offline"
    assert timer.completion_record.totalElapsedSeconds == 2


def test_listener_failure_does_not_break_transitions(timer):
    def broken_listener(old, new, state):
        raise ValueError("render failed")

    timer.add_listener(broken_listener)
    timer.start()
    run_ticks(timer, 30)
    assert timer.phase == SessionPhase.RESTING


def test_listener_receives_transitions(timer):
    events = []
    timer.add_listener(lambda old, new, state: events.append((old, new, state.phase)))
    timer.start()
    run_ticks(timer, 30)

    assert events == [
        (SessionPhase.NOT_STARTED, SessionPhase.ACTIVE, SessionPhase.ACTIVE),
        (SessionPhase.ACTIVE, SessionPhase.RESTING, SessionPhase.RESTING),
    ]


def test_empty_plan_is_rejected():
    with pytest.raises(ValidationError):
        WorkoutPlan(id="empty", name="Empty", exercises=[])

    unchecked = WorkoutPlan.model_construct(id="empty", name="Empty", exercises=[])
    with pytest.raises(InvalidPlanError):
        SessionTimer(unchecked)


def test_non_positive_duration_is_rejected(plan_factory):
    with pytest.raises(ValidationError):
        plan_factory([0])

    unchecked = WorkoutPlan.model_construct(
        id="zero",
        name="Zero",
        exercises=[
            ExerciseSpec.model_construct(id="plank", name="Plank", duration=30),
            ExerciseSpec.model_construct(id="hold", name="Hold", duration=0),
        ],
        restBetweenExercises=10,
    )
    with pytest.raises(InvalidPlanError, match="hold"):
        SessionTimer(unchecked)


def test_snapshot_for_rendering(timer):
    timer.start()
    run_ticks(timer, 5)
    state = timer.snapshot()
    assert state.timeLeftDisplay == "0:25"
    assert state.currentExerciseName == "Exercise 0"
    assert state.exerciseCount == 2

    run_ticks(timer, 25)
    state = timer.snapshot()
    assert state.phase == SessionPhase.RESTING
    assert state.currentExerciseName is None
    assert "2/2" in state.motivation
