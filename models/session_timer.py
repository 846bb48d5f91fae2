# session_timer.py
"""
Workout session timer driven by a 1-second tick.
Walks a fixed exercise list through lead-in, active and rest phases to completion,
and hands a single completion record to the recorder when the last exercise ends.
"""

from typing import Callable, List, Optional

from config import config
from utils.logging_utils import logger
from utils.fitness_math import format_time
from utils.motivation import get_motivation_text
from models.schemas import (
    CompletionRecord,
    ExerciseRecord,
    ExerciseSpec,
    SessionPhase,
    SessionState,
    WorkoutPlan,
)

CompletionCallback = Callable[[CompletionRecord], None]
PhaseListener = Callable[[SessionPhase, SessionPhase, SessionState], None]

# Phases in which the tick counts down the current exercise or rest
RUNNING_PHASES = (SessionPhase.ACTIVE, SessionPhase.RESTING)


class InvalidPlanError(ValueError):
    """Raised when a workout plan cannot be run (no exercises or a non-positive duration)"""


class SessionTimer:
    """
    Session state machine: NOT_STARTED -> COUNTING_DOWN -> ACTIVE <-> RESTING -> COMPLETED.
    quit() moves any non-terminal session to QUIT without recording anything.

    All transitions happen inside tick() and the control methods; nothing here
    touches a clock, so the caller decides how ticks are delivered.
    Control methods return True when applied and False when the call has no
    effect in the current phase.
    """

    def __init__(self, plan: WorkoutPlan, on_complete: Optional[CompletionCallback] = None,
                 lead_in_seconds: Optional[int] = None, session_id: Optional[str] = None):
        if not plan.exercises:
            raise InvalidPlanError(f"Workout plan '{plan.id}' has no exercises")
        for exercise in plan.exercises:
            if exercise.duration <= 0:
                raise InvalidPlanError(
                    f"Exercise '{exercise.id}' in plan '{plan.id}' has non-positive duration"
                )

        self.plan = plan.model_copy(deep=True)
        self.session_id = session_id
        self.on_complete = on_complete
        if lead_in_seconds is None:
            lead_in_seconds = config.lead_in_seconds
        self.lead_in_seconds = max(0, int(lead_in_seconds))

        self.current_exercise_index = 0
        self.phase = SessionPhase.NOT_STARTED
        self.time_left_in_phase = self.plan.exercises[0].duration
        self.total_elapsed_seconds = 0
        self.is_paused = True
        self.countdown_value: Optional[int] = None

        self.completion_record: Optional[CompletionRecord] = None
        self.completion_error: Optional[str] = None

        self._resume_phase = SessionPhase.ACTIVE  # Phase entered when the lead-in ends
        self._listeners: List[PhaseListener] = []

        logger.info(
            f"SessionTimer created for plan '{self.plan.id}' "
            f"({self.exercise_count} exercises, rest {self.plan.restBetweenExercises}s)"
        )

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def exercise_count(self) -> int:
        return len(self.plan.exercises)

    @property
    def current_exercise(self) -> ExerciseSpec:
        return self.plan.exercises[self.current_exercise_index]

    @property
    def is_last_exercise(self) -> bool:
        return self.current_exercise_index == self.exercise_count - 1

    @property
    def is_finished(self) -> bool:
        return self.phase.is_terminal

    def snapshot(self, applied: bool = True) -> SessionState:
        """Read-only view of the current state for rendering"""
        # Exercise name is hidden while resting and once the session is over
        showing_exercise = (
            self.phase in (SessionPhase.NOT_STARTED, SessionPhase.ACTIVE)
            or (self.phase == SessionPhase.COUNTING_DOWN and self._resume_phase == SessionPhase.ACTIVE)
        )

        return SessionState(
            sessionId=self.session_id,
            planId=self.plan.id,
            phase=self.phase,
            currentExerciseIndex=self.current_exercise_index,
            exerciseCount=self.exercise_count,
            currentExerciseName=self.current_exercise.name if showing_exercise else None,
            timeLeftInPhase=self.time_left_in_phase,
            timeLeftDisplay=format_time(self.time_left_in_phase),
            totalElapsedSeconds=self.total_elapsed_seconds,
            isPaused=self.is_paused,
            countdownValue=self.countdown_value,
            motivation=get_motivation_text(
                self.phase, self.current_exercise_index, self.exercise_count, self.countdown_value
            ),
            completionError=self.completion_error,
            applied=applied,
        )

    def add_listener(self, listener: PhaseListener):
        """Register a callable notified with (old_phase, new_phase, snapshot) on every phase change"""
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """Begin the session with the lead-in countdown; on a paused session this resumes"""
        if self.phase == SessionPhase.NOT_STARTED:
            return self._begin_lead_in(SessionPhase.ACTIVE)
        if self.phase in RUNNING_PHASES and self.is_paused:
            return self.resume()
        return self._reject("start")

    def pause(self) -> bool:
        if self.phase == SessionPhase.COUNTING_DOWN:
            # Abandon the lead-in and stay paused in the phase it was leading into
            self.countdown_value = None
            self._set_phase(self._resume_phase)
            return True
        if self.phase in RUNNING_PHASES and not self.is_paused:
            self.is_paused = True
            logger.info(f"Session {self.session_id} paused with {self.time_left_in_phase}s left")
            return True
        return self._reject("pause")

    def resume(self) -> bool:
        """Resume a paused session through the lead-in countdown"""
        if self.phase in RUNNING_PHASES and self.is_paused:
            return self._begin_lead_in(self.phase)
        return self._reject("resume")

    def skip_rest(self) -> bool:
        """
        Finish the current rest immediately.
        Equivalent to ticking through the remaining rest: the skipped seconds are
        credited to the elapsed total and the next exercise becomes active.
        """
        if self.phase != SessionPhase.RESTING:
            return self._reject("skip_rest")

        remaining = self.time_left_in_phase
        self.total_elapsed_seconds += remaining
        self.time_left_in_phase = 0
        logger.info(f"Session {self.session_id} skipped {remaining}s of rest")
        self._advance()
        return True

    def extend_rest(self, delta_seconds: Optional[int] = None) -> bool:
        """Add time to the current rest (the "+15s" control)"""
        if delta_seconds is None:
            delta_seconds = config.default_extend_seconds
        if self.phase != SessionPhase.RESTING or delta_seconds <= 0:
            return self._reject("extend_rest")

        self.time_left_in_phase += int(delta_seconds)
        logger.info(
            f"Session {self.session_id} rest extended by {delta_seconds}s "
            f"({self.time_left_in_phase}s left)"
        )
        return True

    def quit(self) -> bool:
        """Abandon the session; no completion record is produced"""
        if self.phase.is_terminal:
            return self._reject("quit")

        self.is_paused = True
        self.countdown_value = None
        logger.info(
            f"Session {self.session_id} quit at exercise {self.current_exercise_index + 1}"
            f"/{self.exercise_count} after {self.total_elapsed_seconds}s"
        )
        self._set_phase(SessionPhase.QUIT)
        return True

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------

    def tick(self) -> bool:
        """
        Advance the session by one second.
        Returns False when the tick had no effect (paused, not started, or finished).
        """
        if self.phase == SessionPhase.COUNTING_DOWN:
            self.countdown_value -= 1
            if self.countdown_value <= 0:
                self.countdown_value = None
                self.is_paused = False
                self._set_phase(self._resume_phase)
            return True

        if self.is_paused or self.phase not in RUNNING_PHASES:
            return False

        # A zero-length rest passes straight through without counting a second
        if self.time_left_in_phase > 0:
            self.time_left_in_phase -= 1
            self.total_elapsed_seconds += 1

        if self.time_left_in_phase == 0:
            self._advance()
        return True

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _begin_lead_in(self, target: SessionPhase) -> bool:
        self._resume_phase = target
        if self.lead_in_seconds == 0:
            self.is_paused = False
            self._set_phase(target)
            return True

        self.countdown_value = self.lead_in_seconds
        self._set_phase(SessionPhase.COUNTING_DOWN)
        return True

    def _advance(self):
        """Leave the current phase once its time has run out"""
        if self.phase == SessionPhase.ACTIVE:
            if self.is_last_exercise:
                self._complete()
            else:
                self.time_left_in_phase = self.plan.restBetweenExercises
                self._set_phase(SessionPhase.RESTING)

        elif self.phase == SessionPhase.RESTING:
            self.current_exercise_index += 1
            self.time_left_in_phase = self.current_exercise.duration
            self._set_phase(SessionPhase.ACTIVE)

    def _complete(self):
        if self.completion_record is not None:
            return

        old_phase = self.phase
        self.phase = SessionPhase.COMPLETED
        self.time_left_in_phase = 0
        self.completion_record = self.build_completion_record()
        logger.info(
            f"Session {self.session_id} completed plan '{self.plan.id}' "
            f"in {self.total_elapsed_seconds}s"
        )

        if self.on_complete is not None:
            try:
                self.on_complete(self.completion_record)
            except Exception as e:
                # The session stays completed locally even if recording failed
                self.completion_error = str(e) or e.__class__.__name__
                logger.error(f"Error recording completion for session {self.session_id}: {e}")

        self._notify(old_phase, SessionPhase.COMPLETED)

    def build_completion_record(self) -> CompletionRecord:
        """Completion payload marking every exercise in the plan as done"""
        return CompletionRecord(
            totalElapsedSeconds=self.total_elapsed_seconds,
            caloriesEstimate=self.plan.calories,
            exerciseRecords=[
                ExerciseRecord(
                    exerciseId=exercise.id,
                    sets=exercise.sets,
                    reps=exercise.reps,
                    duration=exercise.duration,
                )
                for exercise in self.plan.exercises
            ],
        )

    def _set_phase(self, new_phase: SessionPhase):
        old_phase = self.phase
        if old_phase == new_phase:
            return
        self.phase = new_phase
        logger.info(
            f"Session {self.session_id}: {old_phase.value.upper()} -> {new_phase.value.upper()} "
            f"(exercise {self.current_exercise_index + 1}/{self.exercise_count}, "
            f"{self.time_left_in_phase}s left)"
        )
        self._notify(old_phase, new_phase)

    def _notify(self, old_phase: SessionPhase, new_phase: SessionPhase):
        if not self._listeners:
            return
        state = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(old_phase, new_phase, state)
            except Exception as e:
                logger.error(f"Phase listener failed for session {self.session_id}: {e}")

    def _reject(self, control: str) -> bool:
        logger.info(
            f"Ignored {control} for session {self.session_id} in phase {self.phase.value}"
            f"{' (paused)' if self.is_paused else ''}"
        )
        return False
