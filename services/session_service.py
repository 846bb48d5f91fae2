import asyncio
import time
import uuid
from typing import Dict, Optional

from config import config
from utils.logging_utils import logger
from models import catalog
from models.schemas import CompletionRecord, SessionPhase, SessionState
from models.session_timer import RUNNING_PHASES, SessionTimer
from services.debug_service import debug_service
from services.progress_service import progress_service


class ManagedSession:
    """A running session timer plus the bookkeeping the service needs around it"""

    def __init__(self, session_id: str, user_id: str, timer: SessionTimer):
        self.session_id = session_id
        self.user_id = user_id
        self.timer = timer
        self.clock_task: Optional[asyncio.Task] = None
        self.last_activity = time.monotonic()  # Last control call, for the idle timeout
        self.finished_at: Optional[float] = None  # When the session was first seen finished

    def touch(self):
        self.last_activity = time.monotonic()

    @property
    def is_idle(self) -> bool:
        """Waiting on the user: never started, or paused outside the lead-in"""
        timer = self.timer
        return timer.phase == SessionPhase.NOT_STARTED or (
            timer.phase in RUNNING_PHASES and timer.is_paused
        )


class SessionService:
    """
    Registry of live workout sessions and the 1-second clock that drives them.
    Each running session gets its own asyncio ticking task when auto_tick is enabled;
    otherwise clients advance the clock through tick().

    Completed sessions are kept for config.completed_retention_seconds so clients can
    read the final summary, then evicted. Sessions left unstarted or paused longer than
    config.idle_timeout_seconds are dropped without recording anything.
    """

    CONTROLS = ("start", "pause", "resume", "skip_rest", "extend_rest", "tick")

    def __init__(self):
        self.sessions: Dict[str, ManagedSession] = {}

    def create_session(self, plan_id: str, user_id: Optional[str] = None,
                       lead_in_seconds: Optional[int] = None) -> SessionTimer:
        """
        Create a session for a catalog plan.
        Raises KeyError for an unknown plan and InvalidPlanError for an unrunnable one.
        """
        self.prune_expired()
        plan = catalog.get_plan(plan_id)
        session_id = uuid.uuid4().hex[:12]
        user_id = user_id or config.default_user_id

        timer = SessionTimer(
            plan,
            on_complete=lambda record: self._record_completion(session_id, record),
            lead_in_seconds=lead_in_seconds,
            session_id=session_id,
        )
        timer.add_listener(debug_service.save_transition)

        self.sessions[session_id] = ManagedSession(session_id, user_id, timer)
        logger.info(f"Session {session_id} created for user {user_id} (plan={plan_id})")
        return timer

    def get_session(self, session_id: str) -> SessionTimer:
        self.prune_expired()
        return self._get(session_id).timer

    def control(self, session_id: str, action: str, *args) -> SessionState:
        """
        Apply a control command and return the resulting state.
        Commands that have no effect in the current phase come back with applied=False.
        The command that finishes a session receives its final state even when the
        session is evicted right away.
        """
        if action not in self.CONTROLS:
            raise ValueError(f"Unknown session control '{action}'")

        self.prune_expired()
        managed = self._get(session_id)
        applied = getattr(managed.timer, action)(*args)
        managed.touch()

        if applied and action in ("start", "resume"):
            # Every lead-in starts a fresh 1-second cadence
            self._restart_clock(managed)
        elif applied and action == "pause":
            self._stop_clock(managed)

        state = managed.timer.snapshot(applied=applied)
        if managed.timer.is_finished:
            self._mark_finished(managed)
        return state

    def quit_session(self, session_id: str) -> SessionState:
        """Quit and discard a session; later lookups raise KeyError"""
        managed = self._get(session_id)
        applied = managed.timer.quit()
        state = managed.timer.snapshot(applied=applied)
        self.discard_session(session_id)
        return state

    def discard_session(self, session_id: str):
        managed = self.sessions.pop(session_id, None)
        if managed is None:
            raise KeyError(f"Session '{session_id}' not found")
        self._stop_clock(managed)
        logger.info(f"Session {session_id} discarded ({managed.timer.phase.value})")

    def prune_expired(self, now: Optional[float] = None) -> int:
        """Evict completed sessions past retention and idle sessions past the timeout"""
        now = time.monotonic() if now is None else now
        expired = []
        for session_id, managed in self.sessions.items():
            if managed.timer.is_finished:
                if managed.finished_at is None:
                    # Finished by its own clock; start the retention window now
                    managed.finished_at = now
                if now - managed.finished_at >= config.completed_retention_seconds:
                    expired.append(session_id)
            elif managed.is_idle and now - managed.last_activity >= config.idle_timeout_seconds:
                logger.info(f"Session {session_id} idle for {now - managed.last_activity:.0f}s")
                expired.append(session_id)

        for session_id in expired:
            self.discard_session(session_id)
        return len(expired)

    async def shutdown(self):
        """Cancel every clock task; used on application shutdown"""
        tasks = []
        for managed in self.sessions.values():
            if managed.clock_task is not None:
                tasks.append(managed.clock_task)
            self._stop_clock(managed)
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self.sessions.clear()

    def _get(self, session_id: str) -> ManagedSession:
        try:
            return self.sessions[session_id]
        except KeyError:
            raise KeyError(f"Session '{session_id}' not found") from None

    def _record_completion(self, session_id: str, record: CompletionRecord):
        managed = self._get(session_id)
        progress_service.complete_workout(managed.user_id, managed.timer.plan.id, record)

    def _mark_finished(self, managed: ManagedSession):
        if managed.finished_at is None:
            managed.finished_at = time.monotonic()
        self._stop_clock(managed)
        if config.completed_retention_seconds <= 0 and managed.session_id in self.sessions:
            self.discard_session(managed.session_id)

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------

    def _restart_clock(self, managed: ManagedSession):
        self._stop_clock(managed)
        if not config.auto_tick:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"No running event loop; session {managed.session_id} needs manual ticks")
            return
        managed.clock_task = loop.create_task(self._run_clock(managed))

    def _stop_clock(self, managed: ManagedSession):
        if managed.clock_task is not None:
            managed.clock_task.cancel()
            managed.clock_task = None

    async def _run_clock(self, managed: ManagedSession):
        """Tick the session once per interval until it completes or is quit"""
        timer = managed.timer
        try:
            while not timer.is_finished:
                await asyncio.sleep(config.tick_interval)
                timer.tick()
        except asyncio.CancelledError:
            logger.info(f"Clock stopped for session {managed.session_id}")
            raise
        finally:
            if managed.clock_task is asyncio.current_task():
                managed.clock_task = None

# Global service instance
session_service = SessionService()
