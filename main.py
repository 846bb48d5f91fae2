# main.py
import time
from datetime import date
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Form, Query
from fastapi.middleware.cors import CORSMiddleware

from config import config
from utils.logging_utils import logger, apply_log_level
from models import catalog
from models.schemas import (
    BodyMetrics,
    Goal,
    GoalType,
    ProgressEntry,
    ProgressSummary,
    SessionState,
    WorkoutHistoryEntry,
    WorkoutPlan,
)
from models.session_timer import InvalidPlanError
from services.session_service import session_service
from services.progress_service import progress_service

# Initialize application configuration from command line arguments
config.setup_from_args()
apply_log_level()

logger.info(f"Starting in: {config.mode_description}")

# Initialize FastAPI application with dynamic title based on mode
app = FastAPI(title=f"Fitness Session Backend - {config.mode_description}")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)


def _not_found(e: KeyError) -> HTTPException:
    return HTTPException(status_code=404, detail=e.args[0] if e.args else "Not found")


@app.on_event("startup")
async def startup_event():
    """Log the catalog and clock settings the server is running with"""
    logger.info(f"Loaded {len(catalog.WORKOUT_PLANS)} workout plans")
    logger.info(
        f"Clock: {'auto' if config.auto_tick else 'manual'} ticks every {config.tick_interval}s, "
        f"lead-in {config.lead_in_seconds}s"
    )

@app.on_event("shutdown")
async def shutdown_event():
    """Stop every running session clock"""
    await session_service.shutdown()

@app.get("/health")
async def health_check():
    """Simple health check endpoint for service monitoring"""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "activeSessions": len(session_service.sessions),
    }

# ----------------------------------------------------------------------
# Workout catalog
# ----------------------------------------------------------------------

@app.get("/workouts", response_model=List[WorkoutPlan])
async def list_workouts(
    category: Optional[str] = None,
    difficulty: Optional[str] = None,
    goal_type: Optional[GoalType] = Query(None, alias="goalType"),
):
    """List catalog plans, optionally filtered"""
    return catalog.list_plans(category=category, difficulty=difficulty, goal_type=goal_type)

@app.get("/workouts/quick-start", response_model=WorkoutPlan)
async def quick_start_workout():
    """Plan used by the quick-start screen"""
    return catalog.get_quick_start_plan()

@app.get("/workouts/{plan_id}", response_model=WorkoutPlan)
async def get_workout(plan_id: str):
    try:
        return catalog.get_plan(plan_id)
    except KeyError as e:
        raise _not_found(e)

# ----------------------------------------------------------------------
# Sessions
# ----------------------------------------------------------------------

@app.post("/sessions", response_model=SessionState)
async def create_session(
    plan_id: str = Form(...),
    user_id: Optional[str] = Form(None),
):
    """Create a session for a catalog plan; it waits in NOT_STARTED until /start"""
    try:
        timer = session_service.create_session(plan_id, user_id)
        return timer.snapshot()

    except KeyError as e:
        raise _not_found(e)
    except InvalidPlanError as e:
        logger.warning(f"Refusing to create session for plan '{plan_id}': {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error creating session: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@app.get("/sessions/{session_id}", response_model=SessionState)
async def get_session(session_id: str):
    try:
        return session_service.get_session(session_id).snapshot()
    except KeyError as e:
        raise _not_found(e)

def _control(session_id: str, action: str, *args) -> SessionState:
    """Run a control command, mapping lookup failures to 404"""
    try:
        state = session_service.control(session_id, action, *args)
        if not state.applied:
            logger.info(f"{action} had no effect on session {session_id} ({state.phase.value})")
        return state

    except KeyError as e:
        raise _not_found(e)
    except Exception as e:
        logger.error(f"Error applying {action} to session {session_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

@app.post("/sessions/{session_id}/start", response_model=SessionState)
async def start_session(session_id: str):
    return _control(session_id, "start")

@app.post("/sessions/{session_id}/pause", response_model=SessionState)
async def pause_session(session_id: str):
    return _control(session_id, "pause")

@app.post("/sessions/{session_id}/resume", response_model=SessionState)
async def resume_session(session_id: str):
    return _control(session_id, "resume")

@app.post("/sessions/{session_id}/skip_rest", response_model=SessionState)
async def skip_rest(session_id: str):
    return _control(session_id, "skip_rest")

@app.post("/sessions/{session_id}/extend_rest", response_model=SessionState)
async def extend_rest(session_id: str, seconds: Optional[int] = Form(None)):
    """Add time to the current rest; defaults to the configured +15s"""
    return _control(session_id, "extend_rest", seconds)

@app.post("/sessions/{session_id}/tick", response_model=SessionState)
async def tick_session(session_id: str):
    """Advance the session clock by one second (manual clock mode)"""
    return _control(session_id, "tick")

@app.post("/sessions/{session_id}/quit", response_model=SessionState)
async def quit_session(session_id: str):
    """Quit without recording; the session is discarded"""
    try:
        return session_service.quit_session(session_id)
    except KeyError as e:
        raise _not_found(e)

@app.delete("/sessions/{session_id}")
async def discard_session(session_id: str):
    """Forget a finished session once the client has shown its summary"""
    try:
        session_service.discard_session(session_id)
        return {"status": "discarded", "sessionId": session_id}
    except KeyError as e:
        raise _not_found(e)

# ----------------------------------------------------------------------
# History & progress
# ----------------------------------------------------------------------

@app.get("/users/{user_id}/workouts", response_model=List[WorkoutHistoryEntry])
async def user_workouts(user_id: str):
    return progress_service.get_user_workouts(user_id)

@app.get("/users/{user_id}/summary", response_model=ProgressSummary)
async def user_summary(user_id: str):
    """Streak, total minutes and goal progress for the home screen"""
    return progress_service.get_summary(user_id)

@app.get("/users/{user_id}/progress", response_model=List[ProgressEntry])
async def user_progress(user_id: str, goal_type: Optional[GoalType] = Query(None, alias="type")):
    return progress_service.get_user_progress(user_id, goal_type)

@app.post("/users/{user_id}/progress", response_model=ProgressEntry)
async def record_progress(
    user_id: str,
    goal_type: GoalType = Form(..., alias="type"),
    value: float = Form(...),
    notes: Optional[str] = Form(None),
):
    return progress_service.record_progress(user_id, goal_type, value, notes)

@app.delete("/progress/{progress_id}")
async def delete_progress(progress_id: str):
    try:
        progress_service.delete_progress(progress_id)
        return {"status": "deleted", "progressId": progress_id}
    except KeyError as e:
        raise _not_found(e)

@app.put("/users/{user_id}/goals", response_model=List[Goal])
async def set_goals(user_id: str, goals: List[Goal]):
    return progress_service.set_goals(user_id, goals)

@app.delete("/workouts/history/{entry_id}")
async def delete_workout_entry(entry_id: str):
    """Remove a completed workout from the user's history"""
    try:
        progress_service.delete_workout(entry_id)
        return {"status": "deleted", "entryId": entry_id}
    except KeyError as e:
        raise _not_found(e)

@app.post("/users/{user_id}/bmi", response_model=BodyMetrics)
async def record_body_metrics(
    user_id: str,
    weight: float = Form(...),
    height: float = Form(...),
    date_of_birth: date = Form(...),
):
    """Store onboarding measurements and return BMI, category and age"""
    try:
        return progress_service.record_body_metrics(user_id, weight, height, date_of_birth)
    except ValueError as e:
        logger.warning(f"Rejected body metrics for {user_id}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
