"""Shared fixtures for the session timer, catalog, progress and API tests."""

import pytest

from config import config
from models.schemas import ExerciseSpec, WorkoutPlan
from services.progress_service import progress_service
from services.session_service import session_service


@pytest.fixture(autouse=True)
def isolated_config():
    """Deterministic clock settings; restores the global config afterwards."""
    saved = dict(vars(config))
    config.auto_tick = False
    config.lead_in_seconds = 0
    config.save_transcripts = False
    config.debug_dir = None
    yield config
    config.__dict__.clear()
    config.__dict__.update(saved)


@pytest.fixture(autouse=True)
def clean_services():
    """Start every test with no sessions and no stored history."""
    session_service.sessions.clear()
    progress_service.reset()
    yield
    for managed in session_service.sessions.values():
        if managed.clock_task is not None:
            managed.clock_task.cancel()
    session_service.sessions.clear()
    progress_service.reset()


def build_plan(durations, rest=0, calories=120, plan_id="test_plan") -> WorkoutPlan:
    """Plan with one exercise per duration (seconds) and a uniform rest."""
    exercises = [
        ExerciseSpec(id=f"ex_{i}", name=f"Exercise {i}", duration=d, sets=3, reps=10)
        for i, d in enumerate(durations)
    ]
    return WorkoutPlan(
        id=plan_id,
        name="Test Plan",
        exercises=exercises,
        restBetweenExercises=rest,
        calories=calories,
    )


@pytest.fixture
def plan_factory():
    return build_plan


@pytest.fixture
def two_exercise_plan() -> WorkoutPlan:
    """30s and 45s exercises with 20s rest between them."""
    return build_plan([30, 45], rest=20, calories=150)
