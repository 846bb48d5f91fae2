import uuid
from datetime import date, datetime
from typing import Dict, List, Optional

from utils.logging_utils import logger
from utils.fitness_math import (
    bmi_category,
    calculate_age,
    calculate_bmi,
    calculate_streak,
    goal_progress,
    total_exercise_minutes,
)
from models.schemas import (
    BodyMetrics,
    CompletionRecord,
    Goal,
    GoalType,
    ProgressEntry,
    ProgressSummary,
    WorkoutHistoryEntry,
)

GOAL_TYPES = ("weight", "strength", "stamina")
MIN_AGE = 13
HEIGHT_RANGE_CM = (100, 250)
WEIGHT_RANGE_KG = (30, 300)


class ProgressService:
    """
    In-memory workout history and goal progress store.
    Acts as the completion recorder for finished sessions and computes the
    streak / minutes / goal-progress summary shown on the home screen.
    """

    def __init__(self):
        self.workouts: Dict[str, WorkoutHistoryEntry] = {}
        self.progress: Dict[str, ProgressEntry] = {}
        self.goals: Dict[str, List[Goal]] = {}
        self.profiles: Dict[str, BodyMetrics] = {}

    def reset(self):
        """Drop all stored history, progress, goals and body metrics"""
        self.workouts.clear()
        self.progress.clear()
        self.goals.clear()
        self.profiles.clear()

    # ------------------------------------------------------------------
    # Workouts
    # ------------------------------------------------------------------

    def complete_workout(self, user_id: str, workout_id: str, record: CompletionRecord,
                         notes: Optional[str] = None) -> WorkoutHistoryEntry:
        """Store a completed session for the user"""
        now = datetime.now()
        entry = WorkoutHistoryEntry(
            id=uuid.uuid4().hex,
            userId=user_id,
            workoutId=workout_id,
            date=now,
            completed=True,
            completedAt=now,
            totalTimeElapsed=record.totalElapsedSeconds,
            caloriesBurned=record.caloriesEstimate,
            exercises=list(record.exerciseRecords),
            notes=notes,
        )
        self.workouts[entry.id] = entry
        logger.info(
            f"Recorded workout '{workout_id}' for user {user_id}: "
            f"{record.totalElapsedSeconds}s, {record.caloriesEstimate} kcal"
        )
        return entry

    def add_workout(self, entry: WorkoutHistoryEntry) -> WorkoutHistoryEntry:
        """Insert an existing history entry (imports and backfills)"""
        self.workouts[entry.id] = entry
        return entry

    def get_user_workouts(self, user_id: str) -> List[WorkoutHistoryEntry]:
        """User's workouts, newest first"""
        entries = [w for w in self.workouts.values() if w.userId == user_id]
        return sorted(entries, key=lambda w: w.date, reverse=True)

    def delete_workout(self, workout_entry_id: str):
        if workout_entry_id not in self.workouts:
            raise KeyError(f"Workout entry '{workout_entry_id}' not found")
        del self.workouts[workout_entry_id]

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    def record_progress(self, user_id: str, goal_type: GoalType, value: float,
                        notes: Optional[str] = None,
                        when: Optional[datetime] = None) -> ProgressEntry:
        entry = ProgressEntry(
            id=uuid.uuid4().hex,
            userId=user_id,
            type=goal_type,
            value=value,
            date=when or datetime.now(),
            notes=notes,
        )
        self.progress[entry.id] = entry
        logger.info(f"Recorded {goal_type} progress {value} for user {user_id}")
        return entry

    def get_user_progress(self, user_id: str,
                          goal_type: Optional[GoalType] = None) -> List[ProgressEntry]:
        """Progress entries for the user, newest first, optionally of one goal type"""
        entries = [
            p for p in self.progress.values()
            if p.userId == user_id and (goal_type is None or p.type == goal_type)
        ]
        return sorted(entries, key=lambda p: p.date, reverse=True)

    def get_latest_progress(self, user_id: str, goal_type: GoalType) -> Optional[ProgressEntry]:
        entries = self.get_user_progress(user_id, goal_type)
        return entries[0] if entries else None

    def update_progress(self, progress_id: str, **updates) -> ProgressEntry:
        if progress_id not in self.progress:
            raise KeyError(f"Progress entry '{progress_id}' not found")
        updated = self.progress[progress_id].model_copy(update=updates)
        self.progress[progress_id] = updated
        return updated

    def delete_progress(self, progress_id: str):
        if progress_id not in self.progress:
            raise KeyError(f"Progress entry '{progress_id}' not found")
        del self.progress[progress_id]

    # ------------------------------------------------------------------
    # Body metrics
    # ------------------------------------------------------------------

    def record_body_metrics(self, user_id: str, weight: float, height: float,
                            date_of_birth: date, today: Optional[date] = None) -> BodyMetrics:
        """
        Validate onboarding measurements and store them with the derived BMI and age.
        Raises ValueError for out-of-range measurements or users under MIN_AGE.
        """
        if not HEIGHT_RANGE_CM[0] <= height <= HEIGHT_RANGE_CM[1]:
            raise ValueError("Height must be between 100 and 250 cm")
        if not WEIGHT_RANGE_KG[0] <= weight <= WEIGHT_RANGE_KG[1]:
            raise ValueError("Weight must be between 30 and 300 kg")

        age = calculate_age(date_of_birth, today)
        if age < MIN_AGE:
            raise ValueError(f"You must be at least {MIN_AGE} years old to use this app")

        bmi = calculate_bmi(weight, height)
        metrics = BodyMetrics(
            userId=user_id,
            height=height,
            weight=weight,
            bmi=round(bmi, 1),
            category=bmi_category(bmi),
            age=age,
            dateOfBirth=date_of_birth,
        )
        self.profiles[user_id] = metrics
        logger.info(f"Body metrics for {user_id}: BMI {metrics.bmi} ({metrics.category}), age {age}")
        return metrics

    def get_body_metrics(self, user_id: str) -> Optional[BodyMetrics]:
        return self.profiles.get(user_id)

    # ------------------------------------------------------------------
    # Goals & summary
    # ------------------------------------------------------------------

    def set_goals(self, user_id: str, goals: List[Goal]) -> List[Goal]:
        self.goals[user_id] = list(goals)
        return self.goals[user_id]

    def get_goals(self, user_id: str) -> List[Goal]:
        return list(self.goals.get(user_id, []))

    def get_summary(self, user_id: str, today: Optional[date] = None) -> ProgressSummary:
        completed = [w for w in self.get_user_workouts(user_id) if w.completed]
        goals = {goal.type: goal for goal in self.get_goals(user_id)}

        latest: Dict[str, float] = {}
        percents: Dict[str, int] = {}
        for goal_type in GOAL_TYPES:
            entry = self.get_latest_progress(user_id, goal_type)
            if entry is not None:
                latest[goal_type] = entry.value
            if goal_type in goals:
                percents[goal_type] = goal_progress(
                    entry.value if entry else None, goals[goal_type].target
                )

        return ProgressSummary(
            userId=user_id,
            streak=calculate_streak([w.date for w in completed], today),
            totalMinutes=total_exercise_minutes(
                [[e.duration for e in w.exercises] for w in completed]
            ),
            completedWorkouts=len(completed),
            goalProgress=percents,
            latestProgress=latest,
        )

# Global service instance
progress_service = ProgressService()
