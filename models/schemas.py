# schemas.py
from datetime import date, datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, PositiveInt, NonNegativeInt

WorkoutCategory = Literal[
    "abs", "arm", "chest", "endurance", "fat_burning", "flexibility", "full_body", "leg"
]
DifficultyLevel = Literal["beginner", "intermediate", "advanced"]
GoalType = Literal["weight", "strength", "stamina"]


class SessionPhase(str, Enum):
    """Top-level mode of a workout session"""
    NOT_STARTED = "not_started"
    COUNTING_DOWN = "counting_down"
    ACTIVE = "active"
    RESTING = "resting"
    COMPLETED = "completed"
    QUIT = "quit"  # Discarded by the user; never recorded

    @property
    def is_terminal(self) -> bool:
        return self in (SessionPhase.COMPLETED, SessionPhase.QUIT)


class ExerciseSpec(BaseModel):
    """
    A single exercise in a workout plan.
    Duration is whole seconds; sets/reps are informational for the presentation layer.
    """
    id: str
    name: str
    description: str = ""
    imageUrl: str = ""
    duration: PositiveInt                       # Seconds of work for this exercise
    sets: Optional[PositiveInt] = None
    reps: Optional[PositiveInt] = None
    restBetweenSets: Optional[NonNegativeInt] = None
    targetMuscles: List[str] = Field(default_factory=list)
    equipment: List[str] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)
    difficulty: DifficultyLevel = "beginner"


class WorkoutPlan(BaseModel):
    """
    Pre-authored workout: an ordered, non-empty exercise list with one uniform
    rest period between consecutive exercises.
    """
    id: str
    category: WorkoutCategory = "full_body"
    name: str
    description: str = ""
    difficulty: DifficultyLevel = "beginner"
    duration: NonNegativeInt = 0                # Advertised total in minutes
    exercises: List[ExerciseSpec] = Field(min_length=1)
    restBetweenExercises: NonNegativeInt = 0    # Seconds
    equipmentNeeded: List[str] = Field(default_factory=list)
    targetMuscles: List[str] = Field(default_factory=list)
    calories: NonNegativeInt = 0                # Estimated calories burned
    goalType: GoalType = "weight"


class ExerciseRecord(BaseModel):
    """Per-exercise outcome written when a session completes"""
    exerciseId: str
    sets: Optional[int] = None
    reps: Optional[int] = None
    duration: Optional[int] = None


class CompletionRecord(BaseModel):
    """Payload handed to the completion recorder exactly once per completed session"""
    totalElapsedSeconds: int
    caloriesEstimate: int
    exerciseRecords: List[ExerciseRecord]


class SessionState(BaseModel):
    """
    Read-only view of a session timer returned to clients for rendering.
    """
    sessionId: Optional[str] = None
    planId: str
    phase: SessionPhase = SessionPhase.NOT_STARTED
    currentExerciseIndex: int = 0
    exerciseCount: int = 1
    currentExerciseName: Optional[str] = None   # None while resting or after the session ends
    timeLeftInPhase: int = 0                    # Seconds left in the current phase
    timeLeftDisplay: str = "0:00"               # m:ss rendering of timeLeftInPhase
    totalElapsedSeconds: int = 0
    isPaused: bool = True
    countdownValue: Optional[int] = None        # Lead-in value while counting down
    motivation: str = "Ready to start!"         # Coaching line for the current phase
    completionError: Optional[str] = None       # Set when recording the completion failed
    applied: bool = True                        # False when the last control call was a no-op


class WorkoutHistoryEntry(BaseModel):
    """A completed workout stored by the progress service"""
    id: str
    userId: str
    workoutId: str
    date: datetime
    completed: bool = True
    completedAt: Optional[datetime] = None
    totalTimeElapsed: int = 0
    caloriesBurned: int = 0
    exercises: List[ExerciseRecord] = Field(default_factory=list)
    notes: Optional[str] = None


class ProgressEntry(BaseModel):
    """A measurement towards one of the user's goals"""
    id: str
    userId: str
    type: GoalType
    value: float
    date: datetime
    notes: Optional[str] = None


class Goal(BaseModel):
    type: GoalType
    target: float
    deadline: Optional[datetime] = None


class BodyMetrics(BaseModel):
    """Onboarding body measurements with the derived BMI and age"""
    userId: str
    height: float                               # Centimetres
    weight: float                               # Kilograms
    bmi: float
    category: str                               # Underweight / Normal / Overweight / Obese
    age: int
    dateOfBirth: date


class ProgressSummary(BaseModel):
    """Home-screen summary for a user"""
    userId: str
    streak: int = 0
    totalMinutes: int = 0
    completedWorkouts: int = 0
    goalProgress: dict = Field(default_factory=dict)  # goal type -> percent (0-100)
    latestProgress: dict = Field(default_factory=dict)  # goal type -> latest value
