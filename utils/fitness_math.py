# fitness_math.py
"""
Closed-form fitness arithmetic used by the progress summary and the session views.
"""

from datetime import date, datetime
from typing import Iterable, List, Optional, Union

import numpy as np

DateLike = Union[date, datetime]


def calculate_bmi(weight_kg: float, height_cm: float) -> float:
    """Body mass index from weight in kilograms and height in centimetres"""
    if height_cm <= 0:
        raise ValueError("height_cm must be positive")
    height_m = height_cm / 100
    return weight_kg / (height_m * height_m)


def bmi_category(bmi: float) -> str:
    if bmi < 18.5:
        return "Underweight"
    if bmi < 25:
        return "Normal"
    if bmi < 30:
        return "Overweight"
    return "Obese"


def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def calculate_age(birth_date: DateLike, today: Optional[DateLike] = None) -> int:
    """Whole years since birth_date; a year only counts once the birthday has passed"""
    birth = _as_date(birth_date)
    anchor = _as_date(today) if today is not None else date.today()
    age = anchor.year - birth.year
    if (anchor.month, anchor.day) < (birth.month, birth.day):
        age -= 1
    return age


def calculate_streak(workout_dates: Iterable[DateLike], today: Optional[DateLike] = None) -> int:
    """
    Count consecutive workout days walking back from today.
    Dates are compared at day granularity; a gap of more than one day ends the streak.
    Several workouts on the same day each count, matching the home screen's tally.
    """
    anchor = _as_date(today) if today is not None else date.today()
    days = sorted((_as_date(d) for d in workout_dates), reverse=True)

    streak = 0
    last_day = anchor
    for day in days:
        if (last_day - day).days <= 1:
            streak += 1
            last_day = day
        else:
            break
    return streak


def goal_progress(value: Optional[float], target: Optional[float]) -> int:
    """Percentage of a goal reached, rounded half-up and capped to 0..100"""
    if value is None or not target or target <= 0:
        return 0
    percent = np.floor(value / target * 100 + 0.5)
    return int(np.clip(percent, 0, 100))


def total_exercise_minutes(workouts: Iterable[Iterable[Optional[int]]]) -> int:
    """
    Sum of whole minutes across workouts.
    Each workout contributes floor(sum of its exercise durations in seconds / 60).
    """
    per_workout: List[int] = []
    for durations in workouts:
        seconds = np.array([d or 0 for d in durations], dtype=np.int64)
        per_workout.append(int(seconds.sum()) // 60)
    return int(np.sum(per_workout, dtype=np.int64)) if per_workout else 0


def format_time(seconds: int) -> str:
    """Render seconds as m:ss"""
    seconds = max(0, int(seconds))
    mins, secs = divmod(seconds, 60)
    return f"{mins}:{secs:02d}"
