# catalog.py
"""
Static workout catalog: the exercise library and the pre-authored workout plans.
Sessions read plans from here but never mutate them.
"""

from typing import Dict, List, Optional

from models.schemas import ExerciseSpec, WorkoutPlan


def _image(filename: str) -> str:
    return f"/assets/images/exercises/{filename}"


# Exercises shared across several plans, keyed by exercise id
EXERCISES: Dict[str, ExerciseSpec] = {
    exercise.id: exercise
    for exercise in [
        # Cardio & warm-up
        ExerciseSpec(
            id="jumping_jacks", name="Jumping Jacks",
            description="Full body warm-up exercise to get your heart rate up",
            imageUrl=_image("jumping-jacks.gif"), duration=30,
            targetMuscles=["full_body"],
            tips=["Land softly on your feet", "Keep core engaged",
                  "Coordinate arm and leg movements"],
            difficulty="beginner",
        ),
        ExerciseSpec(
            id="high_knees", name="High Knees",
            description="Dynamic cardio exercise that engages core and legs",
            imageUrl=_image("high-knees.gif"), duration=30,
            targetMuscles=["core", "legs"],
            tips=["Drive knees up towards chest", "Stay on balls of feet",
                  "Keep upper body straight"],
            difficulty="beginner",
        ),
        ExerciseSpec(
            id="mountain_climbers", name="Mountain Climbers",
            description="Dynamic plank exercise targeting core and cardio",
            imageUrl=_image("mountain-climbers.gif"), duration=30,
            targetMuscles=["core", "shoulders", "cardio"],
            tips=["Keep hips level", "Engage core throughout", "Alternate legs quickly"],
            difficulty="intermediate",
        ),

        # Push-up variations
        ExerciseSpec(
            id="pushups", name="Push-ups",
            description="Classic bodyweight exercise targeting chest, shoulders, and triceps",
            imageUrl=_image("pushup.gif"), duration=45, sets=3, reps=10, restBetweenSets=30,
            targetMuscles=["chest", "shoulders", "triceps"],
            tips=["Keep your body in a straight line",
                  "Lower your chest to just above the ground",
                  "Keep your core engaged throughout"],
            difficulty="intermediate",
        ),
        ExerciseSpec(
            id="wide_arm_pushups", name="Wide Arm Push-ups",
            description="Push-ups with wider arm placement for outer chest focus",
            imageUrl=_image("wide-arm-push-up.gif"), duration=45, sets=3, reps=8,
            restBetweenSets=30,
            targetMuscles=["chest", "shoulders"],
            tips=["Place hands wider than shoulder width", "Keep elbows at 45-degree angle",
                  "Maintain straight body alignment"],
            difficulty="intermediate",
        ),
        ExerciseSpec(
            id="diamond_pushups", name="Diamond Push-ups",
            description="Advanced push-up variation targeting triceps",
            imageUrl=_image("diamond-push-up.gif"), duration=45, sets=3, reps=8,
            restBetweenSets=30,
            targetMuscles=["triceps", "chest"],
            tips=["Form diamond shape with hands", "Keep elbows close to body",
                  "Lower chest to hands"],
            difficulty="advanced",
        ),

        # Core
        ExerciseSpec(
            id="plank", name="Plank",
            description="Static hold for core stability",
            imageUrl=_image("plank.jpg"), duration=30,
            targetMuscles=["core", "shoulders"],
            tips=["Keep body straight", "Engage core", "Look at the floor",
                  "Keep breathing steady"],
            difficulty="beginner",
        ),
        ExerciseSpec(
            id="russian_twist", name="Russian Twist",
            description="Rotational exercise targeting obliques",
            imageUrl=_image("russian-twist.gif"), duration=45, reps=32,
            targetMuscles=["obliques", "core"],
            tips=["Sit with knees bent", "Lean back slightly", "Rotate torso side to side"],
            difficulty="intermediate",
        ),
        ExerciseSpec(
            id="leg_raises", name="Leg Raises",
            description="Targets lower abs",
            imageUrl=_image("leg-raises.gif"), duration=45, sets=3, reps=12,
            targetMuscles=["lower_abs"],
            tips=["Keep legs straight", "Control the movement", "Lower legs slowly"],
            difficulty="intermediate",
        ),

        # Lower body
        ExerciseSpec(
            id="squats", name="Squats",
            description="Fundamental lower body exercise targeting multiple muscle groups",
            imageUrl=_image("squats.gif"), duration=45, sets=3, reps=12, restBetweenSets=30,
            targetMuscles=["quadriceps", "hamstrings", "glutes", "core"],
            tips=["Keep feet shoulder-width apart", "Keep back straight",
                  "Lower until thighs are parallel to ground"],
            difficulty="beginner",
        ),
        ExerciseSpec(
            id="lunges", name="Lunges",
            description="Lower body strengthening exercise",
            imageUrl=_image("lunges.gif"), duration=45, sets=3, reps=10,
            targetMuscles=["quadriceps", "hamstrings", "glutes"],
            tips=["Keep torso upright", "Step forward with control",
                  "Back knee nearly touches ground"],
            difficulty="beginner",
        ),
        ExerciseSpec(
            id="burpees", name="Burpees",
            description="Full body cardio exercise",
            imageUrl=_image("burpee.webp"), duration=45, sets=3, reps=8,
            targetMuscles=["full_body", "cardio"],
            tips=["Start standing", "Drop to plank position", "Optional push-up",
                  "Jump back to feet"],
            difficulty="advanced",
        ),
    ]
}


def _plan(exercise_ids: List[str], **fields) -> WorkoutPlan:
    return WorkoutPlan(exercises=[EXERCISES[eid] for eid in exercise_ids], **fields)


WORKOUT_PLANS: List[WorkoutPlan] = [
    # Weight management
    _plan(
        ["jumping_jacks", "mountain_climbers", "burpees", "high_knees", "squats"],
        id="weight_beginner_hiit", category="fat_burning", name="Weight Loss HIIT",
        description="High-intensity interval training for effective weight management",
        difficulty="beginner", duration=30, restBetweenExercises=30,
        targetMuscles=["full_body", "cardio"], calories=300, goalType="weight",
    ),
    _plan(
        ["burpees", "pushups", "squats", "mountain_climbers", "plank"],
        id="weight_intermediate_circuit", category="fat_burning", name="Fat Burning Circuit",
        description="Circuit training designed for optimal fat burning and muscle preservation",
        difficulty="intermediate", duration=45, restBetweenExercises=45,
        targetMuscles=["full_body", "cardio"], calories=400, goalType="weight",
    ),

    # Strength building
    _plan(
        ["pushups", "diamond_pushups", "wide_arm_pushups", "plank"],
        id="strength_upper_body", category="chest", name="Upper Body Power",
        description="Focus on building upper body strength and muscle",
        difficulty="intermediate", duration=40, restBetweenExercises=90,
        targetMuscles=["chest", "shoulders", "triceps", "core"], calories=250,
        goalType="strength",
    ),
    _plan(
        ["squats", "lunges", "burpees"],
        id="strength_lower_body", category="leg", name="Lower Body Power",
        description="Build leg strength and power with compound movements",
        difficulty="intermediate", duration=40, restBetweenExercises=90,
        targetMuscles=["quadriceps", "hamstrings", "glutes", "calves"], calories=300,
        goalType="strength",
    ),

    # Stamina building
    _plan(
        ["jumping_jacks", "high_knees", "mountain_climbers", "burpees"],
        id="stamina_endurance", category="endurance", name="Endurance Builder",
        description="Improve cardiovascular endurance and stamina",
        difficulty="intermediate", duration=45, restBetweenExercises=30,
        targetMuscles=["full_body", "cardio"], calories=350, goalType="stamina",
    ),
    _plan(
        ["burpees", "mountain_climbers", "high_knees", "jumping_jacks", "squats"],
        id="stamina_hiit", category="endurance", name="HIIT Endurance",
        description="High-intensity intervals to boost stamina and endurance",
        difficulty="advanced", duration=35, restBetweenExercises=20,
        targetMuscles=["full_body", "cardio"], calories=400, goalType="stamina",
    ),
]

CATEGORY_INFO: Dict[str, Dict[str, str]] = {
    "abs": {"name": "Abs Workout", "description": "Build core strength and stability"},
    "arm": {"name": "Arm Workout", "description": "Build arm strength and definition"},
    "chest": {"name": "Chest Workout", "description": "Build chest strength and definition"},
    "endurance": {"name": "Endurance Workout",
                  "description": "Improve cardiovascular fitness and stamina"},
    "fat_burning": {"name": "Fat Burning",
                    "description": "High-intensity workouts for maximum calorie burn"},
    "flexibility": {"name": "Flexibility Workout",
                    "description": "Improve mobility and flexibility"},
    "full_body": {"name": "Full Body Workout",
                  "description": "Complete workout targeting all major muscle groups"},
    "leg": {"name": "Leg Workout", "description": "Build lower body strength and power"},
}

DIFFICULTY_INFO: Dict[str, Dict[str, str]] = {
    "beginner": {"name": "Beginner",
                 "description": "Perfect for those just starting their fitness journey"},
    "intermediate": {"name": "Intermediate",
                     "description": "For those with some fitness experience"},
    "advanced": {"name": "Advanced",
                 "description": "Challenging workouts for experienced fitness enthusiasts"},
}

_PLANS_BY_ID: Dict[str, WorkoutPlan] = {plan.id: plan for plan in WORKOUT_PLANS}


def get_plan(plan_id: str) -> WorkoutPlan:
    """Return a copy of the plan with this id; raises KeyError when unknown"""
    try:
        return _PLANS_BY_ID[plan_id].model_copy(deep=True)
    except KeyError:
        raise KeyError(f"Workout plan '{plan_id}' not found") from None


def get_exercise(exercise_id: str) -> ExerciseSpec:
    try:
        return EXERCISES[exercise_id].model_copy(deep=True)
    except KeyError:
        raise KeyError(f"Exercise '{exercise_id}' not found") from None


def list_plans(category: Optional[str] = None, difficulty: Optional[str] = None,
               goal_type: Optional[str] = None) -> List[WorkoutPlan]:
    """Plans in catalog order, optionally filtered by category, difficulty and goal type"""
    plans = []
    for plan in WORKOUT_PLANS:
        if category and plan.category != category:
            continue
        if difficulty and plan.difficulty != difficulty:
            continue
        if goal_type and plan.goalType != goal_type:
            continue
        plans.append(plan.model_copy(deep=True))
    return plans


def get_quick_start_plan() -> WorkoutPlan:
    """First beginner-friendly plan, falling back to the first plan in the catalog"""
    for plan in WORKOUT_PLANS:
        if plan.difficulty == "beginner":
            return plan.model_copy(deep=True)
    return WORKOUT_PLANS[0].model_copy(deep=True)
