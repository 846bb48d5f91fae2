# motivation.py
from models.schemas import SessionPhase


def get_motivation_text(phase: SessionPhase, exercise_index: int = 0, exercise_count: int = 1,
                        countdown_value=None) -> str:
    """
    Generate a coaching line for the current session phase.
    Cycles through predefined messages by exercise position to keep variety.
    """

    active_messages = [
        "You've got this! 💪",
        "Keep that form tight! 🔥",
        "Strong and steady! ✨",
        "Push through, almost there! 🚀",
        "Beast mode on! 🐯",
        "Breathe and keep moving! 🌬️",
    ]

    if phase == SessionPhase.NOT_STARTED:
        return "Ready to start!"
    if phase == SessionPhase.COUNTING_DOWN:
        return f"Get ready... {countdown_value}" if countdown_value else "Go!"
    if phase == SessionPhase.RESTING:
        upcoming = exercise_index + 2
        return f"Catch your breath - exercise {upcoming}/{exercise_count} is next"
    if phase == SessionPhase.COMPLETED:
        return "Workout complete! Great job! 🎉"
    if phase == SessionPhase.QUIT:
        return "Workout ended. See you next time!"

    # Cycle through messages based on exercise position
    selected_message = active_messages[exercise_index % len(active_messages)]
    return f"Exercise {exercise_index + 1}/{exercise_count} - {selected_message}"
