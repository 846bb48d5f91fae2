import json
import time
from config import config
from utils.logging_utils import logger
from models.schemas import SessionPhase, SessionState

class DebugService:
    """
    Session transcript service for development and troubleshooting.
    Appends one JSON line per phase transition when transcript saving is enabled.
    """

    @staticmethod
    def save_transition(old_phase: SessionPhase, new_phase: SessionPhase, state: SessionState):
        """
        Append a phase transition to the session's transcript file if saving is enabled.
        Used as a SessionTimer phase listener.
        """
        if not config.save_transcripts or not config.debug_dir:
            return

        try:
            entry = {
                "timestamp": int(time.time() * 1000),
                "from": old_phase.value,
                "to": new_phase.value,
                "state": state.model_dump(mode="json"),
            }

            # One transcript per session, named after the session and plan
            filename = f"session_{state.sessionId or 'anonymous'}_{state.planId}.jsonl"
            filepath = config.debug_dir / filename

            with open(filepath, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry) + "\n")
            logger.debug(f"Transition saved: {filename} {old_phase.value} -> {new_phase.value}")

        except OSError as e:
            logger.error(f"Error saving session transcript: {e}")

# Global service instance
debug_service = DebugService()
