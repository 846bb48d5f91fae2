import argparse
from pathlib import Path
from typing import List, Optional

class Config:
    """
    Central configuration manager for the Fitness Session backend.
    Handles command-line argument parsing, debug modes, and session timer parameters.
    """

    def __init__(self):
        # Application mode settings
        self.debug_mode: str = "debug"
        self.save_transcripts: bool = False
        self.debug_dir: Optional[Path] = None

        # Session timer parameters
        self.lead_in_seconds: int = 3  # 3-2-1 countdown before exercising (0 disables it)
        self.default_extend_seconds: int = 15  # "+15s" rest extension

        # Clock settings
        self.tick_interval: float = 1.0  # Seconds between timer ticks
        self.auto_tick: bool = True  # When False, clients drive ticks through /tick

        # Session lifecycle
        self.completed_retention_seconds: float = 60.0  # Completed sessions stay readable this long (0 evicts at once)
        self.idle_timeout_seconds: float = 1800.0  # Never-started or paused sessions are dropped after this

        # Session identity defaults
        self.default_user_id: str = "default"

        # Human-readable descriptions for each debug mode
        self.mode_descriptions = {
            "debug": "Debug Mode (with transcript saving)",
            "debug_no_save": "Debug Mode (without transcript saving)",
            "non_debug": "Non-Debug Mode (minimal logging)"
        }

    def setup_from_args(self, argv: Optional[List[str]] = None):
        """
        Parse command line arguments and configure application settings.
        Unknown arguments are ignored so the app can be imported under other CLIs.
        Creates debug directory if transcript saving is enabled.
        """
        parser = argparse.ArgumentParser(description="Fitness Session Backend", allow_abbrev=False)
        parser.add_argument(
            "--mode",
            choices=["debug", "debug_no_save", "non_debug"],
            default="debug_no_save",
            help="Debug mode setting"
        )
        parser.add_argument(
            "--lead-in",
            type=int,
            default=self.lead_in_seconds,
            help="Lead-in countdown length in seconds"
        )
        args, _ = parser.parse_known_args(argv)

        self.debug_mode = args.mode
        self.save_transcripts = (self.debug_mode == "debug")
        self.lead_in_seconds = max(0, args.lead_in)

        # Create debug transcript directory if needed
        if self.save_transcripts:
            self.debug_dir = Path("debug_sessions")
            self.debug_dir.mkdir(exist_ok=True)

    @property
    def mode_description(self) -> str:
        """Get human-readable description of current mode"""
        return self.mode_descriptions[self.debug_mode]

# Global configuration instance - import this in other modules
config = Config()
