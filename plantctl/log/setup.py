import logging
import sys
from pathlib import Path
from typing import Optional


class MainFormatter(logging.Formatter):
    """A custom formatter to handle regular logs and raw subprocess logs."""

    def format(self, record):
        # If the log is from a subprocess, just return the raw message.
        if record.name.startswith('proc.'):
            return record.getMessage()

        # Otherwise, use the default formatting.
        # Temporarily change the format string for the superclass call.
        original_format = self._style._fmt
        self._style._fmt = '%(asctime)s - %(levelname)-8s - [%(name)s] - %(message)s'
        formatted_message = super().format(record)
        self._style._fmt = original_format
        return formatted_message


class RunLogHandler(logging.FileHandler):
    """
    Writes every record of one launcher invocation to the run log.

    The run log collects the launcher's own messages and the diagnostics of
    the external transforms, so it is what gets tailed when a build fails.
    """

    def __init__(self, run_log: Path, append: bool = False):
        run_log.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(run_log, mode="a" if append else "w", encoding="utf-8")
        self.setFormatter(MainFormatter())


def setup_logging(console_level: int = logging.INFO, run_log: Optional[Path] = None, append: bool = False) -> None:
    """
    Configures the root logger for the launcher.
    This sets up handlers for the console and, once the application directory
    is known, the run log, clearing any previously configured handlers to
    prevent duplication.

    :param console_level: The logging level for the console output (e.g., logging.INFO).
    :param run_log: The run log file; None keeps logging on the console only.
    :param append: Append to the run log instead of truncating it.
    """
    root_logger = logging.getLogger()
    # Set root level to lowest to capture all messages for handler filtering
    root_logger.setLevel(logging.DEBUG)

    # Clear any existing handlers to prevent re-adding them on re-runs
    if root_logger.hasHandlers():
        for handler in root_logger.handlers:
            if isinstance(handler, RunLogHandler):
                handler.close()
        root_logger.handlers.clear()

    # --- Console Handler ---
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(MainFormatter())
    root_logger.addHandler(console_handler)

    # --- Run Log Handler (all levels) ---
    if run_log is not None:
        try:
            run_handler = RunLogHandler(run_log, append=append)
            run_handler.setLevel(logging.DEBUG)
            root_logger.addHandler(run_handler)
        except OSError as e:
            root_logger.error(f"Failed to open run log '{run_log}': {e}. Logging to console only.")
