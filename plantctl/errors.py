"""
Exception hierarchy for plantctl.

Every fatal condition is raised as a PlantctlError subclass carrying the
process exit code the launcher terminates with. Soft failures (a failed
delete during clean, a failed stop during kill) are never raised; they are
logged as warnings where they happen.
"""

from typing import Any, Dict, Optional

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_UPDATE_FAILED = 2
EXIT_MERGE_FAILED = 3


class PlantctlError(Exception):
    """Base exception class for plantctl. All fatal errors inherit from this class."""

    exit_code = EXIT_USAGE

    def __init__(
        self,
        message: str,
        exit_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code
        self.details = details or {}
        super().__init__(self.message)


class UsageError(PlantctlError):
    """Bad or unknown flag, missing argument, conflicting modes or no command given."""

    exit_code = EXIT_USAGE


class MissingInput(PlantctlError):
    """A required input file (application script, manifest entry) does not exist."""

    exit_code = EXIT_USAGE

    def __init__(self, message: str, path: Any = None):
        details = {"path": str(path)} if path is not None else None
        super().__init__(message, details=details)
        self.path = path


class TransformFailure(PlantctlError):
    """
    An external compiler or minifier exited with a non-zero status.

    The exit code of the launcher depends on the stage the failure happened in:
    2 for the per-file update step, 3 for the merge step.
    """

    STAGE_EXIT_CODES = {"update": EXIT_UPDATE_FAILED, "merge": EXIT_MERGE_FAILED}

    def __init__(self, stage: str, file_name: str, command_exit_code: int, diagnostics: str = ""):
        self.stage = stage
        self.file_name = file_name
        self.command_exit_code = command_exit_code
        self.diagnostics = diagnostics
        super().__init__(
            f"Asset {stage} failed for '{file_name}' (transform exited with code {command_exit_code}).",
            exit_code=self.STAGE_EXIT_CODES[stage],
            details={"stage": stage, "file": file_name, "command_exit_code": command_exit_code},
        )


class ExternalCommandError(PlantctlError):
    """An external command (e.g. the process monitor) failed; its exit code is propagated."""

    def __init__(self, command: str, command_exit_code: int, diagnostics: str = ""):
        self.command = command
        self.command_exit_code = command_exit_code
        self.diagnostics = diagnostics
        # Negative return codes mean "killed by signal N"; report them the way a shell does.
        exit_code = 128 - command_exit_code if command_exit_code < 0 else command_exit_code
        super().__init__(
            f"External command '{command}' failed with exit code {command_exit_code}.",
            exit_code=exit_code or EXIT_USAGE,
            details={"command": command},
        )
