import os
import sys
import psutil
import logging
import subprocess
from pathlib import Path
from dataclasses import dataclass
from typing import IO, Any, Dict, Optional, Sequence, Union

log = logging.getLogger(__name__)

EXIT_COMMAND_NOT_FOUND = 127

StdinSource = Union[Path, bytes, None]


@dataclass(frozen=True)
class CommandResult:
    """The structured outcome of one external command."""

    exit_code: int
    diagnostics: str = ""
    output: bytes = b""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


#* --- Process Status ---
def pid_exists(pid: int) -> bool:
    """A wrapper for psutil.pid_exists for easy testing/mocking if needed."""
    return psutil.pid_exists(pid)

def get_process_from_pid(pid: int) -> psutil.Process:
    """A wrapper for psutil.Process for easy testing/mocking if needed."""
    return psutil.Process(pid)


#* --- Output Logging ---
def log_process_output(name: str, text: str, level: int = logging.ERROR) -> None:
    """
    Logs every non-empty line of an external command's output.

    Lines go to the 'proc.<name>' logger, which the console formatter prints
    raw and the run log handler appends to the run log.
    """
    proc_logger = logging.getLogger(f"proc.{name}")
    for line in text.splitlines():
        line = line.rstrip()
        if line:
            proc_logger.log(level, line)


#* --- Process Creation ---
def get_popen_creation_flags() -> Dict[str, Any]:
    """Returns platform-specific keyword arguments to detach a child from the launcher."""
    if sys.platform == "win32":
        return {"creationflags": subprocess.DETACHED_PROCESS | subprocess.CREATE_NO_WINDOW}
    return {"start_new_session": True}

def run_command(
    args: Sequence[str],
    cwd: Optional[Path] = None,
    stdin: StdinSource = None,
    stdout: Optional[IO[bytes]] = None,
    name: Optional[str] = None,
    failure_level: int = logging.ERROR
) -> CommandResult:
    """
    Runs an external command to completion and returns its structured result.

    :param args: The command and its arguments.
    :param cwd: The working directory for the command.
    :param stdin: A file to pipe into the command, raw bytes, or None for no input.
    :param stdout: An open binary file receiving the command's output; when None
        the output is captured into CommandResult.output.
    :param name: The logical name used for the 'proc.<name>' logger.
    :param failure_level: The level stderr is logged at when the command fails;
        stderr of a successful run is logged as a warning.
    :return CommandResult: Exit code, decoded stderr and captured stdout.
    """
    args = [str(a) for a in args]
    name = name or Path(args[0]).name
    log.debug(f"Running {' '.join(args)} (cwd: {cwd or os.getcwd()})")

    # A missing stdin file is the caller's problem, not a missing executable.
    source = stdin.open("rb") if isinstance(stdin, Path) else None
    try:
        completed = subprocess.run(
            args, cwd=cwd,
            input=stdin if source is None else None,
            stdin=source if source is not None else (subprocess.DEVNULL if stdin is None else None),
            stdout=stdout if stdout is not None else subprocess.PIPE,
            stderr=subprocess.PIPE, check=False,
        )
    except FileNotFoundError:
        message = f"Executable '{args[0]}' not found."
        log.error(message)
        return CommandResult(exit_code=EXIT_COMMAND_NOT_FOUND, diagnostics=message)
    except PermissionError as e:
        message = f"Executable '{args[0]}' cannot be run: {e}"
        log.error(message)
        return CommandResult(exit_code=EXIT_COMMAND_NOT_FOUND - 1, diagnostics=message)
    finally:
        if source is not None:
            source.close()

    diagnostics = (completed.stderr or b"").decode("utf-8", errors="replace")
    log_process_output(name, diagnostics, failure_level if completed.returncode else logging.WARNING)
    return CommandResult(
        exit_code=completed.returncode,
        diagnostics=diagnostics,
        output=completed.stdout or b"",
    )

def launch_detached(
    args: Sequence[str],
    cwd: Path,
    stdout_path: Path,
    stderr_path: Path,
    append: bool
) -> int:
    """
    Launches a long-running process in the background and returns its PID.

    The child gets its own session so it survives the launcher's exit; its
    stdout and stderr are redirected to the given log files.
    """
    args = [str(a) for a in args]
    file_mode = "ab" if append else "wb"
    log.info(f"Starting background process: {' '.join(args)}")
    with stdout_path.open(file_mode) as out, stderr_path.open(file_mode) as err:
        p = subprocess.Popen(
            args, stdin=subprocess.DEVNULL, stdout=out, stderr=err,
            cwd=str(cwd), **get_popen_creation_flags()
        )
    log.info(f"{Path(args[0]).name} started successfully with PID: {p.pid}")
    return p.pid
