import logging
from typing import TYPE_CHECKING, List
from plantctl.errors import ExternalCommandError, MissingInput
from plantctl.supervisor import persistence, process_utils

if TYPE_CHECKING:
    from plantctl.local.config import LaunchConfig

log = logging.getLogger(__name__)


def check_app_file(config: "LaunchConfig") -> None:
    """
    Ensures the target application script exists.

    :raises MissingInput: If the script is absent.
    """
    if not config.app_file.is_file():
        raise MissingInput(f"Application script not found: '{config.app_file}'", path=config.app_file)


def _app_arguments(config: "LaunchConfig") -> List[str]:
    """Extra arguments passed through to the application."""
    return ["--example"] if config.options.example else []


def get_forever_args(config: "LaunchConfig") -> List[str]:
    """Returns the process monitor command line that starts the application in production."""
    logs = config.logs
    return [
        config.forever_executable, "start",
        "-a",
        "-l", str(logs.forever),
        "-o", str(logs.out),
        "-e", str(logs.err),
        "--minUptime", str(config.forever_min_uptime_ms),
        "--spinSleepTime", str(config.forever_spin_sleep_ms),
        str(config.app_file),
        *_app_arguments(config),
    ]


def get_debug_args(config: "LaunchConfig") -> List[str]:
    """Returns the command line that runs the application directly in debug mode."""
    return [config.node_executable, str(config.app_file), "--debug", *_app_arguments(config)]


def start_production(config: "LaunchConfig") -> None:
    """
    Hands the application over to the persistent process monitor.

    :raises MissingInput: If the application script does not exist.
    :raises ExternalCommandError: If the monitor fails; its exit code is propagated.
    """
    check_app_file(config)
    logs = config.logs

    # The monitor appends to its own log (-a); start it fresh on every launch.
    logs.forever.write_text("")
    if not config.options.append_log:
        logs.out.write_text("")
        logs.err.write_text("")

    args = get_forever_args(config)
    log.info(f"Starting '{config.app_file.name}' under the process monitor...")
    result = process_utils.run_command(args, cwd=config.base_dir, name="forever")
    if not result.ok:
        raise ExternalCommandError(config.forever_executable, result.exit_code, result.diagnostics)
    log.info(f"'{config.app_file.name}' is running under the process monitor (logs: {logs.out.name}, {logs.err.name}).")


def start_debug(config: "LaunchConfig") -> int:
    """
    Launches the application as a background child and records its PID.

    :return: The PID of the started process.
    :raises MissingInput: If the application script does not exist.
    :raises ExternalCommandError: If the interpreter cannot be executed.
    """
    check_app_file(config)
    logs = config.logs
    args = get_debug_args(config)
    try:
        pid = process_utils.launch_detached(
            args, cwd=config.base_dir,
            stdout_path=logs.out, stderr_path=logs.err,
            append=config.options.append_log,
        )
    except OSError as e:
        log.critical(f"Failed to start '{config.app_file.name}': {e}")
        raise ExternalCommandError(config.node_executable, process_utils.EXIT_COMMAND_NOT_FOUND, str(e)) from e

    persistence.write_pid_file(config.pid_file, pid)
    log.info(f"Debug server started (PID {pid}, pidfile {config.pid_file.name}).")
    return pid
