import psutil
import logging
from typing import TYPE_CHECKING, List, Set
from plantctl.supervisor import persistence, process_utils

if TYPE_CHECKING:
    from plantctl.local.config import LaunchConfig

log = logging.getLogger(__name__)


def stop_monitored_process(config: "LaunchConfig") -> bool:
    """
    Asks the persistent process monitor to stop the application script.

    Best effort: a failure (nothing running, monitor missing) is logged as a warning.

    :param config: The launch configuration.
    :return: True if the monitor reported success.
    """
    args = [config.forever_executable, "stop", str(config.app_file)]
    result = process_utils.run_command(
        args, cwd=config.base_dir, name="forever", failure_level=logging.WARNING,
    )
    if result.ok:
        log.info(f"Process monitor stopped '{config.app_file.name}'.")
        return True
    log.warning(
        f"Process monitor could not stop '{config.app_file.name}' "
        f"(exit code {result.exit_code}). It was probably not running."
    )
    return False


def identify_processes_to_stop(pid: int) -> Set[psutil.Process]:
    """
    Returns the process recorded in the PID file together with all its children.

    :param pid: The recorded process id.
    :return: A set of psutil.Process objects to be stopped.
    """
    if not process_utils.pid_exists(pid):
        return set()
    try:
        parent = process_utils.get_process_from_pid(pid)
        procs = {parent}
        procs.update(parent.children(recursive=True))
        return procs
    except psutil.NoSuchProcess:
        log.warning(f"Process {pid} no longer exists, skipping children retrieval.")
        return set()


def _terminate_processes(processes: Set[psutil.Process]) -> None:
    """Sends SIGTERM to all processes."""
    for proc in processes:
        try:
            log.debug(f"Sending SIGTERM to {proc.name()} (PID {proc.pid})")
            proc.terminate()
        except psutil.NoSuchProcess:
            log.warning(f"Process {proc.pid} no longer exists, skipping termination.")
            continue
        except psutil.AccessDenied:
            log.warning(f"Not allowed to terminate process {proc.pid}.")


def _forceful_kill(processes: List[psutil.Process]) -> None:
    """Forcefully kills processes that didn't terminate gracefully."""
    if not processes:
        return

    log.warning(f"{len(processes)} processes did not terminate gracefully. Forcing shutdown...")
    for proc in processes:
        try:
            log.warning(f"Killing stubborn process (PID {proc.pid}).")
            proc.kill()
        except psutil.NoSuchProcess:
            log.warning(f"Process {proc.pid} no longer exists, skipping forceful kill.")
            continue
        except psutil.AccessDenied:
            log.warning(f"Not allowed to kill process {proc.pid}.")


def stop_pid_file_process(config: "LaunchConfig") -> bool:
    """
    Terminates the process recorded in the PID file and removes the file.

    Best effort: a stale or unreadable PID file is cleaned up with a warning.

    :param config: The launch configuration.
    :return: True if a live process was found and signalled.
    """
    pid = persistence.read_pid_file(config.pid_file)
    if pid is None:
        log.debug(f"No PID file at '{config.pid_file}'. Nothing to stop.")
        return False

    processes = identify_processes_to_stop(pid)
    if not processes:
        log.warning(f"Stale PID file: process {pid} is not running.")
        persistence.remove_pid_file(config.pid_file)
        return False

    log.info(f"Stopping background process {pid}...")
    _terminate_processes(processes)

    # Wait and verify
    try:
        _, alive = psutil.wait_procs(list(processes), timeout=config.graceful_shutdown_timeout)
    except psutil.Error as e:
        log.warning(f"Error while waiting for processes to exit: {e}")
        alive = [p for p in processes if p.is_running()]

    # If any processes are still alive after the timeout, forcefully kill them.
    _forceful_kill(alive)
    persistence.remove_pid_file(config.pid_file)
    log.info(f"Background process {pid} stopped.")
    return True


def kill_all(config: "LaunchConfig") -> None:
    """
    Stops every previous instance of the application.

    Both instance shapes are covered because either may be present: the one
    managed by the process monitor, and the backgrounded child in the PID file.
    """
    log.info("Stopping previous instances...")
    stop_monitored_process(config)
    stop_pid_file_process(config)
