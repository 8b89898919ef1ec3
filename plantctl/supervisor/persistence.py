import logging
from pathlib import Path
from typing import Optional

log = logging.getLogger(__name__)


def read_pid_file(pid_file: Path) -> Optional[int]:
    """
    Reads the PID file from disk and returns the recorded process id.

    An unreadable or malformed PID file is removed.

    :param pid_file: The path of the PID file.
    :return: The PID if the file exists and is valid, else None.
    """
    if not pid_file.exists():
        return None
    try:
        pid = int(pid_file.read_text().strip())
        if pid <= 0:
            raise ValueError(f"invalid pid {pid}")
        return pid
    except (ValueError, IOError) as e:
        log.warning(f"Removing unreadable PID file '{pid_file}': {e}")
        pid_file.unlink(missing_ok=True)
        return None

def write_pid_file(pid_file: Path, pid: int) -> None:
    """
    Atomically writes a process id to the PID file.

    :param pid_file: The path of the PID file.
    :param pid: The process id to record.
    """
    temp_pid_path = pid_file.with_suffix(".tmp")
    try:
        temp_pid_path.write_text(f"{pid}\n")
        temp_pid_path.replace(pid_file)
        log.debug(f"Recorded PID {pid} in '{pid_file}'.")
    except (IOError, OSError) as e:
        log.error(f"Failed to write PID file: {e}", exc_info=True)
        raise
    finally:
        temp_pid_path.unlink(missing_ok=True)

def remove_pid_file(pid_file: Path) -> None:
    """Removes the PID file if present."""
    pid_file.unlink(missing_ok=True)
    log.debug(f"Cleaned up PID file '{pid_file}'.")
