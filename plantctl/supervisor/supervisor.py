import logging
from typing import Optional
from plantctl.local.config import LaunchConfig
from plantctl.supervisor import persistence, process_utils, shutdown, startup

log = logging.getLogger(__name__)

STATE_STOPPED = "stopped"
STATE_STARTING = "starting"
STATE_RUNNING = "running"


class ProcessManager:
    """
    Manages the lifecycle of the application server process.

    In production the server is handed to the persistent process monitor,
    which owns its restart policy from then on. In debug it runs as a
    detached child whose PID is kept in the PID file.
    """

    def __init__(self, config: LaunchConfig) -> None:
        """Initializes the ProcessManager state."""
        self.config = config
        self.state = STATE_STOPPED
        self.pid: Optional[int] = None

    def get_pid_info(self) -> Optional[int]:
        """Returns the PID recorded in the PID file, if any."""
        return persistence.read_pid_file(self.config.pid_file)

    def get_state(self) -> str:
        """Reports 'running' when the PID file names a live process."""
        if self.state == STATE_STARTING:
            return self.state
        pid = self.get_pid_info()
        if pid is not None and process_utils.pid_exists(pid):
            return STATE_RUNNING
        return self.state

    def kill(self) -> None:
        """Stops previous instances of both shapes. Never fatal."""
        shutdown.kill_all(self.config)
        self.state = STATE_STOPPED
        self.pid = None

    def start(self, mode: str) -> None:
        """
        Starts the application in the given mode.

        :param mode: 'debug' or 'production'.
        """
        self.state = STATE_STARTING
        try:
            if mode == "production":
                startup.start_production(self.config)
            elif mode == "debug":
                self.pid = startup.start_debug(self.config)
            else:
                raise ValueError(f"Unknown build mode '{mode}'.")
        except Exception:
            self.state = STATE_STOPPED
            raise
        self.state = STATE_RUNNING
