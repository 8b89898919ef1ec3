import sys
import logging
from typing import List, Optional

# Basic console logger for messages BEFORE full setup is complete.
# This logger will be replaced by the full setup later.
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)-8s - [console] - %(message)s',
    stream=sys.stdout
)
log = logging.getLogger("console")

import setproctitle
import plantctl.settings as settings
from plantctl.console import execute, print_help
from plantctl.errors import PlantctlError, TransformFailure, UsageError
from plantctl.local import build_config, parse_arguments
from plantctl.log import print_log_tail, setup_logging

EXIT_INTERRUPTED = 130


def main(argv: Optional[List[str]] = None) -> int:
    """The main entry point for the launcher. Returns the process exit code."""
    argv = sys.argv[1:] if argv is None else argv

    # Usage errors are reported before any side effect, the run log included.
    try:
        options = parse_arguments(argv)
    except UsageError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        print_help()
        return e.exit_code

    if options.help:
        print_help()
        return 0

    setproctitle.setproctitle(settings.PROCESS_TITLE)
    config = build_config(options)
    setup_logging(
        logging.DEBUG if options.verbose else logging.INFO,
        run_log=config.logs.run,
        append=options.append_log,
    )

    try:
        return execute(config)
    except TransformFailure as e:
        log.critical(e.message)
        print_log_tail(config.logs.run, config.run_log_tail_lines)
        return e.exit_code
    except PlantctlError as e:
        log.critical(e.message)
        return e.exit_code
    except KeyboardInterrupt:
        log.warning("Interrupted.")
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
