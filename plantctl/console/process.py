import logging
from plantctl.assets import clean, run_pipeline, watch_assets
from plantctl.errors import EXIT_OK
from plantctl.local.config import LaunchConfig
from plantctl.supervisor import ProcessManager

log = logging.getLogger(__name__)


def execute(config: LaunchConfig) -> int:
    """
    Runs one launcher invocation: kill, clean, update assets, start, watch.

    Each stage receives the same immutable configuration. The first fatal
    error aborts everything after it.

    :param config: The launch configuration.
    :return int: The exit code.
    :raises PlantctlError: On any fatal error.
    """
    options = config.options
    process_manager = ProcessManager(config)
    modes = options.modes
    log.debug(f"Executing with options {options}, modes {modes}")

    if options.should_kill:
        process_manager.kill()

    if options.clean:
        clean(config, modes)

    if options.should_update:
        for mode in modes:
            run_pipeline(mode, config)

    if options.should_start:
        mode = "production" if options.production else "debug"
        process_manager.start(mode)

    if options.watch:
        watch_assets(config, modes)

    return EXIT_OK
