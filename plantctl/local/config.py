import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import ModuleType
from typing import Optional, Tuple

import plantctl.settings as default_settings
from plantctl.local.arguments import LaunchOptions

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogPaths:
    """The four log files of one application directory."""

    run: Path
    out: Path
    err: Path
    forever: Path

    @classmethod
    def for_base_dir(cls, base_dir: Path) -> "LogPaths":
        name = base_dir.name or "app"
        return cls(
            run=base_dir / f"{name}.run",
            out=base_dir / f"{name}.out",
            err=base_dir / f"{name}.err",
            forever=base_dir / f"{name}.for",
        )


@dataclass(frozen=True)
class LaunchConfig:
    """
    Immutable configuration threaded through every stage of the launcher.

    It combines the defaults from `settings.py` (environment and `.env`
    overrides included) with the options parsed from the command line.
    """

    base_dir: Path
    app_file: Path
    options: LaunchOptions = field(default_factory=LaunchOptions)

    # External commands
    node_executable: str = default_settings.NODE_EXECUTABLE
    lessc_executable: str = default_settings.LESSC_EXECUTABLE
    uglifyjs_executable: str = default_settings.UGLIFYJS_EXECUTABLE
    copy_executable: str = default_settings.COPY_EXECUTABLE
    forever_executable: str = default_settings.FOREVER_EXECUTABLE

    # Process monitor
    forever_min_uptime_ms: int = default_settings.FOREVER_MIN_UPTIME_MS
    forever_spin_sleep_ms: int = default_settings.FOREVER_SPIN_SLEEP_MS
    graceful_shutdown_timeout: int = default_settings.GRACEFUL_SHUTDOWN_TIMEOUT

    # Asset pipeline
    asset_categories: Tuple[str, ...] = default_settings.ASSET_CATEGORIES
    image_extensions: Tuple[str, ...] = default_settings.IMAGE_EXTENSIONS
    manifest_file_name: str = default_settings.MANIFEST_FILE_NAME
    merge_bundle_name: str = default_settings.MERGE_BUNDLE_NAME
    watch_debounce_seconds: float = default_settings.WATCHDOG_DEBOUNCE_SECONDS

    # Logging
    run_log_tail_lines: int = default_settings.RUN_LOG_TAIL_LINES

    @property
    def assets_dir(self) -> Path:
        return self.base_dir / default_settings.ASSETS_DIR_NAME

    @property
    def public_dir(self) -> Path:
        return self.base_dir / default_settings.PUBLIC_DIR_NAME

    @property
    def logs(self) -> LogPaths:
        return LogPaths.for_base_dir(self.base_dir)

    @property
    def pid_file(self) -> Path:
        return self.base_dir / f"{self.base_dir.name or 'app'}.pid"

    @property
    def rebuild(self) -> bool:
        return self.options.rebuild

    def source_dir(self, category: str) -> Path:
        """The folder holding the sources of an asset category."""
        return self.assets_dir / category

    def output_dir(self, mode: str, category: str) -> Path:
        """The folder receiving the outputs of an asset category in a build mode."""
        return self.public_dir / mode / category

    def with_options(self, **changes) -> "LaunchConfig":
        """Returns a copy with some options replaced."""
        return replace(self, options=replace(self.options, **changes))


def build_config(
    options: LaunchOptions,
    settings: ModuleType = default_settings,
    base_dir: Optional[Path] = None
) -> LaunchConfig:
    """
    Builds the LaunchConfig for one invocation.

    :param options: The parsed command-line options.
    :param settings: The settings module to read defaults from.
    :param base_dir: Overrides the application directory (defaults to settings.BASE_DIR).
    :return LaunchConfig: The frozen configuration.
    """
    root = Path(base_dir or settings.BASE_DIR).resolve()
    app_file = Path(options.app_file or settings.APP_FILE)
    if not app_file.is_absolute():
        app_file = root / app_file

    config = LaunchConfig(
        base_dir=root,
        app_file=app_file,
        options=options,
        node_executable=settings.NODE_EXECUTABLE,
        lessc_executable=settings.LESSC_EXECUTABLE,
        uglifyjs_executable=settings.UGLIFYJS_EXECUTABLE,
        copy_executable=settings.COPY_EXECUTABLE,
        forever_executable=settings.FOREVER_EXECUTABLE,
        forever_min_uptime_ms=settings.FOREVER_MIN_UPTIME_MS,
        forever_spin_sleep_ms=settings.FOREVER_SPIN_SLEEP_MS,
        graceful_shutdown_timeout=settings.GRACEFUL_SHUTDOWN_TIMEOUT,
        asset_categories=tuple(settings.ASSET_CATEGORIES),
        image_extensions=tuple(settings.IMAGE_EXTENSIONS),
        manifest_file_name=settings.MANIFEST_FILE_NAME,
        merge_bundle_name=settings.MERGE_BUNDLE_NAME,
        watch_debounce_seconds=settings.WATCHDOG_DEBOUNCE_SECONDS,
        run_log_tail_lines=settings.RUN_LOG_TAIL_LINES,
    )
    log.debug(f"Launch configuration built for '{root}' (app: {app_file.name}).")
    return config
