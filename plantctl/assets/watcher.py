import time
import logging
import threading
from pathlib import Path
from typing import Iterable, List, Optional, Set, TYPE_CHECKING
from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler
from plantctl.errors import PlantctlError
from plantctl.assets.pipeline import run_pipeline
from plantctl.assets.rules import get_bundle_path, get_merge_rule

if TYPE_CHECKING:
    from plantctl.local.config import LaunchConfig

log = logging.getLogger(__name__)


class AssetChangeHandler(FileSystemEventHandler):
    """A watchdog event handler that flags changes to asset source files."""

    def __init__(self, config: "LaunchConfig", changed: threading.Event):
        super().__init__()
        self.config = config
        self.changed = changed
        self.lock = threading.Lock()
        self.manifest_categories: Set[str] = set()

    def _category_of(self, path: Path) -> Optional[str]:
        """Returns the asset category a path belongs to, or None if it is not a source."""
        try:
            relative_path = path.resolve().relative_to(self.config.assets_dir.resolve())
        except ValueError:
            return None
        if len(relative_path.parts) < 2 or relative_path.parts[0] not in self.config.asset_categories:
            return None
        if path.name.endswith((".tmp", "~")) or path.name.startswith("."):
            return None
        return relative_path.parts[0]

    def on_any_event(self, event) -> None:
        """The main event handler method for watchdog, called on any file change."""
        if event.is_directory:
            return
        paths = [event.src_path, getattr(event, "dest_path", "")]
        for path_str in filter(None, paths):
            path = Path(path_str)
            category = self._category_of(path)
            if category is None:
                continue
            log.debug(f"Watchdog event: {event.event_type} on {path_str}")
            if path.name == self.config.manifest_file_name:
                with self.lock:
                    self.manifest_categories.add(category)
            self.changed.set()

    def pop_manifest_changes(self) -> Set[str]:
        with self.lock:
            categories, self.manifest_categories = self.manifest_categories, set()
        return categories


def _drop_bundles(config: "LaunchConfig", categories: Iterable[str]) -> None:
    """Removes bundles whose manifest changed so the next pipeline run re-merges them."""
    for category in categories:
        rule = get_merge_rule(config, category)
        if rule is None:
            continue
        bundle_path = get_bundle_path(config, "production", rule)
        log.info(f"Manifest of {category} changed. Bundle '{bundle_path.name}' will be rebuilt.")
        bundle_path.unlink(missing_ok=True)


def watch_assets(
    config: "LaunchConfig",
    modes: List[str],
    stop_event: Optional[threading.Event] = None
) -> None:
    """
    Watches the asset sources and re-runs the pipeline of each mode on change.

    Rebuilds run on the calling thread after the debounce interval. A failing
    transform is logged and the watch continues. Returns when stop_event is
    set or on KeyboardInterrupt.

    :param config: The launch configuration.
    :param modes: The build modes to keep up to date.
    :param stop_event: An optional event that ends the watch.
    """
    stop_event = stop_event or threading.Event()
    changed = threading.Event()
    handler = AssetChangeHandler(config, changed)
    # Only explicit rebuilds force regeneration; watching relies on mtimes.
    watch_config = config.with_options(rebuild=False)

    observer = Observer()
    observer.schedule(handler, str(config.assets_dir), recursive=True)
    observer.start()
    log.info(f"Watching '{config.assets_dir}' for changes (Ctrl+C to stop)...")
    try:
        while not stop_event.is_set():
            if not changed.wait(timeout=0.5):
                continue
            time.sleep(config.watch_debounce_seconds)
            changed.clear()

            _drop_bundles(config, handler.pop_manifest_changes())
            for mode in modes:
                try:
                    run_pipeline(mode, watch_config)
                except PlantctlError as e:
                    log.error(f"{e.message} Waiting for the next change.")
    except KeyboardInterrupt:
        log.info("Asset watch interrupted.")
    finally:
        observer.stop()
        observer.join()
        log.info("Asset watcher stopped.")
