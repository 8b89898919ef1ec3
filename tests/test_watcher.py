import logging
import threading
import time

from watchdog.events import FileCreatedEvent, FileModifiedEvent, DirModifiedEvent

from conftest import FAILING, PASSTHROUGH, write_tool
from plantctl.assets.pipeline import run_pipeline
from plantctl.assets.watcher import AssetChangeHandler, _drop_bundles, watch_assets


def make_handler(config):
    changed = threading.Event()
    return AssetChangeHandler(config, changed), changed


def test_source_change_sets_the_changed_flag(make_config, app_dir):
    handler, changed = make_handler(make_config())
    handler.on_any_event(FileModifiedEvent(str(app_dir / "assets" / "stylesheets" / "a.less")))
    assert changed.is_set()


def test_irrelevant_events_are_ignored(make_config, app_dir):
    handler, changed = make_handler(make_config())
    handler.on_any_event(FileModifiedEvent(str(app_dir / "public" / "debug" / "stylesheets" / "a.css")))
    handler.on_any_event(FileCreatedEvent(str(app_dir / "assets" / "stylesheets" / "a.css.tmp")))
    handler.on_any_event(FileModifiedEvent(str(app_dir / "assets" / "README")))
    handler.on_any_event(DirModifiedEvent(str(app_dir / "assets" / "stylesheets")))
    assert not changed.is_set()


def test_manifest_change_drops_the_bundle(make_config, app_dir):
    styles = app_dir / "assets" / "stylesheets"
    (styles / "a.less").write_text("a {}")
    (styles / "defaults").write_text("a\n")
    config = make_config()
    run_pipeline("production", config)
    bundle = app_dir / "public" / "production" / "stylesheets" / "all.css"
    assert bundle.exists()

    handler, changed = make_handler(config)
    handler.on_any_event(FileModifiedEvent(str(styles / "defaults")))
    assert changed.is_set()
    categories = handler.pop_manifest_changes()
    assert categories == {"stylesheets"}
    assert handler.pop_manifest_changes() == set()

    _drop_bundles(config, categories)
    assert not bundle.exists()


def test_watch_returns_when_stopped(make_config):
    stop_event = threading.Event()
    stop_event.set()
    watch_assets(make_config(), ["debug"], stop_event=stop_event)


def swap_tool(path, body):
    """Replaces a tool script in one rename so a running rebuild never reads half a file."""
    write_tool(path.with_name(path.name + ".next"), body).replace(path)


def wait_until(condition, touch, timeout=15.0):
    """Polls condition, rewriting the watched source now and then in case the observer was not up yet."""
    deadline = time.monotonic() + timeout
    next_touch = 0.0
    while time.monotonic() < deadline:
        if condition():
            return True
        if time.monotonic() >= next_touch:
            touch()
            next_touch = time.monotonic() + 1.0
        time.sleep(0.05)
    return condition()


def test_watch_rebuilds_and_survives_a_failing_build(make_config, app_dir, tools, caplog):
    caplog.set_level(logging.INFO)
    source = app_dir / "assets" / "stylesheets" / "a.less"
    source.write_text("a {}")
    output = app_dir / "public" / "debug" / "stylesheets" / "a.css"
    config = make_config(watch_debounce_seconds=0.05)
    run_pipeline("debug", config)
    assert output.read_text() == "a {}"

    stop_event = threading.Event()
    watcher = threading.Thread(target=watch_assets, args=(config, ["debug"], stop_event), daemon=True)
    watcher.start()
    try:
        assert wait_until(lambda: output.read_text() == "b {}", lambda: source.write_text("b {}"))

        # The compiler starts rejecting the source; the watch keeps going.
        swap_tool(tools.passthrough, FAILING)
        assert wait_until(
            lambda: "Waiting for the next change." in caplog.text,
            lambda: source.write_text("c {"),
        )
        assert watcher.is_alive()
        assert output.read_text() == "b {}"

        swap_tool(tools.passthrough, PASSTHROUGH.format(calls=str(tools.calls)))
        assert wait_until(lambda: output.read_text() == "d {}", lambda: source.write_text("d {}"))
        assert watcher.is_alive()
    finally:
        stop_event.set()
        watcher.join(timeout=10)
    assert not watcher.is_alive()
