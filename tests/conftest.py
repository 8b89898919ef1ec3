import logging
import stat
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

from plantctl.local.arguments import LaunchOptions
from plantctl.local.config import LaunchConfig

PASSTHROUGH = '''import os, sys
with open({calls!r}, "a") as f:
    f.write(os.getcwd() + " | " + " ".join(sys.argv[1:]) + "\\n")
sys.stdout.buffer.write(sys.stdin.buffer.read())
'''

FAILING = '''import sys
sys.stdin.buffer.read()
sys.stderr.write("ParseError: unrecognised input on line 3\\n")
sys.exit(5)
'''

FAIL_ON_BUNDLE = '''import sys
data = sys.stdin.buffer.read()
if b"/* begin file" in data:
    sys.stderr.write("cannot minify bundle\\n")
    sys.exit(4)
sys.stdout.buffer.write(data)
'''

FAKE_FOREVER = '''import sys
with open({calls!r}, "a") as f:
    f.write(" ".join(sys.argv[1:]) + "\\n")
if sys.argv[1] == "stop":
    sys.stderr.write("error: Forever cannot find process with id: app.js\\n")
    sys.exit(1)
sys.exit(int({start_exit!r}))
'''


def write_tool(path: Path, body: str) -> Path:
    """Writes an executable Python script standing in for an external tool."""
    path.write_text(f"#!{sys.executable}\n{body}", encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def call_lines(calls_file: Path):
    if not calls_file.exists():
        return []
    return calls_file.read_text(encoding="utf-8").splitlines()


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def tools(tmp_path):
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    calls = tmp_path / "calls.log"
    forever_calls = tmp_path / "forever.log"
    return SimpleNamespace(
        calls=calls,
        forever_calls=forever_calls,
        passthrough=write_tool(bin_dir / "passthrough", PASSTHROUGH.format(calls=str(calls))),
        failing=write_tool(bin_dir / "failing", FAILING),
        fail_on_bundle=write_tool(bin_dir / "fail_on_bundle", FAIL_ON_BUNDLE),
        forever=write_tool(bin_dir / "forever", FAKE_FOREVER.format(calls=str(forever_calls), start_exit="0")),
        forever_broken=write_tool(bin_dir / "forever_broken", FAKE_FOREVER.format(calls=str(forever_calls), start_exit="7")),
    )


@pytest.fixture
def app_dir(tmp_path):
    base = tmp_path / "plants"
    for category in ("stylesheets", "javascripts", "images"):
        (base / "assets" / category).mkdir(parents=True)
    return base


@pytest.fixture
def make_config(app_dir, tools):
    def _make(options=None, **overrides):
        values = dict(
            base_dir=app_dir,
            app_file=app_dir / "app.js",
            options=options or LaunchOptions(update=True),
            lessc_executable=str(tools.passthrough),
            uglifyjs_executable=str(tools.passthrough),
            copy_executable=str(tools.passthrough),
            forever_executable=str(tools.forever),
            node_executable=sys.executable,
            graceful_shutdown_timeout=5,
        )
        values.update(overrides)
        return LaunchConfig(**values)
    return _make
