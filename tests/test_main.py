import pytest

import plantctl.settings as settings
from conftest import call_lines
from plantctl.main import main


@pytest.fixture
def configured(monkeypatch, app_dir, tools):
    monkeypatch.setattr(settings, "BASE_DIR", app_dir)
    monkeypatch.setattr(settings, "LESSC_EXECUTABLE", str(tools.passthrough))
    monkeypatch.setattr(settings, "UGLIFYJS_EXECUTABLE", str(tools.passthrough))
    monkeypatch.setattr(settings, "COPY_EXECUTABLE", str(tools.passthrough))
    monkeypatch.setattr(settings, "FOREVER_EXECUTABLE", str(tools.forever))
    (app_dir / "assets" / "stylesheets" / "plants.less").write_text("table {}")
    (app_dir / "assets" / "stylesheets" / "defaults").write_text("plants\n")
    return app_dir


def test_help_exits_zero(capsys):
    assert main(["-h"]) == 0
    assert "+production" in capsys.readouterr().out


def test_usage_errors_exit_one_without_side_effects(configured, capsys):
    assert main([]) == 1
    assert main(["-d", "-p"]) == 1
    assert main(["--frobnicate"]) == 1
    assert "Error:" in capsys.readouterr().err
    assert not (configured / "public").exists()
    assert not (configured / "plants.run").exists()


def test_update_assets_builds_both_modes(configured):
    assert main(["+update-assets"]) == 0
    assert (configured / "public" / "debug" / "stylesheets" / "plants.css").exists()
    assert (configured / "public" / "production" / "stylesheets" / "plants.css").exists()
    assert (configured / "public" / "production" / "stylesheets" / "all.css").exists()
    assert (configured / "plants.run").exists()


def test_update_failure_exits_two_and_prints_run_log_tail(configured, monkeypatch, tools, capsys):
    monkeypatch.setattr(settings, "LESSC_EXECUTABLE", str(tools.failing))
    assert main(["-nu"]) == 2
    out = capsys.readouterr().out
    assert "Last" in out and "plants.run" in out
    assert "ParseError" in (configured / "plants.run").read_text()


def test_merge_failure_exits_three(configured, monkeypatch, tools):
    monkeypatch.setattr(settings, "LESSC_EXECUTABLE", str(tools.fail_on_bundle))
    assert main(["-pn"]) == 3


def test_production_macro_kills_builds_and_starts(configured, tools):
    (configured / "app.js").write_text("// server")
    assert main(["+production"]) == 0
    calls = call_lines(tools.forever_calls)
    assert calls[0].startswith("stop ")
    assert calls[1].startswith("start ")
    assert (configured / "public" / "production" / "stylesheets" / "all.css").exists()


def test_missing_app_script_exits_one(configured, tools):
    assert main(["-p"]) == 1
    assert [c for c in call_lines(tools.forever_calls) if c.startswith("start")] == []


def test_monitor_exit_code_is_propagated(configured, monkeypatch, tools):
    (configured / "app.js").write_text("// server")
    monkeypatch.setattr(settings, "FOREVER_EXECUTABLE", str(tools.forever_broken))
    assert main(["-p"]) == 7


def test_custom_app_file(configured, tools):
    (configured / "server.js").write_text("// server")
    assert main(["-pa", "server.js"]) == 0
    assert call_lines(tools.forever_calls)[-1].endswith("server.js")
