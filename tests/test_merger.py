import pytest

from plantctl.assets.manifest import read_manifest
from plantctl.assets.merger import merge
from plantctl.assets.rules import AssetRule
from plantctl.errors import MissingInput, TransformFailure


def js_rule(command):
    return AssetRule("javascripts", "js", "js", str(command))


@pytest.fixture
def scripts(app_dir):
    folder = app_dir / "assets" / "javascripts"
    (folder / "a.js").write_text("var a = 1;")
    (folder / "b.js").write_text("var b = 2;")
    (folder / "c.js").write_text("var c = 3;")
    return folder


def test_bundle_follows_manifest_order(make_config, app_dir, scripts, tools):
    (scripts / "defaults").write_text("b\na\n")
    out_file = app_dir / "public" / "production" / "javascripts" / "all.js"

    assert merge(make_config(), js_rule(tools.passthrough), out_file) is True

    bundle = out_file.read_text()
    assert bundle == (
        "/* begin file b.js */\nvar b = 2;\n/* end file b.js */\n"
        "/* begin file a.js */\nvar a = 1;\n/* end file a.js */\n"
    )
    assert "var c" not in bundle


def test_merge_does_not_touch_individual_outputs(make_config, app_dir, scripts, tools):
    (scripts / "defaults").write_text("a\n")
    out_dir = app_dir / "public" / "production" / "javascripts"
    out_dir.mkdir(parents=True)
    (out_dir / "a.js").write_text("old")

    merge(make_config(), js_rule(tools.passthrough), out_dir / "all.js")
    assert (out_dir / "a.js").read_text() == "old"


def test_merge_without_manifest_is_skipped(make_config, app_dir, scripts, tools):
    out_file = app_dir / "public" / "production" / "javascripts" / "all.js"
    assert merge(make_config(), js_rule(tools.passthrough), out_file) is False
    assert not out_file.exists()


def test_manifest_entry_without_source_fails(make_config, app_dir, scripts, tools):
    (scripts / "defaults").write_text("a\nmissing\n")
    with pytest.raises(MissingInput):
        merge(make_config(), js_rule(tools.passthrough), app_dir / "all.js")


def test_failing_merge_transform_uses_merge_exit_code(make_config, app_dir, scripts, tools):
    (scripts / "defaults").write_text("a\n")
    out_file = app_dir / "public" / "production" / "javascripts" / "all.js"

    with pytest.raises(TransformFailure) as excinfo:
        merge(make_config(), js_rule(tools.fail_on_bundle), out_file)
    assert excinfo.value.exit_code == 3
    assert excinfo.value.stage == "merge"
    assert not out_file.exists()


def test_read_manifest_skips_blank_lines_and_comments(tmp_path):
    manifest = tmp_path / "defaults"
    manifest.write_text("# load order\n  jquery  \n\nplants\r\nmain\n")
    assert read_manifest(manifest) == ["jquery", "plants", "main"]
