import logging
from pathlib import Path
from typing import List, TYPE_CHECKING
from plantctl.errors import MissingInput, TransformFailure
from plantctl.assets.manifest import read_manifest
from plantctl.assets.rules import AssetRule
from plantctl.supervisor import process_utils

if TYPE_CHECKING:
    from plantctl.local.config import LaunchConfig

log = logging.getLogger(__name__)

BEGIN_MARKER = "/* begin file {name} */\n"
END_MARKER = "\n/* end file {name} */\n"


def concatenate_sources(source_dir: Path, names: List[str], source_ext: str) -> bytes:
    """
    Concatenates the listed source files in order, each wrapped in begin/end markers.

    :raises MissingInput: If a listed file does not exist.
    """
    parts: List[bytes] = []
    for name in names:
        file_name = f"{name}.{source_ext}"
        source_path = source_dir / file_name
        if not source_path.is_file():
            raise MissingInput(f"Manifest entry '{name}' has no source file '{source_path}'", path=source_path)
        parts.append(BEGIN_MARKER.format(name=file_name).encode("utf-8"))
        parts.append(source_path.read_bytes())
        parts.append(END_MARKER.format(name=file_name).encode("utf-8"))
    return b"".join(parts)


def merge(config: "LaunchConfig", rule: AssetRule, out_file: Path) -> bool:
    """
    Builds the combined bundle of a category from the files its manifest lists.

    The concatenated stream is piped through the rule's transform and the
    result written to out_file. Individual outputs and their mtimes are not
    consulted or touched.

    :param config: The launch configuration.
    :param rule: The rule whose sources and transform are used.
    :param out_file: The combined output path.
    :return bool: False when the category has no manifest, True once the bundle is written.
    :raises TransformFailure: If the transform exits non-zero.
    """
    source_dir = config.source_dir(rule.category)
    manifest_path = source_dir / config.manifest_file_name
    if not manifest_path.is_file():
        log.info(f"No manifest for {rule.category}. Skipping bundle.")
        return False

    names = read_manifest(manifest_path)
    stream = concatenate_sources(source_dir, names, rule.source_ext)

    log.info(f"Merging {len(names)} {rule.category} into '{out_file.name}'...")
    result = process_utils.run_command(
        rule.command_line, cwd=source_dir, stdin=stream, name=rule.category
    )
    if not result.ok:
        raise TransformFailure("merge", out_file.name, result.exit_code, result.diagnostics)

    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_bytes(result.output)
    log.info(f"Bundle '{out_file.name}' written ({len(result.output)} bytes).")
    return True
