import os
import logging
from pathlib import Path
from typing import List, TYPE_CHECKING
from plantctl.errors import MissingInput, TransformFailure
from plantctl.assets.rules import AssetRule
from plantctl.supervisor import process_utils

if TYPE_CHECKING:
    from plantctl.local.config import LaunchConfig

log = logging.getLogger(__name__)


def find_sources(source_dir: Path, source_ext: str) -> List[Path]:
    """Returns the files matching '<source_dir>/*.<source_ext>', sorted by name."""
    if not source_dir.is_dir():
        return []
    return sorted(p for p in source_dir.glob(f"*.{source_ext}") if p.is_file())


def is_stale(source_path: Path, output_path: Path, rebuild: bool = False) -> bool:
    """
    Decides whether an output has to be regenerated.

    An output is stale when it is missing or not newer than its source. Since a
    transform copies the source's mtime onto the output, an output is only
    skipped once something has touched it after the last transform.
    """
    if rebuild or not output_path.exists():
        return True
    return source_path.stat().st_mtime_ns >= output_path.stat().st_mtime_ns


def transform_file(rule: AssetRule, source_path: Path, output_path: Path) -> None:
    """
    Runs the rule's transform on one source file.

    The source is piped to the command's stdin and its stdout is written to
    the output; the command runs inside the source folder so relative
    includes resolve. On success the output gets the source's timestamps.

    :raises TransformFailure: If the command exits non-zero. The previous
        output, if any, is left untouched.
    :raises MissingInput: If the source vanished after it was enumerated.
    """
    temp_path = output_path.with_name(output_path.name + ".tmp")
    try:
        with temp_path.open("wb") as sink:
            try:
                result = process_utils.run_command(
                    rule.command_line, cwd=source_path.parent,
                    stdin=source_path, stdout=sink, name=rule.category,
                )
            except FileNotFoundError as e:
                raise MissingInput(
                    f"Source file '{source_path}' disappeared before it could be transformed.",
                    path=source_path,
                ) from e
        if not result.ok:
            raise TransformFailure("update", source_path.name, result.exit_code, result.diagnostics)
        temp_path.replace(output_path)
    finally:
        temp_path.unlink(missing_ok=True)

    source_stat = source_path.stat()
    os.utime(output_path, ns=(source_stat.st_atime_ns, source_stat.st_mtime_ns))


def update(config: "LaunchConfig", mode: str, rule: AssetRule) -> bool:
    """
    Brings the outputs of one asset rule up to date for a build mode.

    :param config: The launch configuration (rebuild flag, directories).
    :param mode: 'debug' or 'production'.
    :param rule: The category/extension rule to apply.
    :return bool: True if at least one file was regenerated.
    :raises TransformFailure: On the first failing transform; nothing after it runs.
    """
    source_dir = config.source_dir(rule.category)
    sources = find_sources(source_dir, rule.source_ext)
    if not sources:
        log.debug(f"[{mode}] {rule.category}/*.{rule.source_ext}: nothing to do.")
        return False

    output_dir = config.output_dir(mode, rule.category)
    output_dir.mkdir(parents=True, exist_ok=True)

    updated = False
    for source_path in sources:
        output_path = output_dir / rule.output_name(source_path)
        if not is_stale(source_path, output_path, config.rebuild):
            log.debug(f"[{mode}] '{output_path.name}' is up-to-date. Skipping.")
            continue

        log.info(f"[{mode}] Updating '{source_path.name}' -> '{output_path.relative_to(config.public_dir)}'")
        transform_file(rule, source_path, output_path)
        updated = True

    return updated
