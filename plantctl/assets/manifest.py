import logging
from pathlib import Path
from typing import List

log = logging.getLogger(__name__)


def read_manifest(manifest_path: Path) -> List[str]:
    """
    Reads the ordered list of base names declaring a bundle's composition.

    One base name (no extension) per line. Blank lines and lines starting
    with '#' are skipped. Order is preserved exactly as written.

    :param manifest_path: The path of the manifest ('defaults') file.
    :return list: The base names in declaration order.
    """
    names = []
    for line in manifest_path.read_text(encoding="utf-8").splitlines():
        name = line.strip()
        if not name or name.startswith("#"):
            continue
        names.append(name)
    log.debug(f"Manifest '{manifest_path}' lists {len(names)} entries: {names}")
    return names
