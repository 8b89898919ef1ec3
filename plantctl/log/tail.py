import logging
from collections import deque
from pathlib import Path
from typing import List

log = logging.getLogger(__name__)


def tail_log(log_path: Path, lines: int = 20) -> List[str]:
    """
    Returns the last lines of a log file.

    :param log_path: The log file to read.
    :param lines: How many lines to return at most.
    :return list: The lines without trailing newlines; empty if the file is missing.
    """
    if lines <= 0 or not log_path.is_file():
        return []
    for handler in logging.getLogger().handlers:
        handler.flush()
    with log_path.open("r", encoding="utf-8", errors="replace") as f:
        return [line.rstrip("\n") for line in deque(f, maxlen=lines)]


def print_log_tail(log_path: Path, lines: int = 20) -> None:
    """Prints the tail of a log file for diagnosis."""
    tail = tail_log(log_path, lines)
    if not tail:
        return
    print(f"\n--- Last {len(tail)} lines of {log_path.name} ---")
    for line in tail:
        print(line)
    print("-" * 40)
