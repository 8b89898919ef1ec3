"""
Logging module for the launcher.
This module provides functionality to set up logging and to show the tail of the run log.
"""

from .setup import setup_logging
from .tail import print_log_tail, tail_log

__all__ = ["setup_logging", "print_log_tail", "tail_log"]
