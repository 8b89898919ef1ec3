"""
Local package for the plantctl launcher.

This package turns the command line into LaunchOptions and combines them
with settings.py into the immutable LaunchConfig used by every stage.
"""

from .arguments import LaunchOptions, parse_arguments
from .config import LaunchConfig, LogPaths, build_config

__all__ = ["LaunchOptions", "parse_arguments", "LaunchConfig", "LogPaths", "build_config"]
