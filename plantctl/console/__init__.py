"""
This module initializes the console package, exposing the pipeline execution
and the help text of the launcher.
"""

from .process import execute
from .handler import print_help

__all__ = ["execute", "print_help"]
