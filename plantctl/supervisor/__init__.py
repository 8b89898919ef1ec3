"""
The Supervisor package.
Manages the lifecycle of the application's server process.

This package contains the ProcessManager class and its helper modules,
which together handle stopping previous instances, starting the server in
debug or production mode, and the subprocess abstraction used by the asset
pipeline.
"""
from .supervisor import ProcessManager

__all__ = ['ProcessManager']
