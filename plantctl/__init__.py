"""
plantctl: build and launch wrapper for the plants database web application.
"""

__version__ = "1.0.0"
