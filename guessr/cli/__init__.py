"""
CLI commands for playing guessr in the terminal.
"""

from .play import app, cli

__all__ = [
    "app",
    "cli",
]
