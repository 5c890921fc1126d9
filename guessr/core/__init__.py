"""
Environment and settings helpers.
"""

from .env import load_env
from .settings import Settings

__all__ = ["load_env", "Settings"]
