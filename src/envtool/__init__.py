"""
envtool - Shell environment synchronizer

Keeps shell environment variables in step with a project's .env file by
emitting export/unset commands from a prompt hook.
"""

__version__ = "0.1.0"

from .core import envfile, reconcile, hooks, rcfile, config

__all__ = [
    "envfile",
    "reconcile",
    "hooks",
    "rcfile",
    "config",
]
