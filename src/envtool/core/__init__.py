"""
envtool core modules.

Includes:
- envfile: .env file parsing
- reconcile: Managed-variable diff into unset/export directives
- hooks: bash and zsh prompt hook templates
- rcfile: Idempotent hook installation into rc files
- config: YAML config file and ENVTOOL_* environment settings
"""

from . import envfile
from . import reconcile
from . import hooks
from . import rcfile
from . import config

__all__ = [
    "envfile",
    "reconcile",
    "hooks",
    "rcfile",
    "config",
]
