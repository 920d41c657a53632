# asset_deploy/cli/commands/__init__.py
"""CLI commands"""

from . import deploy

__all__ = [
    "deploy",
]
