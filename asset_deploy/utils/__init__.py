# asset_deploy/utils/__init__.py
"""Utility functions for asset-deploy"""

from .async_utils import run_async, gather_with_progress

__all__ = [
    'run_async',
    'gather_with_progress',
]
