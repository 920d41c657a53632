# asset_deploy/storage/__init__.py
"""Storage backends for asset-deploy"""

from .base import StorageBackend
from .s3 import S3Storage

__all__ = [
    'StorageBackend',
    'S3Storage',
]
