# asset_deploy/api/__init__.py
"""API layer for asset-deploy"""

from .deployer import Deployer, deploy
from .exceptions import (
    DeployToolError,
    ConfigError,
    ConfigRepoStaleError,
    SecretDecryptionError,
    EntryNotFoundError,
    BundlingError,
    PublishError,
    NotificationError,
)

__all__ = [
    # Main classes
    "Deployer",

    # Convenience functions
    "deploy",

    # Exceptions
    "DeployToolError",
    "ConfigError",
    "ConfigRepoStaleError",
    "SecretDecryptionError",
    "EntryNotFoundError",
    "BundlingError",
    "PublishError",
    "NotificationError",
]
