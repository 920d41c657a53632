"""Asset Deploy - build and publish web assets.

This tool bundles configured entries with environment settings injected,
publishes them (or a pre-built static directory) to S3, invalidates
CloudFront and reports deployment status to chat webhooks.
"""

from .__version__ import __version__, __version_info__, __author__, __license__

# Core API
from .api.deployer import Deployer, deploy

# Data models
from .models import (
    Artifact,
    DeployContext,
    DeployIdentity,
    DeployResult,
    Entry,
    PublishResult,
    ResolvedConfig,
)

# Exceptions
from .api.exceptions import (
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
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__license__",

    # Main classes
    "Deployer",

    # Core API functions
    "deploy",

    # Data models
    "Artifact",
    "DeployContext",
    "DeployIdentity",
    "DeployResult",
    "Entry",
    "PublishResult",
    "ResolvedConfig",

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
