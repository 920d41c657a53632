# asset_deploy/models/__init__.py
"""Data models for asset-deploy"""

from .config import LoadedConfig, ResolvedConfig
from .context import ConfigRepoStatus, DeployContext, DeployIdentity, RepoStatus
from .entry import Artifact, Bundle, Entry
from .result import DeployResult, PublishResult

__all__ = [
    # Config models
    "LoadedConfig",
    "ResolvedConfig",

    # Context models
    "RepoStatus",
    "ConfigRepoStatus",
    "DeployIdentity",
    "DeployContext",

    # Build models
    "Entry",
    "Artifact",
    "Bundle",

    # Result models
    "PublishResult",
    "DeployResult",
]
