"""Core functionality for asset-deploy"""

from .bundler import Bundler, EsbuildBundler
from .config_guard import ConfigRepoGuard
from .config_loader import ConfigLoader
from .config_resolver import ConfigResolver
from .entries import parse_entries, parse_entry, validate_entries
from .identity import load_identity
from .repo_inspector import GitRepoInspector, RepoInspector
from .secrets import SecretDecryptor, SopsDecryptor

__all__ = [
    "Bundler",
    "EsbuildBundler",
    "ConfigRepoGuard",
    "ConfigLoader",
    "ConfigResolver",
    "parse_entries",
    "parse_entry",
    "validate_entries",
    "load_identity",
    "RepoInspector",
    "GitRepoInspector",
    "SecretDecryptor",
    "SopsDecryptor",
]
