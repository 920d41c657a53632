"""Run-scoped context models"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .config import ResolvedConfig
from ..constants import GIT_HTTP_URL_PATTERN, GIT_SSH_URL_PATTERN


def commit_url(remote_url: Optional[str], commit: Optional[str]) -> Optional[str]:
    """Build a browsable commit link from a git remote URL

    ``git@github.com:org/repo.git`` and ``https://github.com/org/repo``
    both map to ``https://github.com/org/repo/commit/<commit>``.
    """
    if not remote_url or not commit:
        return None

    for pattern in (GIT_SSH_URL_PATTERN, GIT_HTTP_URL_PATTERN):
        match = pattern.match(remote_url.strip())
        if match:
            return f"https://{match.group('host')}/{match.group('path')}/commit/{commit}"
    return None


@dataclass(frozen=True)
class RepoStatus:
    """State of a git working directory as reported by a RepoInspector"""

    root: Optional[Path] = None
    remote_url: Optional[str] = None
    local_commit: Optional[str] = None
    is_up_to_date: bool = False
    errors: Tuple[str, ...] = ()

    @property
    def commit_url(self) -> Optional[str]:
        return commit_url(self.remote_url, self.local_commit)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "root": str(self.root) if self.root else None,
            "remote_url": self.remote_url,
            "local_commit": self.local_commit,
            "is_up_to_date": self.is_up_to_date,
            "errors": list(self.errors),
        }


# The configuration directory's status is a RepoStatus taken at startup
ConfigRepoStatus = RepoStatus


@dataclass(frozen=True)
class DeployIdentity:
    """Who and what is being deployed; attached to every notification"""

    commit: Optional[str] = None
    package_name: str = "unknown"
    package_version: str = "0.0.0"
    repository_url: Optional[str] = None
    actor: str = "unknown"

    @property
    def short_commit(self) -> str:
        return (self.commit or "")[:7]

    @property
    def commit_url(self) -> Optional[str]:
        return commit_url(self.repository_url, self.commit)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "commit": self.commit,
            "package_name": self.package_name,
            "package_version": self.package_version,
            "repository_url": self.repository_url,
            "actor": self.actor,
        }


@dataclass(frozen=True)
class DeployContext:
    """Everything a run knows, constructed once and passed explicitly

    ``config`` and ``repo_status`` are ``None`` until the configuration has
    been resolved; notifications sent before that carry the identity only.
    """

    identity: DeployIdentity
    config: Optional[ResolvedConfig] = None
    repo_status: Optional[RepoStatus] = None

    @property
    def environment(self) -> str:
        return self.config.environment if self.config else "unknown"

    @property
    def bucket(self) -> str:
        return (self.config.s3bucket if self.config else None) or "unknown"

    @property
    def config_commit_url(self) -> Optional[str]:
        return self.repo_status.commit_url if self.repo_status else None
