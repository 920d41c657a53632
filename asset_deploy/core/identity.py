"""Deployment identity discovery"""

import asyncio
import getpass
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import aiofiles

from ..constants import PACKAGE_MANIFEST_FILE
from ..models.context import DeployIdentity
from ..utils import git_utils

logger = logging.getLogger(__name__)


async def read_package_manifest(cwd: Path) -> Dict[str, Any]:
    """Read ``package.json`` from the project directory, empty if absent"""
    path = cwd / PACKAGE_MANIFEST_FILE
    if not path.is_file():
        return {}

    try:
        async with aiofiles.open(path, 'r', encoding='utf-8') as f:
            content = await f.read()
        data = json.loads(content)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring unreadable {path}: {e}")
        return {}
    return data if isinstance(data, dict) else {}


def _repository_url(manifest: Dict[str, Any]) -> Optional[str]:
    repository = manifest.get('repository')
    if isinstance(repository, dict):
        return repository.get('url')
    return repository if isinstance(repository, str) else None


async def load_identity(cwd: Path) -> DeployIdentity:
    """
    Compute the identity tagged onto every notification of a run

    Args:
        cwd: Project directory

    Returns:
        Deployment identity
    """
    manifest, commit, remote_url, user = await asyncio.gather(
        read_package_manifest(cwd),
        git_utils.get_head_commit(cwd),
        git_utils.get_remote_url(cwd),
        git_utils.get_user_name(cwd),
    )

    if not user:
        try:
            user = getpass.getuser()
        except (KeyError, OSError):
            user = "unknown"

    return DeployIdentity(
        commit=commit,
        package_name=manifest.get('name') or cwd.name,
        package_version=manifest.get('version') or "0.0.0",
        repository_url=remote_url or _repository_url(manifest),
        actor=user,
    )
