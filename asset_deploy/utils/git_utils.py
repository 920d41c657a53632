"""Git operation utilities"""

import asyncio
import logging
from pathlib import Path
from subprocess import PIPE
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


async def run_git(path: Path, *args: str) -> Tuple[int, str, str]:
    """
    Run a git command in a directory

    Args:
        path: Working directory
        *args: git arguments

    Returns:
        Tuple of (returncode, stdout, stderr); stdout keeps its leading
        whitespace (porcelain status columns). returncode is 127 when the
        git executable is missing
    """
    try:
        process = await asyncio.create_subprocess_exec(
            'git', *args,
            cwd=str(path),
            stdout=PIPE,
            stderr=PIPE,
        )
    except FileNotFoundError:
        return 127, "", "git executable not found"

    stdout, stderr = await process.communicate()
    return process.returncode, stdout.decode().rstrip(), stderr.decode().strip()


async def is_git_repository(path: Path) -> bool:
    """
    Check if directory is inside a Git work tree

    Args:
        path: Directory path

    Returns:
        True if it's a Git repository
    """
    if not path.is_dir():
        return False
    code, stdout, _ = await run_git(path, 'rev-parse', '--is-inside-work-tree')
    return code == 0 and stdout == 'true'


async def get_repo_root(path: Path) -> Optional[Path]:
    """Get the top-level directory of the repository containing ``path``"""
    code, stdout, _ = await run_git(path, 'rev-parse', '--show-toplevel')
    return Path(stdout) if code == 0 and stdout else None


async def get_remote_url(path: Path, remote: str = 'origin') -> Optional[str]:
    """
    Get Git remote URL

    Args:
        path: Repository path
        remote: Remote name

    Returns:
        Remote URL or None
    """
    code, stdout, _ = await run_git(path, 'remote', 'get-url', remote)
    return stdout if code == 0 and stdout else None


async def get_head_commit(path: Path) -> Optional[str]:
    """Get the full hash of HEAD"""
    code, stdout, _ = await run_git(path, 'rev-parse', 'HEAD')
    return stdout if code == 0 and stdout else None


async def get_user_name(path: Path) -> Optional[str]:
    """Get the configured git user name"""
    code, stdout, _ = await run_git(path, 'config', 'user.name')
    return stdout if code == 0 and stdout else None


async def fetch(path: Path, remote: str = 'origin') -> bool:
    """
    Fetch from remote so ahead/behind counts are current

    Args:
        path: Repository path
        remote: Remote name

    Returns:
        True if the fetch succeeded
    """
    code, _, stderr = await run_git(path, 'fetch', '--quiet', remote)
    if code != 0:
        logger.warning(f"git fetch failed in {path}: {stderr}")
    return code == 0


async def get_uncommitted_files(path: Path) -> List[str]:
    """
    Get list of modified, staged and untracked files

    Args:
        path: Repository path

    Returns:
        List of file paths with uncommitted changes
    """
    code, stdout, _ = await run_git(path, 'status', '--porcelain')
    if code != 0 or not stdout:
        return []
    return [line[3:] for line in stdout.splitlines() if line.strip()]


async def get_ahead_behind(path: Path) -> Optional[Tuple[int, int]]:
    """
    Get ahead/behind count relative to upstream

    Args:
        path: Repository path

    Returns:
        Tuple of (ahead_count, behind_count), or None when the branch has
        no upstream
    """
    code, stdout, _ = await run_git(
        path, 'rev-list', '--left-right', '--count', 'HEAD...@{upstream}'
    )
    if code != 0:
        return None

    parts = stdout.split()
    if len(parts) != 2:
        return None
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return None
