"""Repository status inspection"""

from abc import ABC, abstractmethod
from pathlib import Path

from ..models.context import RepoStatus
from ..utils import git_utils


class RepoInspector(ABC):
    """Reports whether a directory matches what is committed and pushed"""

    @abstractmethod
    async def status(self, path: Path) -> RepoStatus:
        """
        Inspect a directory

        Args:
            path: Directory inside a working tree

        Returns:
            Repository status
        """
        pass


class GitRepoInspector(RepoInspector):
    """RepoInspector backed by the git CLI"""

    def __init__(self, remote: str = 'origin', fetch: bool = True):
        """
        Initialize inspector

        Args:
            remote: Remote to compare against
            fetch: Fetch from the remote before counting commits
        """
        self.remote = remote
        self.fetch = fetch

    async def status(self, path: Path) -> RepoStatus:
        if not await git_utils.is_git_repository(path):
            return RepoStatus(
                root=path,
                is_up_to_date=False,
                errors=(f"{path} is not a git repository",),
            )

        root = await git_utils.get_repo_root(path) or path
        remote_url = await git_utils.get_remote_url(path, self.remote)
        local_commit = await git_utils.get_head_commit(path)

        if self.fetch and remote_url:
            await git_utils.fetch(path, self.remote)

        errors = []
        uncommitted = await git_utils.get_uncommitted_files(path)
        if uncommitted:
            errors.append(
                f"Uncommitted changes: {', '.join(sorted(uncommitted))}"
            )

        counts = await git_utils.get_ahead_behind(path)
        if counts is None:
            errors.append("Current branch has no upstream")
        else:
            ahead, behind = counts
            if ahead:
                errors.append(f"Local branch is {ahead} commit(s) ahead of remote, push first")
            if behind:
                errors.append(f"Local branch is {behind} commit(s) behind remote, pull first")

        return RepoStatus(
            root=root,
            remote_url=remote_url,
            local_commit=local_commit,
            is_up_to_date=not errors,
            errors=tuple(errors),
        )
