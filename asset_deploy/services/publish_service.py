# asset_deploy/services/publish_service.py
"""Publish service implementation"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional

import aiofiles
import aiofiles.os

from ..api.exceptions import PublishError
from ..models.config import ResolvedConfig
from ..models.entry import Artifact
from ..models.result import PublishResult
from ..storage.base import StorageBackend
from ..utils.async_utils import gather_with_progress

logger = logging.getLogger(__name__)


class PublishService:
    """Push artifacts to an object store and invalidate the CDN

    Uploads run as a task group with best-effort semantics: every upload
    is allowed to finish, a failure never cancels its siblings, and nothing
    is rolled back. When any upload fails the remote state is a partial
    publish; redeploying converges it.
    """

    def __init__(self,
                 storage: StorageBackend,
                 progress: Optional[Callable[[int, int], None]] = None):
        """
        Initialize publish service

        Args:
            storage: Object store backend
            progress: Optional callback(completed, total) for uploads
        """
        self.storage = storage
        self.progress = progress

    async def discover_static(self, directory: Path, config: ResolvedConfig) -> List[Artifact]:
        """
        Treat the top-level files of a directory as artifacts

        Subdirectories are skipped. Each file is published under its name.

        Args:
            directory: Pre-built static directory
            config: Resolved configuration (for the key prefix)

        Returns:
            Artifacts referencing the files on disk, sorted by name

        Raises:
            PublishError: If the directory does not exist
        """
        if not await aiofiles.os.path.isdir(directory):
            raise PublishError(f"Static file directory not found: {directory}")

        names = sorted(await aiofiles.os.listdir(directory))
        paths = [directory / name for name in names]
        is_dir = await asyncio.gather(*[aiofiles.os.path.isdir(path) for path in paths])

        artifacts = [
            Artifact(key=config.key_for(path.name), source_path=path)
            for path, skip in zip(paths, is_dir)
            if not skip
        ]
        logger.info(f"Found {len(artifacts)} file(s) in {directory}")
        return artifacts

    async def publish(self, artifacts: List[Artifact]) -> PublishResult:
        """
        Upload all artifacts concurrently, then invalidate what landed

        Args:
            artifacts: Artifacts to publish; each is consumed once

        Returns:
            Publish result

        Raises:
            PublishError: If any upload or the invalidation fails; the error
                carries the published and failed keys
        """
        start_time = time.time()
        result = PublishResult()
        unique = self._last_write_wins(artifacts)

        outcomes = await gather_with_progress(
            [self._upload(artifact) for artifact in unique],
            callback=self.progress,
            return_exceptions=True,
        )

        for artifact, outcome in zip(unique, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(f"Upload of {artifact.key} failed: {outcome}")
                result.failed.append(artifact.key)
                result.errors[artifact.key] = str(outcome)
            else:
                result.published.append(artifact.key)
                result.total_bytes += outcome

        if result.published and self.storage.can_invalidate:
            try:
                await self.storage.invalidate(result.published)
                result.invalidated = list(result.published)
            except Exception as e:
                raise PublishError(
                    f"CDN invalidation failed: {e}",
                    published=result.published,
                    failed=result.failed,
                ) from e

        result.duration = time.time() - start_time

        if result.failed:
            raise PublishError(
                f"{len(result.failed)} of {len(unique)} upload(s) failed: "
                + ", ".join(result.failed),
                published=result.published,
                failed=result.failed,
            )

        logger.info(
            f"Published {len(result.published)} object(s) to {self.storage.name} "
            f"in {result.duration:.2f}s"
        )
        return result

    async def _upload(self, artifact: Artifact) -> int:
        body = artifact.body
        if artifact.source_path is not None and not body:
            async with aiofiles.open(artifact.source_path, 'rb') as f:
                body = await f.read()

        await self.storage.put_object(artifact.key, body, artifact.content_type)
        return len(body)

    def _last_write_wins(self, artifacts: List[Artifact]) -> List[Artifact]:
        by_key: Dict[str, Artifact] = {}
        for artifact in artifacts:
            if artifact.key in by_key:
                logger.warning(f"Duplicate destination {artifact.key}, keeping the last one")
                del by_key[artifact.key]
            by_key[artifact.key] = artifact
        return list(by_key.values())
