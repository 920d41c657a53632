"""Build orchestration"""

import asyncio
import logging
import time
from typing import List

from ..core.bundler import Bundler
from ..constants import SOURCEMAP_SUFFIX
from ..models.config import ResolvedConfig
from ..models.entry import Artifact, Entry

logger = logging.getLogger(__name__)


class BuildService:
    """Drive the bundler once per entry and collect the artifacts"""

    def __init__(self, bundler: Bundler):
        """
        Initialize build service

        Args:
            bundler: Bundler implementation
        """
        self.bundler = bundler

    async def build(self, entries: List[Entry], config: ResolvedConfig) -> List[Artifact]:
        """
        Build every entry concurrently

        Entries are independent. The first bundling error propagates and
        aborts the run; no partial result is returned.

        Args:
            entries: Validated entries
            config: Resolved configuration

        Returns:
            Bundle and sourcemap artifacts, in entry order

        Raises:
            BundlingError: If any entry fails to bundle
        """
        start_time = time.time()
        results = await asyncio.gather(
            *[self._build_entry(entry, config) for entry in entries]
        )

        artifacts = [artifact for pair in results for artifact in pair]
        logger.info(
            f"Built {len(entries)} entr{'y' if len(entries) == 1 else 'ies'} "
            f"in {time.time() - start_time:.2f}s"
        )
        return artifacts

    async def _build_entry(self, entry: Entry, config: ResolvedConfig) -> List[Artifact]:
        logger.debug(f"Bundling {entry} (minify={config.minify})")
        bundle = await self.bundler.bundle(entry, config)

        key = config.key_for(entry.output_name)
        return [
            Artifact(key=key, body=bundle.code),
            Artifact(key=key + SOURCEMAP_SUFFIX, body=bundle.sourcemap),
        ]
