"""Deployer API for deployment operations"""

from pathlib import Path
from typing import Optional, Sequence

from ..models.result import DeployResult
from ..services.deploy_service import DeployService
from ..utils.async_utils import run_async


class Deployer:
    """Deployer class for build-and-publish runs"""

    def __init__(self, cwd: Optional[Path] = None, service: Optional[DeployService] = None):
        """
        Initialize deployer

        Args:
            cwd: Project directory
            service: Preconfigured deploy service (defaults to git, sops,
                esbuild and S3)
        """
        self.service = service or DeployService(cwd=cwd)

    async def deploy_async(self,
                           entries: Sequence[str] = (),
                           config_path: Optional[str] = None,
                           **flags) -> DeployResult:
        """
        Run a deployment

        Args:
            entries: Entry declarations
            config_path: Configuration directory
            **flags: env, minify, outdir, cloudfront, s3bucket,
                static_file_directory

        Returns:
            DeployResult: Deployment result
        """
        return await self.service.run(entries=tuple(entries), config_path=config_path, **flags)

    def deploy(self,
               entries: Sequence[str] = (),
               config_path: Optional[str] = None,
               **flags) -> DeployResult:
        """Synchronous wrapper around :meth:`deploy_async`"""
        return run_async(self.deploy_async(entries, config_path, **flags))


def deploy(*entries: str, **options) -> DeployResult:
    """
    Build and publish entries

    This is a convenience function that creates a Deployer instance
    and performs the deployment.

    Args:
        *entries: Entry declarations (``src/app.js`` or ``src/app.js:app.js``)
        **options: config_path, env, minify, outdir, cloudfront, s3bucket,
            static_file_directory

    Returns:
        DeployResult: Deployment result
    """
    cwd = options.pop('cwd', None)
    return Deployer(cwd=cwd).deploy(entries, **options)
