# asset_deploy/services/deploy_service.py
"""Deploy service: runs a deployment from pre-flight checks to notification"""

import logging
import os
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .build_service import BuildService
from .notifier import Notifier
from .publish_service import PublishService
from ..api.exceptions import (
    ConfigError,
    ConfigRepoStaleError,
    DeployToolError,
    PublishError,
)
from ..constants import Event, Phase
from ..core.bundler import Bundler, EsbuildBundler
from ..core.config_guard import ConfigRepoGuard
from ..core.config_loader import ConfigLoader
from ..core.config_resolver import ConfigResolver
from ..core.entries import parse_entries, validate_entries
from ..core.identity import load_identity
from ..core.repo_inspector import GitRepoInspector, RepoInspector
from ..core.secrets import SecretDecryptor, SopsDecryptor
from ..models.config import ResolvedConfig
from ..models.context import DeployContext, DeployIdentity
from ..models.result import DeployResult, PublishResult
from ..storage.base import StorageBackend
from ..storage.s3 import S3Storage

logger = logging.getLogger(__name__)

# Flags that name configuration keys; everything else in the options is ignored
CONFIG_FLAGS = ("env", "minify", "outdir", "cloudfront", "s3bucket", "static_file_directory")


def create_s3_storage(config: ResolvedConfig) -> StorageBackend:
    """Default storage factory"""
    return S3Storage({
        'bucket': config.s3bucket,
        'cloudfront': config.cloudfront,
        'region': config.settings.get('region'),
        'acl': config.settings.get('acl'),
    })


class DeployService:
    """Run one deployment through its state machine

    START -> GUARD_OK | GUARD_FAIL -> RESOLVE -> STATIC_UPLOAD | BUILD -> UPLOAD
    -> SUCCESS | ERROR

    Every collaborator is injected so the run can be exercised with fakes.
    A fatal error moves the run straight to ERROR; both terminal states send
    a final notification.
    """

    def __init__(self,
                 cwd: Optional[Path] = None,
                 inspector: Optional[RepoInspector] = None,
                 decryptor: Optional[SecretDecryptor] = None,
                 bundler: Optional[Bundler] = None,
                 storage_factory: Callable[[ResolvedConfig], StorageBackend] = create_s3_storage,
                 notifier_factory: Callable[[Callable[[str], Any]], Notifier] = Notifier.from_lookup,
                 environ: Optional[Dict[str, str]] = None):
        """
        Initialize deploy service

        Args:
            cwd: Project directory
            inspector: Repository inspector for the configuration directory
            decryptor: Secret decryptor
            bundler: Bundler for build mode
            storage_factory: Creates the object store for a resolved config
            notifier_factory: Creates a notifier from a key lookup
            environ: Process environment used as the last notifier layer
        """
        self.cwd = Path(cwd or Path.cwd())
        self.guard = ConfigRepoGuard(
            inspector or GitRepoInspector(),
            decryptor or SopsDecryptor(),
        )
        self.build_service = BuildService(bundler or EsbuildBundler(cwd=self.cwd))
        self.storage_factory = storage_factory
        self.notifier_factory = notifier_factory
        self.environ = dict(os.environ if environ is None else environ)

    async def run(self,
                  entries: tuple = (),
                  config_path: Optional[str] = None,
                  **flags) -> DeployResult:
        """
        Execute a deployment

        Args:
            entries: Positional entry declarations
            config_path: Configuration directory relative to cwd
            **flags: CLI flags (env, minify, outdir, cloudfront, s3bucket,
                static_file_directory); ``None`` means not given

        Returns:
            DeployResult; ``exit_code`` is 0 on success and 1 otherwise
        """
        start_time = time.time()
        result = DeployResult()
        result.enter(Phase.START)

        identity = DeployIdentity()
        context = DeployContext(identity=identity)
        notifier = self.notifier_factory(self.environ.get)
        storage = None

        try:
            identity = await load_identity(self.cwd)
            context = DeployContext(identity=identity)

            loader = ConfigLoader(self.cwd, config_path)

            try:
                status = await self.guard.verify(loader.config_dir)
            except ConfigRepoStaleError:
                result.enter(Phase.GUARD_FAIL)
                raise
            result.enter(Phase.GUARD_OK)

            if self.guard.should_decrypt(status, loader.config_dir, self._is_static(loader, flags)):
                await notifier.notify(Event.DECRYPTING, context)
                await self.guard.decrypt_secrets(loader.config_dir)

            config = self._resolve(loader, entries, flags)
            context = DeployContext(identity=identity, config=config, repo_status=status)
            notifier = self.notifier_factory(ConfigResolver([config.env, self.environ]).get)
            result.enter(Phase.RESOLVE)

            if not config.s3bucket:
                raise ConfigError("No S3 bucket configured (use --s3bucket or set s3bucket)")

            if config.is_static:
                result.enter(Phase.STATIC_UPLOAD)
                storage = self.storage_factory(config)
                publisher = PublishService(storage)
                artifacts = await publisher.discover_static(
                    self.cwd / config.static_file_directory, config
                )
            else:
                validated = validate_entries(parse_entries(config.entries), self.cwd)
                if not validated:
                    raise ConfigError("No entries to build")

                result.enter(Phase.BUILD)
                await notifier.notify(Event.BUILDING, context)
                artifacts = await self.build_service.build(validated, config)

                result.enter(Phase.UPLOAD)
                storage = self.storage_factory(config)
                publisher = PublishService(storage)

            await notifier.notify(Event.UPLOADING, context)
            result.publish = await publisher.publish(artifacts)

            result.enter(Phase.SUCCESS)
            await notifier.notify(Event.SUCCESS, context)

        except Exception as e:
            if isinstance(e, PublishError):
                result.publish = PublishResult(published=e.published, failed=e.failed)
            if isinstance(e, DeployToolError):
                result.error_code = e.error_code
            else:
                logger.debug("Unexpected error during deploy", exc_info=True)

            result.error = str(e)
            result.enter(Phase.ERROR)
            await notifier.notify(Event.ERROR, context, error=result.error)

        finally:
            if storage is not None:
                await storage.close()
            result.duration = time.time() - start_time

        return result

    def _is_static(self, loader: ConfigLoader, flags: Dict[str, Any]) -> bool:
        """Decide static mode from the CLI and settings.yml, before env.yml is touched"""
        settings = loader.load_section("settings", flags.get("env"))
        resolver = ConfigResolver([self._cli_layer(flags), settings])
        return resolver.get("static_file_directory") is not None

    def _resolve(self, loader: ConfigLoader, entries: tuple, flags: Dict[str, Any]) -> ResolvedConfig:
        loaded = loader.load(flags.get("env"))
        resolver = ConfigResolver([self._cli_layer(flags), loaded.settings])
        return ResolvedConfig.resolve(resolver, loaded, positional=entries)

    @staticmethod
    def _cli_layer(flags: Dict[str, Any]) -> Dict[str, Any]:
        return {key: flags.get(key) for key in CONFIG_FLAGS}
