"""Pre-flight checks on the configuration repository"""

import logging
import os
from pathlib import Path
from typing import Optional

import aiofiles

from .repo_inspector import RepoInspector
from .secrets import SecretDecryptor
from ..api.exceptions import ConfigRepoStaleError, SecretDecryptionError
from ..constants import CONFIG_REPO_NAME, ENCRYPTED_SECRETS_FILE, PLAINTEXT_SECRETS_FILE
from ..models.context import RepoStatus

logger = logging.getLogger(__name__)


def repo_name(remote_url: Optional[str]) -> str:
    """Last path segment of a remote URL without ``.git``"""
    if not remote_url:
        return ""
    name = remote_url.rstrip('/').replace(':', '/').rsplit('/', 1)[-1]
    return name[:-4] if name.endswith('.git') else name


class ConfigRepoGuard:
    """Ensure the configuration directory matches its pushed remote

    Secrets are only decrypted from a configuration repository that is
    committed, pushed and up to date.
    """

    def __init__(self,
                 inspector: RepoInspector,
                 decryptor: SecretDecryptor,
                 config_repo_name: str = CONFIG_REPO_NAME,
                 encrypted_file: str = ENCRYPTED_SECRETS_FILE,
                 plaintext_file: str = PLAINTEXT_SECRETS_FILE):
        self.inspector = inspector
        self.decryptor = decryptor
        self.config_repo_name = config_repo_name
        self.encrypted_file = encrypted_file
        self.plaintext_file = plaintext_file

    def is_config_repo(self, remote_url: Optional[str]) -> bool:
        """Check whether a remote points at the shared configuration repository"""
        return self.config_repo_name in repo_name(remote_url)

    async def verify(self, config_path: Path) -> RepoStatus:
        """
        Inspect the configuration directory

        Args:
            config_path: Configuration directory

        Returns:
            Status of the configuration directory

        Raises:
            ConfigRepoStaleError: If the directory belongs to the configuration
                repository and is not up to date
        """
        status = await self.inspector.status(config_path)

        if not status.is_up_to_date and self.is_config_repo(status.remote_url):
            for error in status.errors:
                logger.error(f"{config_path}: {error}")
            raise ConfigRepoStaleError(status.remote_url, status.errors)

        if status.errors:
            logger.debug(f"{config_path} is not a tracked configuration repository: "
                         f"{'; '.join(status.errors)}")
        return status

    def should_decrypt(self, status: RepoStatus, config_path: Path, static: bool) -> bool:
        """Decrypt only for up-to-date repositories on non-static runs"""
        if static or not status.is_up_to_date:
            return False
        if not (config_path / self.encrypted_file).is_file():
            logger.debug(f"No {self.encrypted_file} in {config_path}, skipping decryption")
            return False
        return True

    async def decrypt_secrets(self, config_path: Path) -> Path:
        """
        Decrypt the encrypted secrets file over its plaintext sibling

        The plaintext file is replaced as a whole; a previous plaintext
        never survives a successful decryption.

        Args:
            config_path: Configuration directory

        Returns:
            Path of the plaintext file

        Raises:
            SecretDecryptionError: If decryption or the write fails
        """
        encrypted = config_path / self.encrypted_file
        plaintext = config_path / self.plaintext_file
        staging = plaintext.with_name(f".{plaintext.name}.tmp")

        body = await self.decryptor.decrypt(encrypted)

        try:
            async with aiofiles.open(staging, 'wb') as f:
                await f.write(body)
            os.replace(staging, plaintext)
        except OSError as e:
            raise SecretDecryptionError(f"Failed to write {plaintext}: {e}")

        logger.info(f"Decrypted {encrypted.name} to {plaintext.name}")
        return plaintext
