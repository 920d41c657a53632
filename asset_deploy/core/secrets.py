"""Secret decryption"""

import asyncio
from abc import ABC, abstractmethod
from pathlib import Path
from subprocess import PIPE
from typing import Sequence

from ..api.exceptions import SecretDecryptionError
from ..constants import DEFAULT_DECRYPT_COMMAND


class SecretDecryptor(ABC):
    """Decrypts an encrypted secrets file"""

    @abstractmethod
    async def decrypt(self, path: Path) -> bytes:
        """
        Decrypt a file

        Args:
            path: Encrypted file

        Returns:
            Plaintext bytes

        Raises:
            SecretDecryptionError: If decryption fails
        """
        pass


class SopsDecryptor(SecretDecryptor):
    """Decrypt with an external tool that prints plaintext on stdout"""

    def __init__(self, command: Sequence[str] = DEFAULT_DECRYPT_COMMAND):
        self.command = list(command)

    async def decrypt(self, path: Path) -> bytes:
        try:
            process = await asyncio.create_subprocess_exec(
                *self.command, str(path),
                cwd=str(path.parent),
                stdout=PIPE,
                stderr=PIPE,
            )
        except FileNotFoundError:
            raise SecretDecryptionError(
                f"Decryption tool '{self.command[0]}' is not installed"
            )

        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            raise SecretDecryptionError(
                f"Failed to decrypt {path}: {stderr.decode().strip()}"
            )
        return stdout
