"""Bundler capability and the esbuild-backed implementation"""

import asyncio
import json
import logging
import re
from abc import ABC, abstractmethod
from os import environ
from pathlib import Path
from subprocess import PIPE
from tempfile import TemporaryDirectory
from typing import Dict, Sequence

import aiofiles
import aiofiles.os

from ..api.exceptions import BundlingError
from ..constants import DEFAULT_BUNDLER_COMMAND, SOURCEMAP_SUFFIX
from ..models.config import ResolvedConfig
from ..models.entry import Bundle, Entry

logger = logging.getLogger(__name__)

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def runtime_namespace(config: ResolvedConfig) -> Dict[str, str]:
    """
    Values exposed to bundled code as ``process.env.<NAME>``

    Scalars from the secret map are passed through as strings; settings,
    messages and store are serialized to JSON strings.

    Args:
        config: Resolved configuration

    Returns:
        Mapping of variable name to string value
    """
    namespace = {}
    for key, value in config.env.items():
        if IDENTIFIER_PATTERN.match(str(key)) and isinstance(value, (str, int, float, bool)):
            namespace[str(key)] = str(value).lower() if isinstance(value, bool) else str(value)

    namespace.update({
        "NODE_ENV": config.environment,
        "CONFIG_PATH": str(config.config_path or ""),
        "MESSAGES": json.dumps(dict(config.messages)),
        "SETTINGS": json.dumps(dict(config.settings)),
        "STORE": json.dumps(dict(config.store)),
    })
    return namespace


class Bundler(ABC):
    """Combines an entry and its dependencies into one file plus sourcemap"""

    @abstractmethod
    async def bundle(self, entry: Entry, config: ResolvedConfig) -> Bundle:
        """
        Bundle a single entry

        Args:
            entry: Validated entry
            config: Resolved configuration to inject

        Returns:
            Bundle with code and sourcemap bytes

        Raises:
            BundlingError: If bundling fails
        """
        pass


class EsbuildBundler(Bundler):
    """
    Bundle with the esbuild CLI.

    - Configuration is injected with ``--define:process.env.<NAME>=...``
    - ``--minify`` is added when the minify flag is set
    - The sourcemap is written next to the bundle and read back

    """

    def __init__(self, command: Sequence[str] = DEFAULT_BUNDLER_COMMAND, cwd: Path = None):
        self.command = list(command)
        self.cwd = cwd

    def build_command(self, entry: Entry, config: ResolvedConfig, outfile: Path) -> list:
        command = [
            *self.command,
            str(entry.source_path),
            "--bundle",
            f"--outfile={outfile}",
            "--sourcemap",
        ]
        for name, value in runtime_namespace(config).items():
            command.append(f"--define:process.env.{name}={json.dumps(value)}")
        if config.minify:
            command.append("--minify")
        return command

    async def bundle(self, entry: Entry, config: ResolvedConfig) -> Bundle:
        with TemporaryDirectory() as temp_dir_name:
            outfile = Path(temp_dir_name) / Path(entry.output_name).name
            command = self.build_command(entry, config, outfile)

            try:
                process = await asyncio.create_subprocess_exec(
                    *command,
                    stdout=PIPE,
                    stderr=PIPE,
                    cwd=str(self.cwd) if self.cwd else None,
                    env={**environ, "NODE_ENV": config.environment},
                )
            except FileNotFoundError:
                raise BundlingError(str(entry.source_path), f"'{self.command[0]}' is not installed")

            stdout, stderr = await process.communicate()

            if stdout.strip():
                logger.info(stdout.decode())
            if process.returncode != 0:
                raise BundlingError(str(entry.source_path), stderr.decode().strip())
            if stderr.strip():
                logger.debug(stderr.decode())

            sourcemap = outfile.with_name(outfile.name + SOURCEMAP_SUFFIX)
            if not await aiofiles.os.path.isfile(outfile):
                raise BundlingError(str(entry.source_path), "bundler produced no output")

            async with aiofiles.open(outfile, 'rb') as f:
                code = await f.read()
            map_body = b""
            if await aiofiles.os.path.isfile(sourcemap):
                async with aiofiles.open(sourcemap, 'rb') as f:
                    map_body = await f.read()

            return Bundle(code=code, sourcemap=map_body)
