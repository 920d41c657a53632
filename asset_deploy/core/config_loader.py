"""Configuration directory loader"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..api.exceptions import ConfigError
from ..constants import (
    CONFIG_FILES,
    CONFIG_FILE_SUFFIX,
    DEFAULT_CONFIG_DIR,
    DEFAULT_ENVIRONMENT,
    ENVIRONMENTS_KEY,
)
from ..models.config import LoadedConfig

logger = logging.getLogger(__name__)


def override_with_environment(data: Dict[str, Any], environment: str) -> Dict[str, Any]:
    """Flatten an ``environments`` block for the selected environment

    Args:
        data: Parsed configuration mapping
        environment: Selected environment name

    Returns:
        New mapping with the environment's overrides applied and the
        ``environments`` key removed
    """
    environments = data.get(ENVIRONMENTS_KEY)
    if not isinstance(environments, dict):
        return dict(data)

    merged = {k: v for k, v in data.items() if k != ENVIRONMENTS_KEY}
    overrides = environments.get(environment)
    if isinstance(overrides, dict):
        merged.update(overrides)
    return merged


class ConfigLoader:
    """Load YAML configuration files from a configuration directory"""

    def __init__(self, cwd: Optional[Path] = None, config_path: Optional[str] = None):
        """
        Initialize loader

        Args:
            cwd: Working directory (defaults to current)
            config_path: Configuration directory, relative to cwd
        """
        self.cwd = Path(cwd or Path.cwd())
        self.default_dir = (self.cwd / DEFAULT_CONFIG_DIR).resolve()
        self.config_dir = (self.cwd / config_path).resolve() if config_path else self.default_dir

    def find_file(self, name: str) -> Optional[Path]:
        """Find a configuration file, falling back to the default directory"""
        for directory in (self.config_dir, self.default_dir):
            candidate = directory / name
            if candidate.is_file():
                return candidate
        return None

    def load_yaml(self, name: str) -> Dict[str, Any]:
        """
        Load one YAML file by base name

        Args:
            name: File base name without suffix (e.g. ``settings``)

        Returns:
            Parsed mapping, empty when the file does not exist

        Raises:
            ConfigError: If the file is not valid YAML or not a mapping
        """
        path = self.find_file(f"{name}{CONFIG_FILE_SUFFIX}")
        if path is None:
            logger.debug(f"No {name}{CONFIG_FILE_SUFFIX} found in {self.config_dir}")
            return {}

        with open(path, 'r') as f:
            content = f.read()

        # Expand ${VAR} references from the process environment
        content = os.path.expandvars(content)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping at the top level of {path}")
        return data

    def load_section(self, name: str, environment: Optional[str] = None) -> Dict[str, Any]:
        """Load one file flattened for an environment"""
        return override_with_environment(self.load_yaml(name), environment or DEFAULT_ENVIRONMENT)

    def load(self, environment: Optional[str] = None) -> LoadedConfig:
        """
        Load every configuration file for an environment

        Args:
            environment: Environment name (defaults to development)

        Returns:
            Loaded configuration
        """
        environment = environment or DEFAULT_ENVIRONMENT
        sections = {name: self.load_section(name, environment) for name in CONFIG_FILES}
        logger.info(f"Loaded configuration from {self.config_dir} ({environment})")

        return LoadedConfig(path=self.config_dir, environment=environment, **sections)
