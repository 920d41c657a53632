"""Configuration data models"""

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from ..constants import DEFAULT_ENVIRONMENT, TRUTHY_VALUES


def _freeze(data: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    """Return a read-only view of a shallow copy of ``data``"""
    return MappingProxyType(dict(data or {}))


def to_bool(value: Any) -> bool:
    """Coerce a flag value that may come from YAML or the environment"""
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_VALUES
    return bool(value)


@dataclass
class LoadedConfig:
    """Contents of a configuration directory, flattened for one environment"""

    path: Path
    environment: str = DEFAULT_ENVIRONMENT
    env: Dict[str, Any] = field(default_factory=dict)
    settings: Dict[str, Any] = field(default_factory=dict)
    messages: Dict[str, Any] = field(default_factory=dict)
    store: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "path": str(self.path),
            "environment": self.environment,
            "env": self.env,
            "settings": self.settings,
            "messages": self.messages,
            "store": self.store,
        }


@dataclass(frozen=True)
class ResolvedConfig:
    """Immutable per-run configuration snapshot"""

    environment: str
    minify: bool = False
    cloudfront: Optional[str] = None
    s3bucket: Optional[str] = None
    outdir: Optional[str] = None
    static_file_directory: Optional[Path] = None
    entries: Tuple[Any, ...] = ()
    config_path: Optional[Path] = None
    env: Mapping[str, Any] = field(default_factory=dict)
    settings: Mapping[str, Any] = field(default_factory=dict)
    messages: Mapping[str, Any] = field(default_factory=dict)
    store: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        for name in ("env", "settings", "messages", "store"):
            object.__setattr__(self, name, _freeze(getattr(self, name)))

    @property
    def is_static(self) -> bool:
        """True when this run only uploads a pre-built directory"""
        return self.static_file_directory is not None

    def key_for(self, name: str) -> str:
        """Object store key for a published file name"""
        name = name.replace("\\", "/").lstrip("/")
        if not self.outdir:
            return name
        return f"{self.outdir.strip('/')}/{name}"

    @classmethod
    def resolve(cls,
                resolver,
                loaded: LoadedConfig,
                positional: Sequence[Any] = ()) -> 'ResolvedConfig':
        """Build the snapshot from a resolver and the loaded configuration

        Args:
            resolver: ConfigResolver over CLI flags and settings
            loaded: Loaded configuration directory
            positional: Entry declarations given on the command line; they
                come before the configured ``entries``

        Returns:
            Frozen configuration for the run
        """
        static_dir = resolver.get("static_file_directory")
        configured = resolver.get("entries", ())
        if isinstance(configured, str):
            configured = (configured,)

        return cls(
            environment=resolver.get("env", loaded.environment) or DEFAULT_ENVIRONMENT,
            minify=to_bool(resolver.get("minify", False)),
            cloudfront=resolver.get("cloudfront"),
            s3bucket=resolver.get("s3bucket"),
            outdir=resolver.get("outdir"),
            static_file_directory=Path(static_dir) if static_dir else None,
            entries=tuple(positional) + tuple(configured),
            config_path=loaded.path,
            env=loaded.env,
            settings=loaded.settings,
            messages=loaded.messages,
            store=loaded.store,
        )
