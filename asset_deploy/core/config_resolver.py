"""Layered configuration lookup"""

from typing import Any, Mapping, Optional, Sequence


class ConfigResolver:
    """Resolve keys across an ordered list of configuration layers

    Earlier layers win. A key that is absent from a layer, or present with a
    ``None`` value, falls through to the next layer. The layers themselves
    are never modified.
    """

    def __init__(self, layers: Sequence[Optional[Mapping[str, Any]]]):
        """
        Initialize resolver

        Args:
            layers: Mappings in precedence order (e.g. CLI flags, settings)
        """
        self._layers = tuple(layer for layer in layers if layer is not None)

    @property
    def layers(self) -> tuple:
        return self._layers

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get the first defined value for a key

        Args:
            key: Configuration key
            default: Value returned when no layer defines the key

        Returns:
            Resolved value or default
        """
        for layer in self._layers:
            value = layer.get(key)
            if value is not None:
                return value
        return default

    def __contains__(self, key: str) -> bool:
        return any(layer.get(key) is not None for layer in self._layers)
