# asset_deploy/storage/base.py
"""Storage backend abstract base class"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class StorageBackend(ABC):
    """Abstract base class for object stores"""

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize storage backend

        Args:
            config: Backend-specific configuration
        """
        self.config = config or {}
        self._initialized = False

    @property
    def name(self) -> str:
        """Human readable target name"""
        return self.config.get('name') or self.__class__.__name__

    @property
    def can_invalidate(self) -> bool:
        """True when a CDN sits in front of this store"""
        return False

    async def initialize(self) -> None:
        """Initialize storage backend (e.g., establish connections)"""
        if not self._initialized:
            await self._do_initialize()
            self._initialized = True

    @abstractmethod
    async def _do_initialize(self) -> None:
        """Actual initialization logic to be implemented by subclasses"""
        pass

    @abstractmethod
    async def put_object(self,
                         key: str,
                         body: bytes,
                         content_type: Optional[str] = None) -> None:
        """
        Store bytes under a key, replacing any previous object

        Args:
            key: Remote object key
            body: Object content
            content_type: MIME type

        Raises:
            Exception: Backend-specific error on failure
        """
        pass

    async def invalidate(self, keys: List[str]) -> Optional[str]:
        """
        Invalidate cached copies of the given keys

        Args:
            keys: Object keys that were published

        Returns:
            Invalidation id, or None when no CDN is configured
        """
        return None

    async def close(self) -> None:
        """Close storage backend connections"""
        if self._initialized:
            await self._do_close()
            self._initialized = False

    async def _do_close(self) -> None:
        """Actual cleanup logic to be implemented by subclasses"""
        pass

    async def __aenter__(self):
        """Async context manager entry"""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()
