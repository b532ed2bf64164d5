"""Abstract base class for dependency cache backends."""

from abc import ABC, abstractmethod
from pathlib import Path


class CacheBackend(ABC):
    """A content-addressed store for directory snapshots."""

    @abstractmethod
    async def restore(
        self, paths: list[Path], key: str, restore_keys: list[str]
    ) -> str | None:
        """Restore *paths* from the best matching cache entry.

        Args:
            paths: Directories the entry was saved from
            key: Exact key to look up first
            restore_keys: Key prefixes to fall back to, in order

        Returns:
            The key of the restored entry, or None on a miss

        """

    @abstractmethod
    async def save(self, paths: list[Path], key: str) -> None:
        """Store *paths* under *key*.

        Args:
            paths: Existing directories to archive
            key: Cache key to store the archive under

        """
