"""Restore and save the Composer dependency cache."""

import hashlib
import logging
import sys
import tarfile
from pathlib import Path

import aiohttp

from phpci.test_action.cache.base import CacheBackend
from phpci.test_action.models.action_inputs import CacheSettings
from phpci.test_action.process import run_command
from phpci.test_action.workflow import get_state, group, save_state

logger = logging.getLogger(__name__)

_CACHE_ERRORS = (RuntimeError, OSError, aiohttp.ClientError, tarfile.TarError)


class CacheManager:
    """Caches the Composer download cache and/or the vendor directory."""

    def __init__(
        self,
        settings: CacheSettings,
        working_dir: Path,
        backend: CacheBackend | None,
    ) -> None:
        """Initialize manager; a None backend disables caching."""
        self.settings = settings
        self.working_dir = working_dir
        self.backend = backend
        self.composer_cache_dir: Path | None = None
        self.cache_key: str | None = None
        self.cache_hit = False

    async def restore(self) -> None:
        """Restore cached dependencies; failures are only logged."""
        if not self.settings.enabled:
            logger.debug("Cache is disabled")
            return
        if self.backend is None:
            logger.warning("Cache service is not available, skipping cache restore")
            return

        with group("Restoring cache"):
            try:
                await self._detect_composer_cache_dir()

                paths = self.cache_paths()
                if not paths:
                    logger.info("No cache paths configured")
                    return

                cache_key = self.generate_cache_key()
                logger.info(f"Cache key: {cache_key}")
                logger.debug(f"Cache paths: {', '.join(str(p) for p in paths)}")

                self.cache_key = cache_key
                matched_key = await self.backend.restore(
                    paths, cache_key, self.generate_restore_keys()
                )
                self.cache_hit = matched_key == cache_key

                if matched_key:
                    logger.info(f"Cache restored from key: {matched_key}")
                else:
                    logger.info("Cache not found")

                save_state("cache-hit", "true" if self.cache_hit else "false")
                save_state("cache-key", cache_key)
            except _CACHE_ERRORS as e:
                logger.warning(f"Failed to restore cache: {e}")

    async def save(self) -> None:
        """Save dependencies unless the exact key was already restored."""
        if not self.settings.enabled or self.backend is None:
            return

        if self.cache_hit or get_state("cache-hit") == "true":
            logger.debug("Cache hit occurred, skipping save")
            return

        with group("Saving cache"):
            try:
                cache_key = self.cache_key or get_state("cache-key")
                if not cache_key:
                    logger.warning("No cache key found, skipping save")
                    return

                existing_paths = [p for p in self.cache_paths() if p.exists()]
                if not existing_paths:
                    logger.info("No cache paths exist to save")
                    return

                logger.info(f"Saving cache with key: {cache_key}")
                await self.backend.save(existing_paths, cache_key)
                logger.info("Cache saved successfully")
            except _CACHE_ERRORS as e:
                logger.warning(f"Failed to save cache: {e}")

    def cache_paths(self) -> list[Path]:
        """Directories selected for caching."""
        paths: list[Path] = []
        if self.settings.composer_cache and self.composer_cache_dir:
            paths.append(self.composer_cache_dir)
        if self.settings.vendor:
            paths.append(self.working_dir / "vendor")
        return paths

    def generate_cache_key(self) -> str:
        """Key derived from the platform and the composer.lock contents."""
        lock_path = self.working_dir / "composer.lock"
        lock_hash = "no-lock"
        if lock_path.is_file():
            lock_hash = hashlib.sha256(lock_path.read_bytes()).hexdigest()[:8]

        return f"{self.settings.key_prefix}-{sys.platform}-composer-{lock_hash}"

    def generate_restore_keys(self) -> list[str]:
        """Prefixes matching any older cache for this platform, then any at all."""
        prefix = self.settings.key_prefix
        return [f"{prefix}-{sys.platform}-composer-", f"{prefix}-"]

    async def _detect_composer_cache_dir(self) -> None:
        try:
            result = await run_command(
                "composer", ["config", "cache-files-dir"], cwd=self.working_dir
            )
        except OSError:
            logger.debug("Composer not available for cache detection")
            return

        if result.exit_code == 0 and result.stdout:
            self.composer_cache_dir = Path(result.stdout.strip())
            logger.debug(f"Composer cache directory: {self.composer_cache_dir}")
        else:
            logger.debug("Could not detect Composer cache directory")
