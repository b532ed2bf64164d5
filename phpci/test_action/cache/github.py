"""GitHub Actions cache service backend."""

import asyncio
import hashlib
import io
import logging
import tarfile
from collections.abc import Mapping
from pathlib import Path

import aiohttp

from phpci.test_action.cache.base import CacheBackend
from phpci.test_action.models.github_config import GitHubCacheConfig

logger = logging.getLogger(__name__)

_SERVICE_PATH = "twirp/github.actions.results.api.v1.CacheService"
_COMPRESSION = "gzip"
_VERSION_SALT = "1.0"


def cache_version(paths: list[Path]) -> str:
    """Return the version hash tying an entry to its paths and compression."""
    components = [str(p) for p in paths] + [_COMPRESSION, _VERSION_SALT]
    return hashlib.sha256("|".join(components).encode()).hexdigest()


def create_archive(paths: list[Path]) -> bytes:
    """Pack *paths* into a gzip tarball keyed by their absolute location."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as archive:
        for path in paths:
            absolute = path.resolve()
            archive.add(absolute, arcname=str(absolute).lstrip("/"))
    return buffer.getvalue()


def extract_archive(data: bytes, root: Path = Path("/")) -> None:
    """Unpack an archive made by :func:`create_archive` under *root*."""
    with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as archive:
        archive.extractall(root, filter="data")


class GitHubCacheBackend(CacheBackend):
    """Stores archives in the runner's cache service."""

    def __init__(self, config: GitHubCacheConfig) -> None:
        """Initialize backend with runner-provided credentials."""
        self.config = config
        self.base_url = config.results_url.rstrip("/")

    async def restore(
        self, paths: list[Path], key: str, restore_keys: list[str]
    ) -> str | None:
        """Download and unpack the best matching entry."""
        response = await self._call(
            "GetCacheEntryDownloadURL",
            {
                "key": key,
                "restore_keys": restore_keys,
                "version": cache_version(paths),
            },
        )
        if not response.get("ok"):
            return None

        download_url = str(response.get("signed_download_url", ""))
        matched_key = str(response.get("matched_key", key))

        async with aiohttp.ClientSession() as session:
            async with session.get(download_url) as download:
                if download.status != 200:
                    text = await download.text()
                    raise RuntimeError(
                        f"Failed to download cache: {download.status} {text}"
                    )
                data = await download.read()

        logger.debug(f"Downloaded cache archive ({len(data)} bytes)")
        await asyncio.to_thread(extract_archive, data)
        return matched_key

    async def save(self, paths: list[Path], key: str) -> None:
        """Archive *paths*, upload the archive and commit the entry."""
        version = cache_version(paths)
        reservation = await self._call(
            "CreateCacheEntry", {"key": key, "version": version}
        )
        if not reservation.get("ok"):
            raise RuntimeError(f"Unable to reserve cache with key {key}")

        data = await asyncio.to_thread(create_archive, paths)
        upload_url = str(reservation.get("signed_upload_url", ""))

        async with aiohttp.ClientSession() as session:
            headers = {"x-ms-blob-type": "BlockBlob"}
            async with session.put(upload_url, data=data, headers=headers) as upload:
                if upload.status not in (200, 201):
                    text = await upload.text()
                    raise RuntimeError(
                        f"Failed to upload cache: {upload.status} {text}"
                    )

        finalized = await self._call(
            "FinalizeCacheEntryUpload",
            {"key": key, "version": version, "size_bytes": str(len(data))},
        )
        if not finalized.get("ok"):
            raise RuntimeError(f"Failed to finalize cache with key {key}")

        logger.debug(f"Cache entry {finalized.get('entry_id')} saved ({len(data)} bytes)")

    async def _call(
        self, method: str, payload: Mapping[str, object]
    ) -> Mapping[str, object]:
        url = f"{self.base_url}/{_SERVICE_PATH}/{method}"
        headers = {
            "Authorization": f"Bearer {self.config.runtime_token}",
            "Accept": "application/json",
        }

        async with aiohttp.ClientSession() as session:
            async with session.post(url, headers=headers, json=payload) as response:
                if response.status == 404:
                    return {"ok": False}
                if response.status != 200:
                    text = await response.text()
                    raise RuntimeError(
                        f"Cache service {method} failed: {response.status} {text}"
                    )
                data: Mapping[str, object] = await response.json()

        return data
