"""Local filesystem object store implementation."""

from __future__ import annotations

import asyncio
import pathlib  # noqa: TC003 - used at runtime for Path operations

import structlog

from pagediff.storage.object_store import ObjectStore

logger = structlog.get_logger(__name__)


class LocalObjectStore(ObjectStore):
    """Writes outputs beneath one directory, refusing keys that escape it.

    The directory is created on the first ``put``, so a run that never writes
    leaves nothing behind.
    """

    def __init__(self, base_dir: pathlib.Path) -> None:
        self._base = base_dir.expanduser().resolve()

    @property
    def base_dir(self) -> pathlib.Path:
        return self._base

    def path_for(self, key: str) -> pathlib.Path:
        """Resolve key to absolute path with traversal protection."""
        path = (self._base / key).resolve()
        if not path.is_relative_to(self._base):
            msg = f"Path traversal detected: {key}"
            raise ValueError(msg)
        return path

    async def put(self, key: str, data: bytes) -> None:
        """Write data to local file."""
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(path.write_bytes, data)
        logger.debug("local_store_put", key=key, size=len(data))

    async def get(self, key: str) -> bytes | None:
        """Read data from local file."""
        path = self.path_for(key)
        if not path.exists():
            return None
        return await asyncio.to_thread(path.read_bytes)

    async def delete(self, key: str) -> None:
        path = self.path_for(key)
        if path.is_file():
            await asyncio.to_thread(path.unlink)

    async def list_keys(self, prefix: str = "") -> list[str]:
        """List all file keys whose relative name starts with prefix."""

        def _list() -> list[str]:
            if not self._base.is_dir():
                return []
            keys = (str(f.relative_to(self._base)) for f in self._base.rglob("*") if f.is_file())
            return sorted(k for k in keys if k.startswith(prefix))

        return await asyncio.to_thread(_list)
