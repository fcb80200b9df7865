"""Abstract object store interface for screenshots, diff images and stats."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ObjectStore(ABC):
    """Abstract base class for output sinks keyed by file name."""

    @abstractmethod
    async def put(self, key: str, data: bytes) -> None:
        """Store binary data at the given key."""

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Retrieve binary data by key. Returns None if not found."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete the object at the given key."""

    @abstractmethod
    async def list_keys(self, prefix: str = "") -> list[str]:
        """List all keys matching the given prefix."""
