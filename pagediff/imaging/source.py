"""Normalize image inputs (buffers, files, byte streams) into raw bytes."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pagediff.exceptions import ImageDecodeError

if TYPE_CHECKING:
    from typing import BinaryIO

    ImageSource = bytes | bytearray | memoryview | Path | BinaryIO | AsyncIterable[bytes]


async def read_source(source: ImageSource | Any) -> bytes:
    """Return the complete byte content of an image source.

    Byte buffers are returned as-is, paths and binary file objects are read
    off the event loop, and async byte streams are drained chunk by chunk.
    """
    if isinstance(source, bytes):
        return source
    if isinstance(source, (bytearray, memoryview)):
        return bytes(source)
    if isinstance(source, Path):
        try:
            return await asyncio.to_thread(source.read_bytes)
        except OSError as e:
            raise ImageDecodeError(f"Cannot read image file {source}: {e}") from e
    if isinstance(source, AsyncIterable):
        buffer = bytearray()
        async for chunk in source:
            buffer.extend(chunk)
        return bytes(buffer)
    if hasattr(source, "read"):
        data = await asyncio.to_thread(source.read)
        if not isinstance(data, (bytes, bytearray)):
            msg = f"Image stream returned {type(data).__name__}, expected bytes"
            raise ImageDecodeError(msg)
        return bytes(data)
    msg = f"Unsupported image source type: {type(source).__name__}"
    raise ImageDecodeError(msg)
