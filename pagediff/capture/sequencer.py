"""Strictly sequential page capture."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

import structlog

from pagediff.exceptions import CaptureError, StorageError

if TYPE_CHECKING:
    from pagediff.capture.renderer import PageRenderer
    from pagediff.models.domain import CaptureRequest
    from pagediff.storage.object_store import ObjectStore

logger = structlog.get_logger(__name__)

DataObserver = Callable[["CaptureRequest", bytes], None]


class CaptureSequencer:
    """Runs capture requests one at a time, in order, against one renderer.

    The renderer wraps a single browser session, so a request is fully
    buffered before the next one starts. The first failure aborts the run.
    """

    def __init__(
        self,
        renderer: PageRenderer,
        store: ObjectStore | None = None,
        on_data: DataObserver | None = None,
    ) -> None:
        self._renderer = renderer
        self._store = store
        self._on_data = on_data

    async def capture_all(self, requests: Sequence[CaptureRequest]) -> list[bytes]:
        """Capture every request and return buffers index-aligned with the input."""
        buffers: list[bytes] = []
        for index, request in enumerate(requests):
            buffers.append(await self.capture_one(request, index=index))
        logger.info("capture_complete", count=len(buffers))
        return buffers

    async def capture_one(self, request: CaptureRequest, index: int = 0) -> bytes:
        logger.info("capturing", url=request.url, index=index)
        buffer = bytearray()
        try:
            async for chunk in self._renderer.capture(request.url, request.render_options):
                if self._on_data:
                    self._on_data(request, chunk)
                buffer.extend(chunk)
                logger.debug("capture_data", url=request.url, received=len(buffer))
        except CaptureError as e:
            e.url = e.url or request.url
            e.index = index
            raise
        except Exception as e:
            logger.error("capture_failed", url=request.url, index=index, error=str(e))
            raise CaptureError(
                f"Capture of {request.url} failed: {e}", url=request.url, index=index
            ) from e

        if not buffer:
            raise CaptureError(
                f"Renderer returned no image data for {request.url}",
                url=request.url,
                index=index,
            )

        data = bytes(buffer)
        if request.output:
            await self._save(request.output, data)
        logger.debug("capture_end", url=request.url, size=len(data))
        return data

    async def _save(self, key: str, data: bytes) -> None:
        if self._store is None:
            logger.warning("no_capture_store", key=key)
            return
        try:
            await self._store.put(key, data)
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to save screenshot {key}: {e}") from e
        logger.debug("screenshot_saved", key=key, size=len(data))
