"""Pixel difference engine producing raw, block, or heatmap diff images."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from pagediff.constants import BLOCK_COLOR
from pagediff.exceptions import DimensionMismatchError, StorageError
from pagediff.imaging.raster import RasterImage, decode_image, encode_image
from pagediff.imaging.source import read_source
from pagediff.models.domain import DifferenceConfig
from pagediff.reporter.stats import DifferenceStats
from pagediff.types import RenderMode

if TYPE_CHECKING:
    from pagediff.storage.object_store import ObjectStore

logger = structlog.get_logger(__name__)


@dataclass
class DifferenceResult:
    """Output image and statistics for one source/target pair."""

    output_image: RasterImage
    stats: DifferenceStats
    config: DifferenceConfig
    target_url: str | None = None

    @property
    def output_file(self) -> str | None:
        return self.config.output_file

    @property
    def data_output(self) -> str | None:
        return self.config.data_output


class DifferenceEngine:
    """Compares two RGBA grids under a per-channel threshold.

    A pixel counts as unchanged when ANY of its R, G or B deltas is within
    the threshold. Unchanged pixels keep their (usually zero) deltas, so the
    output shows only the regions that differ.

    When a store is attached and the config names an ``output_file``, the
    encoded image and a ``.json`` stats record are written in the background;
    the result is returned without waiting on those writes.
    """

    def __init__(self, store: ObjectStore | None = None) -> None:
        self._store = store
        self._pending: set[asyncio.Task[None]] = set()
        self._failures: list[BaseException] = []

    def compute(
        self,
        image_a: RasterImage,
        image_b: RasterImage,
        config: DifferenceConfig | None = None,
    ) -> DifferenceResult:
        """Diff two decoded images entirely in memory."""
        config = config or DifferenceConfig()
        if image_a.size != image_b.size:
            logger.warning("size_mismatch", image_a=image_a.size, image_b=image_b.size)
            raise DimensionMismatchError(image_a.size, image_b.size)

        output = image_a.copy()
        out = output.data
        other = image_b.data
        width, height = output.size
        threshold = config.threshold
        mode = config.render_mode
        stats = DifferenceStats()

        for y in range(height):
            for x in range(width):
                idx = (width * y + x) << 2

                r = abs(out[idx] - other[idx])
                g = abs(out[idx + 1] - other[idx + 1])
                b = abs(out[idx + 2] - other[idx + 2])

                if r <= threshold or g <= threshold or b <= threshold:
                    stats.record(same=True)
                else:
                    if mode == RenderMode.HEATMAP:
                        r = g = max(r, g, b)
                        b = 0
                    elif mode == RenderMode.BLOCK:
                        r, g, b = BLOCK_COLOR
                    stats.record(same=False)

                out[idx] = r
                out[idx + 1] = g
                out[idx + 2] = b

        stats.finalize()
        logger.info(
            "difference_complete",
            mode=str(mode),
            threshold=threshold,
            changed_pixels=stats.different_pixels,
            total_pixels=stats.total_pixels,
            diff_pct=f"{stats.difference_ratio:.4%}",
        )
        return DifferenceResult(output_image=output, stats=stats, config=config)

    async def difference(
        self,
        source_a: Any,
        source_b: Any,
        config: DifferenceConfig | None = None,
        target_url: str | None = None,
    ) -> DifferenceResult:
        """Decode A, then B, then diff them and schedule any persistence."""
        config = config or DifferenceConfig()

        image_a = await asyncio.to_thread(decode_image, await read_source(source_a))
        image_b = await asyncio.to_thread(decode_image, await read_source(source_b))

        result = self.compute(image_a, image_b, config)
        result.target_url = target_url

        if config.output_file:
            if self._store is None:
                logger.warning("no_output_store", output_file=config.output_file)
            else:
                snapshot = result.output_image.copy()
                task = asyncio.create_task(
                    self._persist(self._store, snapshot, result.stats, config)
                )
                self._pending.add(task)
                task.add_done_callback(self._on_persisted)
        return result

    async def flush(self) -> list[BaseException]:
        """Wait for background writes and return (and clear) their failures."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
        failures, self._failures = self._failures, []
        return failures

    @property
    def pending_writes(self) -> int:
        return len(self._pending)

    async def _persist(
        self,
        store: ObjectStore,
        image: RasterImage,
        stats: DifferenceStats,
        config: DifferenceConfig,
    ) -> None:
        output_file = config.output_file or ""
        data_output = config.data_output or ""
        payload = await asyncio.to_thread(encode_image, image)
        try:
            logger.debug("writing_stats", key=data_output)
            await store.put(data_output, stats.to_json(config).encode("utf-8"))
            logger.debug("writing_diff_image", key=output_file, size=len(payload))
            await store.put(output_file, payload)
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to persist {output_file}: {e}") from e

    def _on_persisted(self, task: asyncio.Task[None]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._failures.append(exc)
            logger.error(
                "difference_persist_failed",
                error=str(exc),
                error_type=type(exc).__name__,
            )
