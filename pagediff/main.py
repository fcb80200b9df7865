"""pagediff entrypoint: compare the configured pages and report the results."""

from __future__ import annotations

import asyncio
import sys

import structlog

from pagediff.capture.renderer import PlaywrightRenderer
from pagediff.compare.orchestrator import compare
from pagediff.config.logging import setup_logging
from pagediff.config.settings import Settings, get_settings
from pagediff.exceptions import PageDiffError
from pagediff.models.domain import Extent, RenderOptions
from pagediff.reporter.diff import DifferenceResult

logger = structlog.get_logger(__name__)


def options_from_settings(settings: Settings) -> dict[str, object]:
    """Map PAGEDIFF_* settings onto comparison options."""
    return {
        "source": settings.source,
        "compare_to": settings.compare_to,
        "output_screenshots": settings.output_screenshots,
        "output_dir": settings.output_dir,
        "output_file": settings.output_file,
        "block": settings.block,
        "heatmap": settings.heatmap,
        "threshold": settings.threshold,
        "render_options": RenderOptions(
            screen_size=Extent(width=settings.viewport_width, height=settings.viewport_height)
        ),
    }


async def run(settings: Settings) -> list[DifferenceResult]:
    async with PlaywrightRenderer(
        headless=settings.headless,
        allow_private_urls=settings.allow_private_urls,
    ) as renderer:
        results = await compare(options_from_settings(settings), renderer)
    return results or []


def cli() -> None:
    """CLI entrypoint."""
    settings = get_settings()
    setup_logging(log_level=settings.effective_log_level, json_output=settings.json_logs)
    try:
        results = asyncio.run(run(settings))
    except PageDiffError as e:
        logger.error("pagediff_failed", error=str(e))
        sys.exit(1)

    for result in results:
        logger.info(
            "difference",
            target=result.target_url,
            output_file=result.output_file,
            different_pixels=result.stats.different_pixels,
            total_pixels=result.stats.total_pixels,
            difference_ratio=result.stats.difference_ratio,
        )


if __name__ == "__main__":
    cli()
