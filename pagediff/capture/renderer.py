"""Page renderers: turn a URL into a stream of screenshot bytes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import structlog

from pagediff.capture.browser import BrowserManager
from pagediff.constants import CAPTURE_CHUNK_SIZE, DEFAULT_VIEWPORT_HEIGHT, DEFAULT_VIEWPORT_WIDTH
from pagediff.exceptions import CaptureError
from pagediff.utils.sanitize import is_safe_url, sanitize_url

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from types import TracebackType

    from playwright.async_api import Page

    from pagediff.models.domain import Extent, RenderOptions

logger = structlog.get_logger(__name__)

_PAGE_EXTENT_JS = """() => {
    const root = document.documentElement;
    const body = document.body || root;
    return [
        Math.max(root.scrollWidth, body.scrollWidth),
        Math.max(root.scrollHeight, body.scrollHeight),
    ];
}"""


class PageRenderer(ABC):
    """A stateful renderer; callers must not run captures concurrently."""

    @abstractmethod
    def capture(self, url: str, options: RenderOptions) -> AsyncIterator[bytes]:
        """Render ``url`` and stream the encoded screenshot bytes."""

    async def close(self) -> None:
        """Release any rendering resources."""

    async def __aenter__(self) -> PageRenderer:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()


def _viewport(screen: Extent) -> tuple[int, int]:
    width = screen.width if isinstance(screen.width, int) else DEFAULT_VIEWPORT_WIDTH
    height = screen.height if isinstance(screen.height, int) else DEFAULT_VIEWPORT_HEIGHT
    return width, height


class PlaywrightRenderer(PageRenderer):
    """Captures PNG screenshots with a single headless Chromium session."""

    def __init__(
        self,
        browser: BrowserManager | None = None,
        headless: bool = True,
        allow_private_urls: bool = True,
        chunk_size: int = CAPTURE_CHUNK_SIZE,
    ) -> None:
        self._browser = browser or BrowserManager(headless=headless)
        self._allow_private_urls = allow_private_urls
        self._chunk_size = chunk_size

    async def capture(self, url: str, options: RenderOptions) -> AsyncIterator[bytes]:
        url = sanitize_url(url)
        if not self._allow_private_urls and not is_safe_url(url):
            logger.warning("unsafe_url_blocked", url=url)
            raise CaptureError(f"Refusing to render private address {url}", url=url)

        data = await self._screenshot(url, options)
        for start in range(0, len(data), self._chunk_size):
            yield data[start : start + self._chunk_size]

    async def close(self) -> None:
        await self._browser.close()

    async def _screenshot(self, url: str, options: RenderOptions) -> bytes:
        if not self._browser.is_launched:
            await self._browser.launch()

        viewport_width, viewport_height = _viewport(options.screen_size)
        context = await self._browser.new_context(
            viewport_width=viewport_width,
            viewport_height=viewport_height,
        )
        try:
            page = await self._browser.new_page(context)
            logger.info("rendering_page", url=url, viewport=[viewport_width, viewport_height])
            await page.goto(url, wait_until=options.wait_until, timeout=options.timeout_ms)
            kwargs = await self._screenshot_kwargs(page, options.shot_size)
            return await page.screenshot(**kwargs)
        finally:
            await context.close()

    async def _screenshot_kwargs(self, page: Page, shot: Extent) -> dict[str, Any]:
        """Full page for ``all`` x ``all``, otherwise a top-left clip."""
        kwargs: dict[str, Any] = {"type": "png", "full_page": True}
        if shot.is_full_page:
            return kwargs

        page_width, page_height = await page.evaluate(_PAGE_EXTENT_JS)
        kwargs["clip"] = {
            "x": 0,
            "y": 0,
            "width": shot.width if isinstance(shot.width, int) else page_width,
            "height": shot.height if isinstance(shot.height, int) else page_height,
        }
        return kwargs
