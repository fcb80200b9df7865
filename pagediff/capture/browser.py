"""One Chromium session reused by every capture in a comparison run."""

import structlog
from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from pagediff.constants import DEFAULT_VIEWPORT_HEIGHT, DEFAULT_VIEWPORT_WIDTH

logger = structlog.get_logger(__name__)


class BrowserManager:
    """Owns the Playwright driver and a single Chromium browser.

    Every capture opens its own context sized to the requested viewport, so
    pages never share cookies or storage. Launching twice is a no-op.
    """

    def __init__(self, headless: bool = True) -> None:
        self._headless = headless
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._contexts_opened = 0

    @property
    def is_launched(self) -> bool:
        return self._browser is not None

    async def launch(self) -> None:
        if self._browser is not None:
            return
        driver = await async_playwright().start()
        try:
            self._browser = await driver.chromium.launch(headless=self._headless)
        except Exception:
            await driver.stop()
            raise
        self._playwright = driver
        logger.info("browser_launched", headless=self._headless)

    async def new_context(
        self,
        viewport_width: int = DEFAULT_VIEWPORT_WIDTH,
        viewport_height: int = DEFAULT_VIEWPORT_HEIGHT,
    ) -> BrowserContext:
        if self._browser is None:
            raise RuntimeError("Browser not launched; await launch() before capturing.")

        context = await self._browser.new_context(
            viewport={"width": viewport_width, "height": viewport_height}
        )
        self._contexts_opened += 1
        logger.debug(
            "browser_context_opened",
            viewport=[viewport_width, viewport_height],
            contexts_opened=self._contexts_opened,
        )
        return context

    async def new_page(self, context: BrowserContext) -> Page:
        return await context.new_page()

    async def close(self) -> None:
        """Shut down the browser, then the driver. Safe to call when never launched."""
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
            logger.info("browser_closed", contexts_opened=self._contexts_opened)
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
