from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from pagediff.capture.browser import BrowserManager


def _mock_driver(browser: AsyncMock) -> AsyncMock:
    driver = AsyncMock()
    driver.chromium.launch = AsyncMock(return_value=browser)
    driver.stop = AsyncMock()
    return driver


@pytest.mark.unit
class TestBrowserManager:
    @pytest.mark.asyncio
    async def test_launch_creates_browser(self) -> None:
        driver = _mock_driver(AsyncMock())
        with patch("pagediff.capture.browser.async_playwright") as mock_pw:
            mock_pw.return_value.start = AsyncMock(return_value=driver)

            manager = BrowserManager(headless=True)
            await manager.launch()

            assert manager.is_launched
            driver.chromium.launch.assert_awaited_once_with(headless=True)

    @pytest.mark.asyncio
    async def test_second_launch_reuses_session(self) -> None:
        driver = _mock_driver(AsyncMock())
        with patch("pagediff.capture.browser.async_playwright") as mock_pw:
            mock_pw.return_value.start = AsyncMock(return_value=driver)

            manager = BrowserManager()
            await manager.launch()
            await manager.launch()

            mock_pw.return_value.start.assert_awaited_once()
            driver.chromium.launch.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_launch_stops_driver(self) -> None:
        driver = AsyncMock()
        driver.chromium.launch = AsyncMock(side_effect=RuntimeError("no chromium"))
        driver.stop = AsyncMock()
        with patch("pagediff.capture.browser.async_playwright") as mock_pw:
            mock_pw.return_value.start = AsyncMock(return_value=driver)

            manager = BrowserManager()
            with pytest.raises(RuntimeError, match="no chromium"):
                await manager.launch()

            assert not manager.is_launched
            driver.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_new_context_sets_viewport(self) -> None:
        browser = AsyncMock()
        browser.new_context = AsyncMock(return_value=AsyncMock())
        with patch("pagediff.capture.browser.async_playwright") as mock_pw:
            mock_pw.return_value.start = AsyncMock(return_value=_mock_driver(browser))

            manager = BrowserManager()
            await manager.launch()
            await manager.new_context(viewport_width=320, viewport_height=480)

            call_kwargs = browser.new_context.call_args.kwargs
            assert call_kwargs["viewport"] == {"width": 320, "height": 480}

    @pytest.mark.asyncio
    async def test_new_context_without_browser_raises(self) -> None:
        manager = BrowserManager()
        with pytest.raises(RuntimeError, match="not launched"):
            await manager.new_context()

    @pytest.mark.asyncio
    async def test_close_resets_state(self) -> None:
        browser = AsyncMock()
        driver = _mock_driver(browser)
        with patch("pagediff.capture.browser.async_playwright") as mock_pw:
            mock_pw.return_value.start = AsyncMock(return_value=driver)

            manager = BrowserManager()
            await manager.launch()
            await manager.close()

            assert not manager.is_launched
            browser.close.assert_awaited_once()
            driver.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_session_lifecycle_is_logged(self) -> None:
        browser = AsyncMock()
        browser.new_context = AsyncMock(return_value=AsyncMock())
        with (
            patch("pagediff.capture.browser.async_playwright") as mock_pw,
            patch("pagediff.capture.browser.logger", MagicMock()) as mock_logger,
        ):
            mock_pw.return_value.start = AsyncMock(return_value=_mock_driver(browser))

            manager = BrowserManager(headless=False)
            await manager.launch()
            await manager.new_context()
            await manager.new_context()
            await manager.close()

        events = [c.args[0] for c in mock_logger.info.call_args_list]
        assert events == ["browser_launched", "browser_closed"]
        mock_logger.info.assert_any_call("browser_launched", headless=False)
        mock_logger.info.assert_any_call("browser_closed", contexts_opened=2)
        assert mock_logger.debug.call_count == 2

    @pytest.mark.asyncio
    async def test_close_before_launch_is_noop(self) -> None:
        await BrowserManager().close()
