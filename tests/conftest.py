"""Shared test fixtures."""

from __future__ import annotations

import asyncio
import io
from collections.abc import AsyncIterator, Callable

import pytest
from PIL import Image

from pagediff.capture.renderer import PageRenderer
from pagediff.models.domain import RenderOptions

PngFactory = Callable[..., bytes]


def _png(
    width: int = 4,
    height: int = 4,
    color: tuple[int, int, int, int] = (255, 0, 0, 255),
    pixels: dict[tuple[int, int], tuple[int, int, int, int]] | None = None,
) -> bytes:
    img = Image.new("RGBA", (width, height), color=color)
    for xy, value in (pixels or {}).items():
        img.putpixel(xy, value)
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture()
def make_png() -> PngFactory:
    """Factory for small in-memory PNG files."""
    return _png


class FakeRenderer(PageRenderer):
    """Serves canned bytes per URL and records call order and overlap."""

    def __init__(
        self,
        pages: dict[str, bytes | Exception],
        chunk_size: int = 16,
    ) -> None:
        self.pages = pages
        self.chunk_size = chunk_size
        self.calls: list[tuple[str, RenderOptions]] = []
        self.active = 0
        self.max_active = 0
        self.closed = False

    async def capture(self, url: str, options: RenderOptions) -> AsyncIterator[bytes]:
        self.calls.append((url, options))
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            page = self.pages[url]
            if isinstance(page, Exception):
                raise page
            for start in range(0, len(page), self.chunk_size):
                await asyncio.sleep(0)
                yield page[start : start + self.chunk_size]
        finally:
            self.active -= 1

    async def close(self) -> None:
        self.closed = True


@pytest.fixture()
def fake_renderer_cls() -> type[FakeRenderer]:
    return FakeRenderer
