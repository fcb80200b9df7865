"""In-memory RGBA pixel grids and the Pillow codec around them."""

from __future__ import annotations

import io
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

from pagediff.exceptions import ImageDecodeError, ImageEncodeError

CHANNELS = 4


@dataclass
class RasterImage:
    """A row-major RGBA grid; pixel (x, y) starts at ``(width * y + x) << 2``."""

    width: int
    height: int
    data: bytearray

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            msg = f"Raster dimensions must be positive, got {self.width}x{self.height}"
            raise ValueError(msg)
        if not isinstance(self.data, bytearray):
            self.data = bytearray(self.data)
        expected = self.width * self.height * CHANNELS
        if len(self.data) != expected:
            msg = f"Raster buffer holds {len(self.data)} bytes, expected {expected}"
            raise ValueError(msg)

    @classmethod
    def blank(
        cls, width: int, height: int, color: tuple[int, int, int, int] = (0, 0, 0, 255)
    ) -> RasterImage:
        return cls(width, height, bytearray(bytes(color) * (width * height)))

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def offset(self, x: int, y: int) -> int:
        return (self.width * y + x) << 2

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        idx = self.offset(x, y)
        r, g, b, a = self.data[idx : idx + CHANNELS]
        return r, g, b, a

    def copy(self) -> RasterImage:
        return RasterImage(self.width, self.height, bytearray(self.data))


def decode_image(data: bytes) -> RasterImage:
    """Decode compressed image bytes (PNG, JPEG, ...) into an RGBA grid.

    Pillow reports broken PNG chunks as ``SyntaxError`` and oversized images
    as ``DecompressionBombError``; both surface as ``ImageDecodeError``.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            rgba = img.convert("RGBA")
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,
        ValueError,
    ) as e:
        raise ImageDecodeError(f"Input is not a decodable image: {e}") from e
    return RasterImage(rgba.width, rgba.height, bytearray(rgba.tobytes()))


def encode_image(image: RasterImage, fmt: str = "PNG") -> bytes:
    """Encode an RGBA grid back to a compressed image format."""
    try:
        img = Image.frombytes("RGBA", image.size, bytes(image.data))
        buffer = io.BytesIO()
        img.save(buffer, format=fmt)
    except (OSError, ValueError, KeyError) as e:
        msg = f"Could not encode {image.width}x{image.height} image as {fmt}: {e}"
        raise ImageEncodeError(msg) from e
    return buffer.getvalue()
