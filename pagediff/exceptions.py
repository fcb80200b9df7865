"""Exception hierarchy for pagediff."""

from __future__ import annotations


class PageDiffError(Exception):
    """Base exception for all pagediff errors."""


class ComparisonValidationError(PageDiffError):
    """Raised when a comparison is requested without a source or targets."""


class CaptureError(PageDiffError):
    """Raised when the page renderer fails for any capture request."""

    def __init__(self, message: str, url: str | None = None, index: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.index = index


class ImageDecodeError(PageDiffError):
    """Raised when an input is not a decodable raster image."""


class DimensionMismatchError(PageDiffError):
    """Raised when the two images being compared differ in size."""

    def __init__(self, size_a: tuple[int, int], size_b: tuple[int, int]) -> None:
        super().__init__(
            f"Image dimensions differ: {size_a[0]}x{size_a[1]} vs {size_b[0]}x{size_b[1]}"
        )
        self.size_a = size_a
        self.size_b = size_b


class ImageEncodeError(PageDiffError):
    """Raised when the difference image cannot be serialized."""


class StorageError(PageDiffError):
    """Raised when storage operations fail."""
