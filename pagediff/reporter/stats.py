"""Per-run pixel statistics and their JSON side-record."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pagediff.models.domain import DifferenceConfig


@dataclass
class DifferenceStats:
    """Counters accumulated while walking one pair of images."""

    same_pixels: int = 0
    different_pixels: int = 0
    total_pixels: int = 0
    difference_ratio: float = 0.0
    finalized: bool = False

    def record(self, same: bool) -> None:
        if self.finalized:
            raise RuntimeError("Cannot record pixels on finalized stats")
        if same:
            self.same_pixels += 1
        else:
            self.different_pixels += 1
        self.total_pixels += 1

    def finalize(self) -> DifferenceStats:
        """Compute the difference ratio. Allowed exactly once."""
        if self.finalized:
            raise RuntimeError("DifferenceStats already finalized")
        self.difference_ratio = (
            self.different_pixels / self.total_pixels if self.total_pixels else 0.0
        )
        self.finalized = True
        return self

    def to_record(self, config: DifferenceConfig) -> dict[str, Any]:
        return {
            "numberOfDifferentPixels": self.different_pixels,
            "numberOfSamePixels": self.same_pixels,
            "totalPixels": self.total_pixels,
            "differenceRatio": self.difference_ratio,
            "config": config.to_record(),
        }

    def to_json(self, config: DifferenceConfig) -> str:
        return json.dumps(self.to_record(config), indent="\t")
