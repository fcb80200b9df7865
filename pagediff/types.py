"""Enums and type aliases for pagediff."""

from enum import StrEnum


class RenderMode(StrEnum):
    RAW = "raw"
    BLOCK = "block"
    HEATMAP = "heatmap"
