"""Typed configuration models passed between components."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from pagediff.constants import (
    DEFAULT_OUTPUT_DIR,
    DEFAULT_OUTPUT_FILE,
    DEFAULT_PAGE_LOAD_TIMEOUT_MS,
    DEFAULT_THRESHOLD,
    DEFAULT_VIEWPORT_HEIGHT,
    DEFAULT_VIEWPORT_WIDTH,
    FULL_EXTENT,
    MAX_THRESHOLD,
    STATS_SUFFIX,
)
from pagediff.types import RenderMode

Dimension = int | Literal["all"]


class Extent(BaseModel):
    """A width/height pair; either side may be ``"all"`` for the full page extent."""

    model_config = ConfigDict(frozen=True)

    width: Dimension
    height: Dimension

    @field_validator("width", "height")
    @classmethod
    def _positive(cls, value: Dimension) -> Dimension:
        if isinstance(value, int) and value <= 0:
            msg = "extent dimensions must be positive"
            raise ValueError(msg)
        return value

    @property
    def is_full_page(self) -> bool:
        return self.width == FULL_EXTENT and self.height == FULL_EXTENT


class RenderOptions(BaseModel):
    """Options forwarded to the page renderer."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    screen_size: Extent = Field(
        default=Extent(width=DEFAULT_VIEWPORT_WIDTH, height=DEFAULT_VIEWPORT_HEIGHT),
        alias="screenSize",
    )
    shot_size: Extent = Field(
        default=Extent(width=FULL_EXTENT, height=FULL_EXTENT),
        alias="shotSize",
    )
    wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = Field(
        default="load", alias="waitUntil"
    )
    timeout_ms: int = Field(default=DEFAULT_PAGE_LOAD_TIMEOUT_MS, alias="timeoutMs", gt=0)


class CaptureRequest(BaseModel):
    url: str
    render_options: RenderOptions = Field(default_factory=RenderOptions)
    output: str | None = None  # store key for the raw screenshot


class DifferenceConfig(BaseModel):
    """Immutable settings for one differencing run."""

    model_config = ConfigDict(frozen=True)

    threshold: int = Field(default=DEFAULT_THRESHOLD, ge=0, le=MAX_THRESHOLD)
    render_mode: RenderMode = RenderMode.RAW
    output_file: str | None = None

    @classmethod
    def from_flags(
        cls,
        *,
        block: bool = False,
        heatmap: bool = False,
        threshold: int = DEFAULT_THRESHOLD,
        output_file: str | None = None,
    ) -> DifferenceConfig:
        """Build a config from the legacy block/heatmap switches (heatmap wins)."""
        if heatmap:
            mode = RenderMode.HEATMAP
        elif block:
            mode = RenderMode.BLOCK
        else:
            mode = RenderMode.RAW
        return cls(threshold=threshold, render_mode=mode, output_file=output_file)

    @property
    def block(self) -> bool:
        return self.render_mode == RenderMode.BLOCK

    @property
    def heatmap(self) -> bool:
        return self.render_mode == RenderMode.HEATMAP

    @property
    def data_output(self) -> str | None:
        """Key of the JSON stats record written beside the output image."""
        return f"{self.output_file}{STATS_SUFFIX}" if self.output_file else None

    def to_record(self) -> dict[str, Any]:
        return {
            "threshold": self.threshold,
            "block": self.block,
            "heatmap": self.heatmap,
            "renderMode": str(self.render_mode),
            "outputFile": self.output_file,
            "dataOutput": self.data_output,
        }


class CompareOptions(BaseModel):
    """Top-level options for comparing a source page against one or more targets.

    Accepts both snake_case names and the camelCase keys used by older
    configuration files (``compareTo``, ``outputDir``, ``webshotOptions``...).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: str
    compare_to: list[str] = Field(validation_alias=AliasChoices("compare_to", "compareTo"))
    output_screenshots: bool = Field(
        default=False, validation_alias=AliasChoices("output_screenshots", "outputScreenshots")
    )
    output_dir: str = Field(
        default=DEFAULT_OUTPUT_DIR, validation_alias=AliasChoices("output_dir", "outputDir")
    )
    output_file: str = Field(
        default=DEFAULT_OUTPUT_FILE, validation_alias=AliasChoices("output_file", "outputFile")
    )
    block: bool = False
    heatmap: bool = False
    threshold: int = Field(default=DEFAULT_THRESHOLD, ge=0, le=MAX_THRESHOLD)
    render_options: RenderOptions = Field(
        default_factory=RenderOptions,
        validation_alias=AliasChoices("render_options", "renderOptions", "webshotOptions"),
    )

    @field_validator("source", mode="before")
    @classmethod
    def _clean_source(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("compare_to", mode="before")
    @classmethod
    def _listify_targets(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = [value]
        if isinstance(value, (list, tuple)):
            return [v.strip() if isinstance(v, str) else v for v in value]
        return value

    @model_validator(mode="after")
    def _require_urls(self) -> CompareOptions:
        if not self.source:
            msg = "source URL is required"
            raise ValueError(msg)
        if not self.compare_to or not all(self.compare_to):
            msg = "at least one compareTo URL is required"
            raise ValueError(msg)
        if not self.output_file:
            msg = "output_file must not be empty"
            raise ValueError(msg)
        return self

    @property
    def urls(self) -> list[str]:
        """Source first, then each comparison target in order."""
        return [self.source, *self.compare_to]

    def difference_config(self, output_file: str | None) -> DifferenceConfig:
        return DifferenceConfig.from_flags(
            block=self.block,
            heatmap=self.heatmap,
            threshold=self.threshold,
            output_file=output_file,
        )
