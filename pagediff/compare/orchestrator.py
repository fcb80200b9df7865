"""Compare one source page against one or more target pages."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pydantic
import structlog

from pagediff.capture.sequencer import CaptureSequencer
from pagediff.exceptions import ComparisonValidationError, StorageError
from pagediff.models.domain import CaptureRequest, CompareOptions
from pagediff.reporter.diff import DifferenceEngine, DifferenceResult
from pagediff.storage.local_store import LocalObjectStore
from pagediff.utils.naming import diff_name, screenshot_name

if TYPE_CHECKING:
    from pagediff.capture.renderer import PageRenderer
    from pagediff.storage.object_store import ObjectStore

logger = structlog.get_logger(__name__)

CompareCallback = Callable[[BaseException | None, list[DifferenceResult] | None], Any]
StoreFactory = Callable[[str], "ObjectStore"]


def _local_store(output_dir: str) -> ObjectStore:
    return LocalObjectStore(base_dir=Path(output_dir))


def coerce_options(options: CompareOptions | Mapping[str, Any]) -> CompareOptions:
    """Validate a mapping (camelCase or snake_case keys) into CompareOptions."""
    if isinstance(options, CompareOptions):
        return options
    try:
        return CompareOptions.model_validate(dict(options))
    except pydantic.ValidationError as e:
        raise ComparisonValidationError(f"Invalid comparison options: {e}") from e


class ComparisonOrchestrator:
    """Captures ``[source, *targets]`` once, then diffs source vs each target in order."""

    def __init__(
        self,
        renderer: PageRenderer,
        store_factory: StoreFactory = _local_store,
        on_data: Callable[[CaptureRequest, bytes], None] | None = None,
    ) -> None:
        self._renderer = renderer
        self._store_factory = store_factory
        self._on_data = on_data

    async def compare_all(
        self, options: CompareOptions | Mapping[str, Any]
    ) -> list[DifferenceResult]:
        opts = coerce_options(options)

        requests = [
            CaptureRequest(url=url, render_options=opts.render_options) for url in opts.urls
        ]
        sequencer = CaptureSequencer(self._renderer, on_data=self._on_data)
        captures = await sequencer.capture_all(requests)

        store = self._store_factory(opts.output_dir)
        if opts.output_screenshots:
            for i, data in enumerate(captures):
                key = screenshot_name(opts.output_file, i)
                logger.debug("writing_screenshot", key=key)
                try:
                    await store.put(key, data)
                except (OSError, ValueError) as e:
                    raise StorageError(f"Failed to save screenshot {key}: {e}") from e

        source, *targets = captures
        engine = DifferenceEngine(store=store)
        results: list[DifferenceResult] = []
        try:
            pairs = zip(opts.compare_to, targets, strict=True)
            for counter, (target_url, data) in enumerate(pairs, start=1):
                logger.info("comparing", source=opts.source, target=target_url, counter=counter)
                config = opts.difference_config(diff_name(opts.output_file, counter))
                results.append(
                    await engine.difference(source, data, config, target_url=target_url)
                )
        except BaseException as e:
            # Completed comparisons keep their files even when a later one fails.
            _attach_write_failures(e, await engine.flush())
            raise

        failures = await engine.flush()
        if failures:
            first, *rest = failures
            _attach_write_failures(first, rest)
            raise first

        logger.info("comparison_complete", source=opts.source, targets=len(results))
        return results


def _attach_write_failures(error: BaseException, failures: list[BaseException]) -> None:
    if not failures:
        return
    logger.warning(
        "output_writes_failed",
        count=len(failures),
        reported_as=type(error).__name__,
    )
    for failure in failures:
        error.add_note(f"Output write also failed: {type(failure).__name__}: {failure}")


async def compare(
    options: CompareOptions | Mapping[str, Any],
    renderer: PageRenderer,
    callback: CompareCallback | None = None,
    store_factory: StoreFactory = _local_store,
) -> list[DifferenceResult] | None:
    """Run a comparison and report the outcome to ``callback(error, results)``.

    The callback is called exactly once. Without a callback, errors propagate.
    """
    orchestrator = ComparisonOrchestrator(renderer, store_factory=store_factory)
    try:
        results = await orchestrator.compare_all(options)
    except Exception as e:
        logger.error("comparison_failed", error=str(e), error_type=type(e).__name__)
        if callback is None:
            raise
        callback(e, None)
        return None
    if callback is not None:
        callback(None, results)
    return results
