"""Deterministic output file names."""

from __future__ import annotations

from pagediff.constants import DIFF_TOKEN, SCREEN_TOKEN


def suffix_file_name(file_name: str, *tokens: object) -> str:
    """Insert tokens before the extension: ``output.png`` -> ``output.1.diff.png``.

    Everything after the last dot is treated as the extension, so a name
    without a dot is used as the extension itself.
    """
    parts = file_name.split(".")
    ext = parts.pop()
    parts.extend(str(t) for t in tokens)
    parts.append(ext)
    return ".".join(parts)


def screenshot_name(file_name: str, index: int) -> str:
    return suffix_file_name(file_name, index, SCREEN_TOKEN)


def diff_name(file_name: str, counter: int) -> str:
    return suffix_file_name(file_name, counter, DIFF_TOKEN)
