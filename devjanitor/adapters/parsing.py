"""
Parsing helpers shared by every manager handler.

The contract every ``parse_output`` honors:

    - never raises (``resilient_parser`` is the last line of defense)
    - empty / whitespace-only input → []
    - structured (JSON) output first, line-oriented text as fallback
    - a record needs a non-empty name AND version, else it is skipped
    - one bad entry never hides the entries around it
"""

from __future__ import annotations

import functools
import json
import logging
import re
from collections.abc import Callable, Iterator
from typing import Any

from pydantic import ValidationError

from devjanitor.core.models.package import PackageRecord

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def is_blank(output: str | None) -> bool:
    return not output or not output.strip()


def make_record(
    name: Any,
    version: Any,
    *,
    manager: str,
    location: str,
    **extras: Any,
) -> PackageRecord | None:
    """Build a validated record, or None if name/version are unusable."""
    if not isinstance(name, str) or not isinstance(version, str):
        return None
    extras = {k: v for k, v in extras.items() if isinstance(v, str) and v.strip()}
    try:
        return PackageRecord(
            name=name,
            version=version,
            manager=manager,
            location=location,
            **extras,
        )
    except ValidationError:
        logger.debug("Skipping invalid %s entry: name=%r version=%r", manager, name, version)
        return None


def load_json(output: str) -> Any:
    """Parse JSON output.

    Raises:
        ValueError: If the text is not valid JSON.
    """
    return json.loads(output)


def iter_lines(output: str, comment_prefix: str | None = None) -> Iterator[str]:
    """Stripped, non-blank lines, skipping comment lines if asked."""
    for line in output.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        if comment_prefix and stripped.startswith(comment_prefix):
            continue
        yield stripped


def split_columns(line: str) -> list[str]:
    """Split a line on runs of whitespace."""
    return _WHITESPACE.split(line.strip())


def resilient_parser(
    func: Callable[..., list[PackageRecord]],
) -> Callable[..., list[PackageRecord]]:
    """Guarantee a parser returns a list and never raises."""

    @functools.wraps(func)
    def wrapper(self: Any, output: str, *args: Any, **kwargs: Any) -> list[PackageRecord]:
        if not isinstance(output, str) or is_blank(output):
            return []
        try:
            records = func(self, output, *args, **kwargs)
        except Exception as e:
            logger.debug("%s parser failed: %s", type(self).__name__, e)
            return []
        return [r for r in records if isinstance(r, PackageRecord)]

    return wrapper
