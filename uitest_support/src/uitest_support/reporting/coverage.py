"""Keyword heuristics for coverage metrics.

Tests do not declare metadata; coverage is inferred from their names.
"""

from __future__ import annotations

import re
from typing import Iterable

FEATURE_MARKERS = ["navigation", "search", "account", "mobile"]

CRITICAL_MARKERS = ["critical", "smoke", "login", "checkout"]

TIMEOUT_PATTERN = re.compile(r"timeout|timed out", re.IGNORECASE)


def feature_tags(names: Iterable[str], markers: list[str] | None = None) -> set[str]:
    """Collect feature markers that appear in any test name (case-insensitive)."""
    markers = markers if markers is not None else FEATURE_MARKERS
    found: set[str] = set()
    for name in names:
        name_lower = name.lower()
        found.update(marker for marker in markers if marker in name_lower)
    return found


def is_critical(name: str, markers: list[str] | None = None) -> bool:
    """Check if a test name marks a critical path."""
    markers = markers if markers is not None else CRITICAL_MARKERS
    name_lower = name.lower()
    return any(marker in name_lower for marker in markers)


def critical_path_percentage(names: list[str], markers: list[str] | None = None) -> int:
    """Percentage of names matching a critical marker, rounded half up.

    Returns 0 for an empty list.
    """
    if not names:
        return 0
    critical = sum(1 for name in names if is_critical(name, markers))
    return int(critical * 100 / len(names) + 0.5)


def is_timeout_message(message: str | None) -> bool:
    return bool(message) and TIMEOUT_PATTERN.search(message) is not None
