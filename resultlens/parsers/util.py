from __future__ import annotations

import posixpath
from typing import Any, Callable, Iterable, TypeVar

from resultlens.domain.models import SeverityHint

T = TypeVar("T")

UNKNOWN_FILE = "unknown-file"
ELLIPSIS = "..."


def truncate(text: Any, max_length: int = 100) -> str:
    """Shorten text for display; the result is at most ``max_length`` chars
    and ends with ``...`` when something was cut."""
    s = "" if text is None else str(text)
    if len(s) <= max_length:
        return s
    return s[: max_length - len(ELLIPSIS)] + ELLIPSIS


def group_by(items: Iterable[T], key: Callable[[T], Any], default: str = UNKNOWN_FILE) -> dict[str, list[T]]:
    """Group preserving first-seen order; empty keys land in ``default``."""
    groups: dict[str, list[T]] = {}
    for it in items:
        k = key(it)
        groups.setdefault(str(k) if k else default, []).append(it)
    return groups


def basename(path: str) -> str:
    # tools report posix paths even on Windows runners
    return posixpath.basename(path.replace("\\", "/")) or path


def as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def as_int(value: Any) -> int | None:
    try:
        n = int(value)
    except (TypeError, ValueError):
        return None
    return n


def severity_of(raw: Any, mapping: dict[str, SeverityHint]) -> SeverityHint:
    return mapping.get(str(raw or "").upper(), SeverityHint.UNKNOWN)


def count_severities(values: Iterable[Any], buckets: Iterable[str]) -> dict[str, int]:
    """Count per known bucket; anything unrecognized is ignored."""
    counts = {b: 0 for b in buckets}
    for v in values:
        k = str(v or "").upper()
        if k in counts:
            counts[k] += 1
    return counts
