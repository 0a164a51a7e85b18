"""Editing of ordered media lists ({url, alt} entries).

Each operation returns a new list; the input list is left as-is.
"""
import logging
from typing import Any, Callable, Dict, List, Sequence

logger = logging.getLogger(__name__)


def placeholder_alt(index: int) -> str:
    return f"Product image {index + 1}"


def _in_bounds(items: Sequence[Any], index: int) -> bool:
    return 0 <= index < len(items)


def append(items: Sequence[Dict[str, Any]], item: Dict[str, Any]) -> List[Dict[str, Any]]:
    # Duplicate URLs are allowed
    return [*items, item]


def remove_at(items: Sequence[Any], index: int) -> List[Any]:
    if not _in_bounds(items, index):
        return list(items)
    return [item for i, item in enumerate(items) if i != index]


def update_alt_at(items: Sequence[Dict[str, Any]], index: int, text: str) -> List[Dict[str, Any]]:
    if not _in_bounds(items, index):
        return list(items)
    updated = list(items)
    updated[index] = {**updated[index], "alt": (text or "").strip() or placeholder_alt(index)}
    return updated


def append_uploaded(
    items: Sequence[Dict[str, Any]],
    upload: Callable[[], Dict[str, Any]],
    alt: str = "",
) -> List[Dict[str, Any]]:
    """Run an upload and append its ``{url, alt}`` pair.

    ``upload`` returns the CDN payload (``{"url": ...}``). Any exception it
    raises propagates and ``items`` is left untouched.
    """
    data = upload()
    entry = {"url": data["url"], "alt": (alt or "").strip() or placeholder_alt(len(items))}
    logger.info("Appended uploaded image %s", entry["url"])
    return append(items, entry)
