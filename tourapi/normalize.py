"""Normalization of the provider's inconsistent ``items`` shapes."""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, TypeVar

from . import config
from .models import PagedResult

T = TypeVar("T")


def normalize_items(raw: Any) -> List[Any]:
    """Return ``raw`` as a list of records.

    Accepts ``None``, an ``{"item": ...}`` wrapper, a list or a single object.
    Any other shape (the provider sends ``""`` for an empty page) yields ``[]``.
    """
    if raw is None:
        return []
    if isinstance(raw, list):
        return list(raw)
    if isinstance(raw, dict):
        if "item" in raw:
            return normalize_items(raw["item"])
        return [raw]
    return []


def to_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def paged_result(
    body: Dict[str, Any],
    parse: Callable[[Dict[str, Any]], Optional[T]],
    num_of_rows: Optional[int] = None,
    page_no: Optional[int] = None,
) -> PagedResult[T]:
    rows = to_int(body.get("numOfRows")) or num_of_rows or config.DEFAULT_NUM_OF_ROWS
    page = to_int(body.get("pageNo")) or page_no or config.DEFAULT_PAGE_NO
    total = max(0, to_int(body.get("totalCount")) or 0)

    items: List[T] = []
    for raw in normalize_items(body.get("items")):
        if not isinstance(raw, dict):
            continue
        parsed = parse(raw)
        if parsed is not None:
            items.append(parsed)

    return PagedResult(items=tuple(items[:rows]), total_count=total, num_of_rows=rows, page_no=page)


def clean_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def first_text(raw: Dict[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        text = clean_text(raw.get(key))
        if text is not None:
            return text
    return None
