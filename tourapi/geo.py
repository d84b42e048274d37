"""Coordinate resolution for the provider's mixed map encodings."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from . import config
from .errors import ValidationError


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float
    in_bounds: bool = True


def _parse(raw: Any) -> Tuple[str, float]:
    text = str(raw).strip() if raw is not None else ""
    try:
        value = float(text)
    except ValueError:
        value = math.nan
    return text, value


def in_bounds(lat: float, lng: float, bbox: Optional[Dict[str, float]] = None) -> bool:
    box = bbox or config.SERVICE_BBOX
    return box["lat_min"] <= lat <= box["lat_max"] and box["lng_min"] <= lng <= box["lng_max"]


def resolve_coordinate(
    raw_x: Any,
    raw_y: Any,
    bbox: Optional[Dict[str, float]] = None,
) -> Coordinate:
    """Resolve a ``mapx``/``mapy`` pair (longitude, latitude) to decimal degrees.

    The provider mixes decimal degrees with integers scaled by 10^7 and sends
    no field telling them apart:

    - if either value is written with a decimal point, both are degrees;
    - otherwise, if either magnitude reaches 1000, both are fixed-point;
    - otherwise the small integers are taken as degrees.

    Results outside ``bbox`` come back with ``in_bounds=False`` rather than
    raising, so callers can leave them off a map without failing a listing.
    Pairs near the 1000 cutoff can be misclassified.
    """
    x_text, x = _parse(raw_x)
    y_text, y = _parse(raw_y)
    if not (math.isfinite(x) and math.isfinite(y)) or x == 0 or y == 0:
        raise ValidationError(f"invalid coordinates: mapx={raw_x!r}, mapy={raw_y!r}")

    if "." not in x_text and "." not in y_text:
        if abs(x) >= config.FIXED_POINT_MAGNITUDE or abs(y) >= config.FIXED_POINT_MAGNITUDE:
            x /= config.FIXED_POINT_SCALE
            y /= config.FIXED_POINT_SCALE

    return Coordinate(lat=y, lng=x, in_bounds=in_bounds(y, x, bbox))
