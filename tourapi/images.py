"""Image URL checks."""
from __future__ import annotations

from typing import Optional

_PLACEHOLDERS = {"null", "undefined"}


def is_valid_image_url(url: Optional[str]) -> bool:
    if not url:
        return False
    trimmed = str(url).strip()
    if not trimmed or trimmed.lower() in _PLACEHOLDERS:
        return False
    return trimmed.startswith("http://") or trimmed.startswith("https://")


def to_https(url: Optional[str]) -> Optional[str]:
    """Upgrade an http image URL to https; anything not http(s) yields None."""
    if not is_valid_image_url(url):
        return None
    trimmed = str(url).strip()
    if trimmed.startswith("http://"):
        return "https://" + trimmed[len("http://"):]
    return trimmed
