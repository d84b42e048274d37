"""Project configuration.

Loads overrides from tour_config.json when available, falling back to the
defaults below. Keep upstream request shapes centralized here.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .errors import ValidationError

_REPO_ROOT = Path(__file__).resolve().parent.parent

# --- API endpoints ---

BASE_URL = "https://apis.data.go.kr/B551011/KorService2"

AREA_CODE_ENDPOINT = "/areaCode2"
AREA_BASED_LIST_ENDPOINT = "/areaBasedList2"
SEARCH_KEYWORD_ENDPOINT = "/searchKeyword2"
DETAIL_COMMON_ENDPOINT = "/detailCommon2"
DETAIL_INTRO_ENDPOINT = "/detailIntro2"
DETAIL_IMAGE_ENDPOINT = "/detailImage2"
DETAIL_PET_TOUR_ENDPOINT = "/detailPetTour2"

# --- Shared query parameters ---

MOBILE_OS = "ETC"
MOBILE_APP = "MyTrip"
RESPONSE_TYPE = "json"
API_KEY_ENV = "TOUR_API_KEY"

# --- Envelope result codes ---

RESULT_CODE_SUCCESS = {"0000", "00"}
RESULT_CODE_NO_DATA = {"03"}
RESULT_CODE_RATE_LIMITED = {"22"}

# --- HTTP ---

HTTP_TIMEOUT_SECONDS = 10.0
HTTP_RETRY_MAX = 3
HTTP_RETRY_DELAYS: Tuple[float, ...] = (1.0, 2.0, 4.0)
HTTP_RATE_LIMIT_DELAYS: Tuple[float, ...] = (5.0, 10.0, 15.0)

# --- Listing ---

DEFAULT_NUM_OF_ROWS = 12
DEFAULT_PAGE_NO = 1
ARRANGE_CODES = {"A", "B", "C", "D", "O", "Q", "R", "S"}

# --- Map ---

# Advisory box for the service area; points outside are flagged, not dropped.
SERVICE_BBOX: Dict[str, float] = {"lat_min": 33.0, "lat_max": 43.0, "lng_min": 124.0, "lng_max": 132.0}
FIXED_POINT_SCALE = 10_000_000
FIXED_POINT_MAGNITUDE = 1000

# --- Categories ---

CONTENT_TYPE_ATTRACTION = "12"
CONTENT_TYPE_CULTURAL_FACILITY = "14"
CONTENT_TYPE_FESTIVAL = "15"
CONTENT_TYPE_COURSE = "25"
CONTENT_TYPE_LEISURE = "28"
CONTENT_TYPE_LODGING = "32"
CONTENT_TYPE_SHOPPING = "38"
CONTENT_TYPE_RESTAURANT = "39"

CONTENT_TYPE_NAMES: Dict[str, str] = {
    CONTENT_TYPE_ATTRACTION: "관광지",
    CONTENT_TYPE_CULTURAL_FACILITY: "문화시설",
    CONTENT_TYPE_FESTIVAL: "축제/행사",
    CONTENT_TYPE_COURSE: "여행코스",
    CONTENT_TYPE_LEISURE: "레포츠",
    CONTENT_TYPE_LODGING: "숙박",
    CONTENT_TYPE_SHOPPING: "쇼핑",
    CONTENT_TYPE_RESTAURANT: "음식점",
}
CONTENT_TYPE_OTHER_NAME = "기타"

# --- Detail ---

RELATED_LIMIT = 6
RELATED_ARRANGE = "C"
DETAIL_MAX_WORKERS = 4

# --- Stats ---

STATS_TIMEOUT_SECONDS = 20.0
STATS_AREA_ROWS = 100
STATS_REGION_CONTENT_TYPE = CONTENT_TYPE_ATTRACTION
STATS_TYPE_AREA_CODE = "1"
STATS_TOP_N = 3
STATS_MAX_WORKERS = 8


def content_type_name(content_type_id: Optional[str]) -> str:
    return CONTENT_TYPE_NAMES.get(str(content_type_id or ""), CONTENT_TYPE_OTHER_NAME)


def get_api_key() -> str:
    api_key = (os.environ.get(API_KEY_ENV) or "").strip()
    if not api_key:
        raise ValidationError(f"Missing {API_KEY_ENV} in environment")
    return api_key


def _delays(value: List[float]) -> Tuple[float, ...]:
    return tuple(float(v) for v in value)


def load_tour_config(path: Optional[str] = None) -> bool:
    """Load configuration overrides from a JSON file.

    Updates module-level globals with values from the config file.
    Returns True if config was loaded, False if file not found.
    """
    if path is None:
        path = str(_REPO_ROOT / "tour_config.json")

    config_path = Path(path)
    if not config_path.exists():
        return False

    with open(config_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    globals_ref = globals()

    if data.get("base_url"):
        globals_ref["BASE_URL"] = str(data["base_url"]).rstrip("/")
    if data.get("mobile_app"):
        globals_ref["MOBILE_APP"] = str(data["mobile_app"])

    http = data.get("http") or {}
    if "timeout_seconds" in http:
        globals_ref["HTTP_TIMEOUT_SECONDS"] = float(http["timeout_seconds"])
    if "retry_max" in http:
        globals_ref["HTTP_RETRY_MAX"] = int(http["retry_max"])
    if http.get("retry_delays"):
        globals_ref["HTTP_RETRY_DELAYS"] = _delays(http["retry_delays"])
    if http.get("rate_limit_delays"):
        globals_ref["HTTP_RATE_LIMIT_DELAYS"] = _delays(http["rate_limit_delays"])

    bbox = data.get("bbox")
    if bbox:
        merged = dict(SERVICE_BBOX)
        merged.update({k: float(v) for k, v in bbox.items() if k in merged})
        globals_ref["SERVICE_BBOX"] = merged

    stats = data.get("stats") or {}
    if "timeout_seconds" in stats:
        globals_ref["STATS_TIMEOUT_SECONDS"] = float(stats["timeout_seconds"])
    if stats.get("type_area_code"):
        globals_ref["STATS_TYPE_AREA_CODE"] = str(stats["type_area_code"])
    if "top_n" in stats:
        globals_ref["STATS_TOP_N"] = int(stats["top_n"])
    if "max_workers" in stats:
        globals_ref["STATS_MAX_WORKERS"] = max(1, int(stats["max_workers"]))

    detail = data.get("detail") or {}
    if "related_limit" in detail:
        globals_ref["RELATED_LIMIT"] = int(detail["related_limit"])
    if "max_workers" in detail:
        globals_ref["DETAIL_MAX_WORKERS"] = max(1, int(detail["max_workers"]))

    return True
