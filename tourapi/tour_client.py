"""Tour API client with parameter validation and response parsing."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from . import config
from .errors import NotFoundError, ValidationError
from .http import HttpClient
from .images import is_valid_image_url
from .models import AreaCode, ImageAsset, PagedResult, PetPolicy, TourDetail, TourSummary
from .normalize import clean_text, first_text, normalize_items, paged_result, to_int
from .operating_info import OPERATING_INFO_TYPES, OperatingInfo, parse_operating_info

logger = logging.getLogger(__name__)


class TourClient:
    def __init__(self, http_client: HttpClient) -> None:
        self.http = http_client

    def list_area(
        self,
        page_no: Optional[int] = None,
        num_of_rows: Optional[int] = None,
        area_code: Optional[str] = None,
    ) -> List[AreaCode]:
        """List region codes, or a region's sub-districts when ``area_code`` is given."""
        params: Dict[str, Any] = {
            "pageNo": _positive(page_no, "pageNo"),
            "numOfRows": _positive(num_of_rows, "numOfRows"),
            "areaCode": clean_text(area_code),
        }
        body = self.http.execute(config.AREA_CODE_ENDPOINT, params)
        return [a for a in (parse_area_code(raw) for raw in _records(body)) if a is not None]

    def list_by_region_and_category(
        self,
        area_code: str,
        content_type_id: str,
        page_no: Optional[int] = None,
        num_of_rows: Optional[int] = None,
        arrange: Optional[str] = None,
        sigungu_code: Optional[str] = None,
        cat1: Optional[str] = None,
        cat2: Optional[str] = None,
        cat3: Optional[str] = None,
        modified_time: Optional[str] = None,
        list_yn: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> PagedResult[TourSummary]:
        endpoint = config.AREA_BASED_LIST_ENDPOINT
        area = _required(area_code, "areaCode", endpoint)
        content_type = _required(content_type_id, "contentTypeId", endpoint)
        params = {
            "areaCode": area,
            "contentTypeId": content_type,
            "pageNo": _positive(page_no, "pageNo"),
            "numOfRows": _positive(num_of_rows, "numOfRows"),
            "arrange": _arrange(arrange),
            "sigunguCode": clean_text(sigungu_code),
            "cat1": clean_text(cat1),
            "cat2": clean_text(cat2),
            "cat3": clean_text(cat3),
            "modifiedtime": clean_text(modified_time),
            "listYN": _list_yn(list_yn),
        }
        body = self.http.execute(endpoint, params, timeout=timeout)
        return paged_result(body, parse_tour_summary, num_of_rows=num_of_rows, page_no=page_no)

    def search_by_keyword(
        self,
        keyword: str,
        area_code: Optional[str] = None,
        content_type_id: Optional[str] = None,
        page_no: Optional[int] = None,
        num_of_rows: Optional[int] = None,
        arrange: Optional[str] = None,
        sigungu_code: Optional[str] = None,
        cat1: Optional[str] = None,
        cat2: Optional[str] = None,
        cat3: Optional[str] = None,
        modified_time: Optional[str] = None,
        list_yn: Optional[str] = None,
    ) -> PagedResult[TourSummary]:
        endpoint = config.SEARCH_KEYWORD_ENDPOINT
        params = {
            "keyword": _required(keyword, "keyword", endpoint),
            "areaCode": clean_text(area_code),
            "contentTypeId": clean_text(content_type_id),
            "pageNo": _positive(page_no, "pageNo"),
            "numOfRows": _positive(num_of_rows, "numOfRows"),
            "arrange": _arrange(arrange),
            "sigunguCode": clean_text(sigungu_code),
            "cat1": clean_text(cat1),
            "cat2": clean_text(cat2),
            "cat3": clean_text(cat3),
            "modifiedtime": clean_text(modified_time),
            "listYN": _list_yn(list_yn),
        }
        body = self.http.execute(endpoint, params)
        return paged_result(body, parse_tour_summary, num_of_rows=num_of_rows, page_no=page_no)

    def get_common_info(self, content_id: str) -> TourDetail:
        endpoint = config.DETAIL_COMMON_ENDPOINT
        cid = _required(content_id, "contentId", endpoint)
        body = self.http.execute(endpoint, {"contentId": cid})
        for raw in _records(body):
            detail = parse_tour_detail(raw)
            if detail is not None:
                return detail
        raise NotFoundError(f"No detail found for contentId {cid}", endpoint=endpoint)

    def get_operating_info(self, content_id: str, content_type_id: str) -> OperatingInfo:
        endpoint = config.DETAIL_INTRO_ENDPOINT
        cid = _required(content_id, "contentId", endpoint)
        content_type = _required(content_type_id, "contentTypeId", endpoint)
        if content_type not in OPERATING_INFO_TYPES:
            raise ValidationError(f"Unknown contentTypeId {content_type!r}", endpoint=endpoint)
        body = self.http.execute(endpoint, {"contentId": cid, "contentTypeId": content_type})
        records = _records(body)
        if not records:
            raise NotFoundError(f"No operating info for contentId {cid}", endpoint=endpoint)
        return parse_operating_info(content_type, records[0], cid)

    def get_images(self, content_id: str) -> List[ImageAsset]:
        endpoint = config.DETAIL_IMAGE_ENDPOINT
        cid = _required(content_id, "contentId", endpoint)
        body = self.http.execute(endpoint, {"contentId": cid})
        images = [parse_image(raw, cid) for raw in _records(body)]
        return [img for img in images if img is not None]

    def get_pet_policy(self, content_id: str) -> Optional[PetPolicy]:
        endpoint = config.DETAIL_PET_TOUR_ENDPOINT
        cid = _required(content_id, "contentId", endpoint)
        try:
            body = self.http.execute(endpoint, {"contentId": cid})
        except NotFoundError:
            logger.debug("No pet policy for contentId %s", cid)
            return None
        records = _records(body)
        if not records:
            return None
        return parse_pet_policy(records[0], cid)


def _required(value: Optional[str], name: str, endpoint: str) -> str:
    text = clean_text(value)
    if text is None:
        raise ValidationError(f"{name} is required", endpoint=endpoint)
    return text


def _positive(value: Optional[int], name: str) -> Optional[int]:
    if value is None:
        return None
    number = to_int(value)
    if number is None or number < 1:
        raise ValidationError(f"{name} must be a positive integer, got {value!r}")
    return number


def _arrange(value: Optional[str]) -> Optional[str]:
    code = clean_text(value)
    if code is None:
        return None
    code = code.upper()
    if code not in config.ARRANGE_CODES:
        raise ValidationError(f"Unknown arrange code {value!r}")
    return code


def _list_yn(value: Optional[str]) -> Optional[str]:
    flag = clean_text(value)
    if flag is None:
        return None
    flag = flag.upper()
    if flag not in ("Y", "N"):
        raise ValidationError(f"listYN must be Y or N, got {value!r}")
    return flag


def _records(body: Dict[str, Any]) -> List[Dict[str, Any]]:
    return [raw for raw in normalize_items(body.get("items")) if isinstance(raw, dict)]


# Adapters for upstream record fields

def parse_area_code(raw: Dict[str, Any]) -> Optional[AreaCode]:
    code = clean_text(raw.get("code"))
    name = clean_text(raw.get("name"))
    if code is None or name is None:
        return None
    return AreaCode(code=code, name=name, rnum=to_int(raw.get("rnum")))


def _summary_fields(raw: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    content_id = first_text(raw, "contentid", "contentId", "id")
    if content_id is None:
        return None
    return {
        "content_id": content_id,
        "content_type_id": first_text(raw, "contenttypeid", "contentTypeId"),
        "title": clean_text(raw.get("title")),
        "address": clean_text(raw.get("addr1")),
        "address_detail": clean_text(raw.get("addr2")),
        "area_code": clean_text(raw.get("areacode")),
        "sigungu_code": clean_text(raw.get("sigungucode")),
        "map_x": clean_text(raw.get("mapx")),
        "map_y": clean_text(raw.get("mapy")),
        "first_image": _image_url(raw.get("firstimage")),
        "first_image2": _image_url(raw.get("firstimage2")),
        "tel": clean_text(raw.get("tel")),
        "cat1": clean_text(raw.get("cat1")),
        "cat2": clean_text(raw.get("cat2")),
        "cat3": clean_text(raw.get("cat3")),
        "modified_time": clean_text(raw.get("modifiedtime")),
    }


def parse_tour_summary(raw: Dict[str, Any]) -> Optional[TourSummary]:
    fields = _summary_fields(raw)
    if fields is None:
        return None
    return TourSummary(**fields)


def parse_tour_detail(raw: Dict[str, Any]) -> Optional[TourDetail]:
    fields = _summary_fields(raw)
    if fields is None:
        return None
    return TourDetail(
        overview=clean_text(raw.get("overview")),
        homepage=clean_text(raw.get("homepage")),
        tel_name=clean_text(raw.get("telname")),
        zipcode=clean_text(raw.get("zipcode")),
        created_time=clean_text(raw.get("createdtime")),
        **fields,
    )


def _image_url(value: Any) -> Optional[str]:
    text = clean_text(value)
    return text if is_valid_image_url(text) else None


def parse_image(raw: Dict[str, Any], content_id: str) -> Optional[ImageAsset]:
    origin = _image_url(raw.get("originimgurl"))
    thumbnail = _image_url(raw.get("smallimageurl"))
    if origin is None and thumbnail is None:
        return None
    return ImageAsset(
        content_id=clean_text(raw.get("contentid")) or content_id,
        serial_num=clean_text(raw.get("serialnum")),
        name=first_text(raw, "imgname", "imagename"),
        origin_url=origin,
        thumbnail_url=thumbnail,
    )


def parse_pet_policy(raw: Dict[str, Any], content_id: str) -> PetPolicy:
    return PetPolicy(
        content_id=clean_text(raw.get("contentid")) or content_id,
        leash=first_text(raw, "chkpetleash", "acmpyTypeCd"),
        size=first_text(raw, "chkpetsize", "acmpyPsblCpam"),
        place=first_text(raw, "chkpetplace", "relaPosesFclty"),
        fee=clean_text(raw.get("chkpetfee")),
        info=first_text(raw, "petinfo", "etcAcmpyInfo"),
        parking=clean_text(raw.get("parking")),
    )
