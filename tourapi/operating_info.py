"""Category-specific operating information (detailIntro2).

The provider returns a different field set for every content type. Each
category gets its own record; ``SOURCE_KEYS`` maps an attribute to the
upstream keys that may carry it, category-suffixed key first.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Type

from . import config
from .errors import ValidationError
from .normalize import clean_text, first_text


@dataclass(frozen=True)
class OperatingInfo:
    content_id: str
    content_type_id: str
    extra: Mapping[str, str] = field(default_factory=dict)

    SOURCE_KEYS: ClassVar[Dict[str, Tuple[str, ...]]] = {}


@dataclass(frozen=True)
class AttractionInfo(OperatingInfo):
    info_center: Optional[str] = None
    rest_date: Optional[str] = None
    use_time: Optional[str] = None
    use_season: Optional[str] = None
    parking: Optional[str] = None
    pet_allowed: Optional[str] = None
    baby_carriage: Optional[str] = None
    credit_card: Optional[str] = None
    exp_guide: Optional[str] = None
    exp_age_range: Optional[str] = None
    accom_count: Optional[str] = None

    SOURCE_KEYS: ClassVar[Dict[str, Tuple[str, ...]]] = {
        "info_center": ("infocenter",),
        "rest_date": ("restdate",),
        "use_time": ("usetime",),
        "use_season": ("useseason",),
        "parking": ("parking",),
        "pet_allowed": ("chkpet",),
        "baby_carriage": ("chkbabycarriage",),
        "credit_card": ("chkcreditcard",),
        "exp_guide": ("expguide",),
        "exp_age_range": ("expagerange",),
        "accom_count": ("accomcount",),
    }


@dataclass(frozen=True)
class CulturalFacilityInfo(OperatingInfo):
    info_center: Optional[str] = None
    rest_date: Optional[str] = None
    use_time: Optional[str] = None
    use_fee: Optional[str] = None
    discount_info: Optional[str] = None
    spend_time: Optional[str] = None
    parking: Optional[str] = None
    parking_fee: Optional[str] = None
    pet_allowed: Optional[str] = None
    scale: Optional[str] = None
    accom_count: Optional[str] = None

    SOURCE_KEYS: ClassVar[Dict[str, Tuple[str, ...]]] = {
        "info_center": ("infocenterculture", "infocenter"),
        "rest_date": ("restdateculture", "restdate"),
        "use_time": ("usetimeculture", "usetime"),
        "use_fee": ("usefee",),
        "discount_info": ("discountinfo",),
        "spend_time": ("spendtime",),
        "parking": ("parkingculture", "parking"),
        "parking_fee": ("parkingfee",),
        "pet_allowed": ("chkpetculture", "chkpet"),
        "scale": ("scale",),
        "accom_count": ("accomcountculture", "accomcount"),
    }


@dataclass(frozen=True)
class FestivalInfo(OperatingInfo):
    sponsor: Optional[str] = None
    sponsor_tel: Optional[str] = None
    event_start_date: Optional[str] = None
    event_end_date: Optional[str] = None
    event_place: Optional[str] = None
    event_homepage: Optional[str] = None
    play_time: Optional[str] = None
    use_time: Optional[str] = None
    age_limit: Optional[str] = None
    booking_place: Optional[str] = None
    place_info: Optional[str] = None
    sub_event: Optional[str] = None
    program: Optional[str] = None
    spend_time: Optional[str] = None
    discount_info: Optional[str] = None

    SOURCE_KEYS: ClassVar[Dict[str, Tuple[str, ...]]] = {
        "sponsor": ("sponsor1",),
        "sponsor_tel": ("sponsor1tel",),
        "event_start_date": ("eventstartdate",),
        "event_end_date": ("eventenddate",),
        "event_place": ("eventplace",),
        "event_homepage": ("eventhomepage",),
        "play_time": ("playtime",),
        "use_time": ("usetimefestival", "usetime"),
        "age_limit": ("agelimit",),
        "booking_place": ("bookingplace",),
        "place_info": ("placeinfo",),
        "sub_event": ("subevent",),
        "program": ("program",),
        "spend_time": ("spendtimefestival", "spendtime"),
        "discount_info": ("discountinfofestival", "discountinfo"),
    }


@dataclass(frozen=True)
class CourseInfo(OperatingInfo):
    info_center: Optional[str] = None
    distance: Optional[str] = None
    schedule: Optional[str] = None
    take_time: Optional[str] = None
    theme: Optional[str] = None

    SOURCE_KEYS: ClassVar[Dict[str, Tuple[str, ...]]] = {
        "info_center": ("infocentertourcourse", "infocenter"),
        "distance": ("distance",),
        "schedule": ("schedule",),
        "take_time": ("taketime",),
        "theme": ("theme",),
    }


@dataclass(frozen=True)
class LeisureInfo(OperatingInfo):
    info_center: Optional[str] = None
    rest_date: Optional[str] = None
    use_time: Optional[str] = None
    use_fee: Optional[str] = None
    open_period: Optional[str] = None
    reservation: Optional[str] = None
    parking: Optional[str] = None
    parking_fee: Optional[str] = None
    exp_age_range: Optional[str] = None
    accom_count: Optional[str] = None
    pet_allowed: Optional[str] = None

    SOURCE_KEYS: ClassVar[Dict[str, Tuple[str, ...]]] = {
        "info_center": ("infocenterleports", "infocenter"),
        "rest_date": ("restdateleports", "restdate"),
        "use_time": ("usetimeleports", "usetime"),
        "use_fee": ("usefeeleports", "usefee"),
        "open_period": ("openperiod",),
        "reservation": ("reservation",),
        "parking": ("parkingleports", "parking"),
        "parking_fee": ("parkingfeeleports", "parkingfee"),
        "exp_age_range": ("expagerangeleports", "expagerange"),
        "accom_count": ("accomcountleports", "accomcount"),
        "pet_allowed": ("chkpetleports", "chkpet"),
    }


@dataclass(frozen=True)
class LodgingInfo(OperatingInfo):
    info_center: Optional[str] = None
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    room_count: Optional[str] = None
    room_type: Optional[str] = None
    refund_regulation: Optional[str] = None
    reservation: Optional[str] = None
    reservation_url: Optional[str] = None
    parking: Optional[str] = None
    cooking: Optional[str] = None
    sub_facility: Optional[str] = None

    SOURCE_KEYS: ClassVar[Dict[str, Tuple[str, ...]]] = {
        "info_center": ("infocenterlodging", "infocenter"),
        "check_in_time": ("checkintime",),
        "check_out_time": ("checkouttime",),
        "room_count": ("roomcount",),
        "room_type": ("roomtype",),
        "refund_regulation": ("refundregulation",),
        "reservation": ("reservationlodging", "reservation"),
        "reservation_url": ("reservationurl",),
        "parking": ("parkinglodging", "parking"),
        "cooking": ("chkcooking",),
        "sub_facility": ("subfacility",),
    }


@dataclass(frozen=True)
class ShoppingInfo(OperatingInfo):
    info_center: Optional[str] = None
    open_time: Optional[str] = None
    rest_date: Optional[str] = None
    parking: Optional[str] = None
    sale_item: Optional[str] = None
    shop_guide: Optional[str] = None
    fair_day: Optional[str] = None
    pet_allowed: Optional[str] = None

    SOURCE_KEYS: ClassVar[Dict[str, Tuple[str, ...]]] = {
        "info_center": ("infocentershopping", "infocenter"),
        "open_time": ("opentime",),
        "rest_date": ("restdateshopping", "restdate"),
        "parking": ("parkingshopping", "parking"),
        "sale_item": ("saleitem",),
        "shop_guide": ("shopguide",),
        "fair_day": ("fairday",),
        "pet_allowed": ("chkpetshopping", "chkpet"),
    }


@dataclass(frozen=True)
class RestaurantInfo(OperatingInfo):
    info_center: Optional[str] = None
    open_time: Optional[str] = None
    rest_date: Optional[str] = None
    first_menu: Optional[str] = None
    treat_menu: Optional[str] = None
    packing: Optional[str] = None
    parking: Optional[str] = None
    reservation: Optional[str] = None
    kids_facility: Optional[str] = None
    seat: Optional[str] = None
    smoking: Optional[str] = None

    SOURCE_KEYS: ClassVar[Dict[str, Tuple[str, ...]]] = {
        "info_center": ("infocenterfood", "infocenter"),
        "open_time": ("opentimefood",),
        "rest_date": ("restdatefood", "restdate"),
        "first_menu": ("firstmenu",),
        "treat_menu": ("treatmenu",),
        "packing": ("packing",),
        "parking": ("parkingfood", "parking"),
        "reservation": ("reservationfood", "reservation"),
        "kids_facility": ("kidsfacility",),
        "seat": ("seat",),
        "smoking": ("smoking",),
    }


OPERATING_INFO_TYPES: Dict[str, Type[OperatingInfo]] = {
    config.CONTENT_TYPE_ATTRACTION: AttractionInfo,
    config.CONTENT_TYPE_CULTURAL_FACILITY: CulturalFacilityInfo,
    config.CONTENT_TYPE_FESTIVAL: FestivalInfo,
    config.CONTENT_TYPE_COURSE: CourseInfo,
    config.CONTENT_TYPE_LEISURE: LeisureInfo,
    config.CONTENT_TYPE_LODGING: LodgingInfo,
    config.CONTENT_TYPE_SHOPPING: ShoppingInfo,
    config.CONTENT_TYPE_RESTAURANT: RestaurantInfo,
}

_IDENTITY_KEYS = {"contentid", "contenttypeid"}


def parse_operating_info(
    content_type_id: str, raw: Dict[str, Any], content_id: Optional[str] = None
) -> OperatingInfo:
    info_cls = OPERATING_INFO_TYPES.get(str(content_type_id))
    if info_cls is None:
        raise ValidationError(f"Unknown content type: {content_type_id!r}")

    values: Dict[str, Optional[str]] = {}
    claimed = set(_IDENTITY_KEYS)
    for attr, keys in info_cls.SOURCE_KEYS.items():
        values[attr] = first_text(raw, *keys)
        claimed.update(keys)

    extra: Dict[str, str] = {}
    for key, value in raw.items():
        if key in claimed:
            continue
        text = clean_text(value)
        if text is not None:
            extra[key] = text

    return info_cls(
        content_id=clean_text(raw.get("contentid")) or content_id or "",
        content_type_id=str(content_type_id),
        extra=extra,
        **values,
    )
