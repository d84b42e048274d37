import pytest

from tourapi.errors import ValidationError
from tourapi.images import is_valid_image_url, to_https
from tourapi.operating_info import (
    CulturalFacilityInfo,
    FestivalInfo,
    LodgingInfo,
    RestaurantInfo,
    parse_operating_info,
)
from tourapi.tour_client import (
    parse_area_code,
    parse_image,
    parse_pet_policy,
    parse_tour_detail,
    parse_tour_summary,
)


def test_parse_tour_summary_missing_fields():
    assert parse_tour_summary({"title": "no id"}) is None

    summary = parse_tour_summary(
        {
            "contentid": "126508",
            "contenttypeid": "12",
            "title": " 경복궁 ",
            "addr1": "서울특별시 종로구 사직로 161",
            "addr2": "",
            "areacode": "1",
            "mapx": "126.9767375783",
            "mapy": "37.5760836609",
            "firstimage": "null",
            "firstimage2": "http://tong.visitkorea.or.kr/cms/resource/33/2678633_image3_1.jpg",
        }
    )
    assert summary.content_id == "126508"
    assert summary.title == "경복궁"
    assert summary.address_detail is None
    assert summary.first_image is None
    assert summary.first_image2.startswith("http://")
    assert summary.tel is None
    coord = summary.coordinate()
    assert coord.lat == pytest.approx(37.5760836609)
    assert coord.in_bounds


def test_parse_tour_detail_extends_summary():
    detail = parse_tour_detail(
        {
            "contentid": "126508",
            "contenttypeid": "12",
            "title": "경복궁",
            "overview": "조선 왕조의 법궁",
            "homepage": "<a href=\"http://www.royalpalace.go.kr\">royalpalace</a>",
            "telname": "경복궁 관리소",
            "zipcode": "03045",
        }
    )
    assert detail.overview == "조선 왕조의 법궁"
    assert detail.tel_name == "경복궁 관리소"
    assert detail.operating_info is None
    assert detail.images == ()
    assert detail.related == ()


def test_parse_area_code_requires_code_and_name():
    assert parse_area_code({"code": "1", "name": "서울", "rnum": 1}).rnum == 1
    assert parse_area_code({"code": "1"}) is None


@pytest.mark.parametrize(
    "url, valid",
    [
        ("http://a/b.jpg", True),
        ("https://a/b.jpg", True),
        ("", False),
        ("   ", False),
        (None, False),
        ("null", False),
        ("NULL", False),
        ("undefined", False),
        ("/relative/path.jpg", False),
        ("ftp://a/b.jpg", False),
    ],
)
def test_is_valid_image_url(url, valid):
    assert is_valid_image_url(url) is valid


def test_to_https():
    assert to_https("http://a/b.jpg") == "https://a/b.jpg"
    assert to_https("https://a/b.jpg") == "https://a/b.jpg"
    assert to_https("null") is None


def test_parse_image_drops_unresolvable_urls():
    assert parse_image({"originimgurl": "null", "smallimageurl": ""}, "1") is None

    thumb_only = parse_image({"originimgurl": "undefined", "smallimageurl": "http://a/s.jpg"}, "1")
    assert thumb_only.origin_url is None
    assert thumb_only.url == "http://a/s.jpg"
    assert thumb_only.secure_url == "https://a/s.jpg"
    assert thumb_only.content_id == "1"


def test_parse_operating_info_picks_variant_by_category():
    info = parse_operating_info(
        "39",
        {
            "contentid": "1",
            "contenttypeid": "39",
            "firstmenu": "냉면",
            "opentimefood": "11:00~21:00",
            "restdatefood": "월요일",
            "parkingfood": "가능",
            "lcnsno": "12345",
            "discountinfofood": "",
        },
    )
    assert isinstance(info, RestaurantInfo)
    assert info.first_menu == "냉면"
    assert info.rest_date == "월요일"
    assert info.parking == "가능"
    assert info.extra == {"lcnsno": "12345"}


def test_parse_operating_info_falls_back_to_generic_keys():
    info = parse_operating_info("14", {"contentid": "2", "usefee": "무료", "infocenter": "02-000-0000"})
    assert isinstance(info, CulturalFacilityInfo)
    assert info.use_fee == "무료"
    assert info.info_center == "02-000-0000"

    festival = parse_operating_info("15", {"contentid": "3", "eventstartdate": "20250501"})
    assert isinstance(festival, FestivalInfo)
    assert festival.event_start_date == "20250501"
    assert not hasattr(festival, "check_in_time")

    lodging = parse_operating_info("32", {"contentid": "4", "checkintime": "15:00"})
    assert isinstance(lodging, LodgingInfo)
    assert lodging.check_in_time == "15:00"


def test_parse_operating_info_unknown_category():
    with pytest.raises(ValidationError):
        parse_operating_info("99", {"contentid": "1"})


def test_parse_pet_policy():
    policy = parse_pet_policy(
        {"contentid": "5", "chkpetleash": "목줄 착용", "chkpetsize": "소형견", "petinfo": ""}, "5"
    )
    assert policy.leash == "목줄 착용"
    assert policy.size == "소형견"
    assert policy.info is None
