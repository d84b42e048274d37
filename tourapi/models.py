"""Value objects returned by the tour client and aggregators."""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Generic, Optional, Tuple, TypeVar

from .geo import Coordinate, resolve_coordinate
from .images import to_https

if TYPE_CHECKING:
    from .operating_info import OperatingInfo

T = TypeVar("T")


@dataclass(frozen=True)
class PagedResult(Generic[T]):
    items: Tuple[T, ...]
    total_count: int
    num_of_rows: int
    page_no: int

    @property
    def total_pages(self) -> int:
        if self.num_of_rows <= 0:
            return 0
        return math.ceil(self.total_count / self.num_of_rows)


@dataclass(frozen=True)
class AreaCode:
    code: str
    name: str
    rnum: Optional[int] = None


@dataclass(frozen=True)
class ImageAsset:
    content_id: str
    serial_num: Optional[str] = None
    name: Optional[str] = None
    origin_url: Optional[str] = None
    thumbnail_url: Optional[str] = None

    @property
    def url(self) -> Optional[str]:
        return self.origin_url or self.thumbnail_url

    @property
    def secure_url(self) -> Optional[str]:
        return to_https(self.url)


@dataclass(frozen=True)
class PetPolicy:
    content_id: str
    leash: Optional[str] = None
    size: Optional[str] = None
    place: Optional[str] = None
    fee: Optional[str] = None
    info: Optional[str] = None
    parking: Optional[str] = None


@dataclass(frozen=True)
class TourSummary:
    content_id: str
    content_type_id: Optional[str] = None
    title: Optional[str] = None
    address: Optional[str] = None
    address_detail: Optional[str] = None
    area_code: Optional[str] = None
    sigungu_code: Optional[str] = None
    map_x: Optional[str] = None
    map_y: Optional[str] = None
    first_image: Optional[str] = None
    first_image2: Optional[str] = None
    tel: Optional[str] = None
    cat1: Optional[str] = None
    cat2: Optional[str] = None
    cat3: Optional[str] = None
    modified_time: Optional[str] = None

    def coordinate(self) -> Coordinate:
        """Resolve ``map_x``/``map_y``; raises ValidationError when unusable."""
        return resolve_coordinate(self.map_x, self.map_y)


@dataclass(frozen=True)
class TourDetail(TourSummary):
    overview: Optional[str] = None
    homepage: Optional[str] = None
    tel_name: Optional[str] = None
    zipcode: Optional[str] = None
    created_time: Optional[str] = None
    operating_info: Optional["OperatingInfo"] = None
    images: Tuple[ImageAsset, ...] = ()
    pet_policy: Optional[PetPolicy] = None
    related: Tuple[TourSummary, ...] = ()


@dataclass(frozen=True)
class RegionStat:
    code: str
    name: str
    count: int
    percentage: float = 0.0


@dataclass(frozen=True)
class TypeStat:
    content_type_id: str
    name: str
    count: int
    percentage: float = 0.0


@dataclass(frozen=True)
class StatsSummary:
    total_count: int
    top_regions: Tuple[RegionStat, ...]
    top_types: Tuple[TypeStat, ...]
    generated_at: datetime
