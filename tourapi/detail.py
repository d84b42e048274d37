"""Assembly of one full tour detail view from the detail sub-calls."""
from __future__ import annotations

import dataclasses
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from . import config
from .concurrency import run_settled
from .images import is_valid_image_url
from .models import ImageAsset, TourDetail, TourSummary
from .tour_client import TourClient

logger = logging.getLogger(__name__)


class DetailAggregator:
    def __init__(
        self,
        client: TourClient,
        related_limit: Optional[int] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        self.client = client
        self.related_limit = config.RELATED_LIMIT if related_limit is None else related_limit
        self.max_workers = config.DETAIL_MAX_WORKERS if max_workers is None else max_workers

    def assemble(self, content_id: str) -> TourDetail:
        """Fetch common info (required) and merge whatever optional data resolves.

        Operating info, images, pet policy and related tours are fetched
        concurrently; any of them failing leaves its slot empty.
        """
        detail = self.client.get_common_info(content_id)

        tasks: Dict[str, Callable[[], Any]] = {
            "operating_info": lambda: self.client.get_operating_info(
                detail.content_id, detail.content_type_id
            ),
            "images": lambda: self.client.get_images(detail.content_id),
            "pet_policy": lambda: self.client.get_pet_policy(detail.content_id),
        }
        if detail.area_code and detail.content_type_id and self.related_limit > 0:
            tasks["related"] = lambda: self._related(detail)
        outcomes = run_settled(tasks, max_workers=self.max_workers, label=f"detail {detail.content_id}")

        def value(key: str, default: Any = None) -> Any:
            outcome = outcomes.get(key)
            if outcome is None or not outcome.ok or outcome.value is None:
                return default
            return outcome.value

        images: List[ImageAsset] = list(value("images", []))
        return dataclasses.replace(
            backfill_images(detail, images),
            operating_info=value("operating_info"),
            images=tuple(images),
            pet_policy=value("pet_policy"),
            related=tuple(value("related", [])),
        )

    def _related(self, detail: TourDetail) -> List[TourSummary]:
        # One extra row so the current tour can be dropped and still fill the limit.
        page = self.client.list_by_region_and_category(
            detail.area_code,
            detail.content_type_id,
            page_no=1,
            num_of_rows=self.related_limit + 1,
            arrange=config.RELATED_ARRANGE,
        )
        related = [t for t in page.items if t.content_id != detail.content_id]
        return related[: self.related_limit]


def backfill_images(detail: TourDetail, images: Sequence[ImageAsset]) -> TourDetail:
    """Fill a missing primary/secondary image from the first/second gallery image."""
    gallery = [img.url for img in images if is_valid_image_url(img.url)]
    first_image = detail.first_image
    first_image2 = detail.first_image2
    if not is_valid_image_url(first_image) and gallery:
        first_image = gallery[0]
        logger.debug("Backfilled first_image for %s from gallery", detail.content_id)
    if not is_valid_image_url(first_image2) and len(gallery) > 1:
        first_image2 = gallery[1]
        logger.debug("Backfilled first_image2 for %s from gallery", detail.content_id)
    if first_image == detail.first_image and first_image2 == detail.first_image2:
        return detail
    return dataclasses.replace(detail, first_image=first_image, first_image2=first_image2)
