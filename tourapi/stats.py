"""Region and category statistics built from count-only list queries."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from . import config
from .concurrency import run_settled
from .errors import ApiError
from .models import RegionStat, StatsSummary, TypeStat
from .tour_client import TourClient

logger = logging.getLogger(__name__)


def calculate_percentage(count: int, total: int) -> float:
    if total == 0:
        return 0.0
    return round(count / total * 100, 2)


class StatsAggregator:
    """Fans one ``numOfRows=1`` query out per partition and reads ``totalCount``.

    Issues many upstream calls per invocation and keeps no state; callers
    are expected to cache the results.
    """

    def __init__(
        self,
        client: TourClient,
        timeout: Optional[float] = None,
        max_workers: Optional[int] = None,
        type_area_code: Optional[str] = None,
        content_type_ids: Optional[Sequence[str]] = None,
    ) -> None:
        self.client = client
        self.timeout = config.STATS_TIMEOUT_SECONDS if timeout is None else timeout
        self.max_workers = config.STATS_MAX_WORKERS if max_workers is None else max_workers
        self.type_area_code = type_area_code or config.STATS_TYPE_AREA_CODE
        self.content_type_ids = list(content_type_ids or config.CONTENT_TYPE_NAMES.keys())

    def _count(self, area_code: str, content_type_id: str) -> int:
        page = self.client.list_by_region_and_category(
            area_code, content_type_id, page_no=1, num_of_rows=1, timeout=self.timeout
        )
        return page.total_count

    def region_stats(self) -> List[RegionStat]:
        try:
            areas = self.client.list_area(num_of_rows=config.STATS_AREA_ROWS)
        except ApiError as exc:
            logger.warning("Region list unavailable, skipping region stats: %s", exc)
            return []
        names = {area.code: area.name for area in areas}
        outcomes = run_settled(
            {
                code: (lambda code=code: self._count(code, config.STATS_REGION_CONTENT_TYPE))
                for code in names
            },
            max_workers=self.max_workers,
            label="region",
        )
        counts = {code: o.value for code, o in outcomes.items() if o.ok and o.value}
        total = sum(counts.values())
        stats = [
            RegionStat(code=code, name=names[code], count=count, percentage=calculate_percentage(count, total))
            for code, count in counts.items()
        ]
        stats.sort(key=lambda s: s.count, reverse=True)
        return stats

    def type_stats(self) -> List[TypeStat]:
        outcomes = run_settled(
            {
                type_id: (lambda type_id=type_id: self._count(self.type_area_code, type_id))
                for type_id in self.content_type_ids
            },
            max_workers=self.max_workers,
            label="content type",
        )
        counts: Dict[str, int] = {
            type_id: o.value for type_id, o in outcomes.items() if o.ok and o.value
        }
        total = sum(counts.values())
        stats = [
            TypeStat(
                content_type_id=type_id,
                name=config.content_type_name(type_id),
                count=count,
                percentage=calculate_percentage(count, total),
            )
            for type_id, count in counts.items()
        ]
        stats.sort(key=lambda s: s.count, reverse=True)
        return stats

    def summary(self, top_n: Optional[int] = None) -> StatsSummary:
        n = config.STATS_TOP_N if top_n is None else top_n
        outcomes = run_settled(
            {"regions": self.region_stats, "types": self.type_stats},
            max_workers=2,
            label="stats",
        )
        regions: List[RegionStat] = outcomes["regions"].value or []
        types: List[TypeStat] = outcomes["types"].value or []
        return StatsSummary(
            total_count=sum(t.count for t in types),
            top_regions=tuple(regions[:n]),
            top_types=tuple(types[:n]),
            generated_at=datetime.now(timezone.utc).replace(microsecond=0),
        )
