import pytest

from tourapi import config
from tourapi.errors import TransientNetworkError, UpstreamError
from tourapi.models import AreaCode, PagedResult
from tourapi.stats import StatsAggregator, calculate_percentage


class FakeTourClient:
    def __init__(self, areas, counts, failing=(), area_error=None):
        self.areas = areas
        self.counts = counts
        self.failing = set(failing)
        self.area_error = area_error
        self.count_calls = []

    def list_area(self, page_no=None, num_of_rows=None, area_code=None):
        if self.area_error is not None:
            raise self.area_error
        return list(self.areas)

    def list_by_region_and_category(self, area_code, content_type_id, page_no=None, num_of_rows=None, timeout=None):
        self.count_calls.append((area_code, content_type_id, num_of_rows, timeout))
        key = (area_code, content_type_id)
        if key in self.failing:
            raise TransientNetworkError(f"partition {key} failed")
        return PagedResult(items=(), total_count=self.counts.get(key, 0), num_of_rows=1, page_no=1)


AREAS = [AreaCode("1", "서울"), AreaCode("6", "부산"), AreaCode("39", "제주"), AreaCode("8", "세종")]


def type_counts(area="1"):
    values = [770, 315, 41, 12, 133, 410, 289, 1201]
    return {(area, type_id): count for type_id, count in zip(config.CONTENT_TYPE_NAMES, values)}


def test_calculate_percentage():
    assert calculate_percentage(1, 3) == 33.33
    assert calculate_percentage(5, 0) == 0.0


def test_region_stats_sorted_and_failures_dropped():
    counts = {("1", "12"): 700, ("6", "12"): 300, ("39", "12"): 500, ("8", "12"): 0}
    client = FakeTourClient(AREAS, counts, failing={("39", "12")})

    stats = StatsAggregator(client, timeout=20, max_workers=4).region_stats()

    assert [(s.code, s.name, s.count) for s in stats] == [("1", "서울", 700), ("6", "부산", 300)]
    assert [s.percentage for s in stats] == [70.0, 30.0]
    assert all(call[2] == 1 and call[3] == 20 for call in client.count_calls)


def test_region_stats_empty_when_area_list_fails():
    client = FakeTourClient(AREAS, {}, area_error=UpstreamError("down", status_code=503))
    assert StatsAggregator(client).region_stats() == []


def test_type_stats_percentages_sum_to_100():
    client = FakeTourClient([], type_counts())

    stats = StatsAggregator(client).type_stats()

    assert len(stats) == 8
    assert sum(s.percentage for s in stats) == pytest.approx(100.0, abs=0.1)
    assert [s.count for s in stats] == sorted((s.count for s in stats), reverse=True)
    assert stats[0].content_type_id == "39"
    assert stats[0].name == "음식점"


def test_type_stats_use_configured_region():
    client = FakeTourClient([], type_counts(area="31"), failing={("31", "15")})

    stats = StatsAggregator(client, type_area_code="31").type_stats()

    assert {s.content_type_id for s in stats} == set(config.CONTENT_TYPE_NAMES) - {"15"}
    assert sum(s.percentage for s in stats) == pytest.approx(100.0, abs=0.1)


def test_type_stats_all_failing_is_empty():
    failing = set(type_counts())
    client = FakeTourClient([], type_counts(), failing=failing)
    assert StatsAggregator(client).type_stats() == []


def test_summary_top_n_and_total():
    counts = {("1", "12"): 700, ("6", "12"): 300, ("39", "12"): 500, ("8", "12"): 100}
    counts.update(type_counts())
    client = FakeTourClient(AREAS, counts)

    summary = StatsAggregator(client).summary(top_n=2)

    assert summary.total_count == sum(type_counts().values())
    assert [r.code for r in summary.top_regions] == ["1", "39"]
    assert [t.content_type_id for t in summary.top_types] == ["39", "12"]
    assert summary.generated_at.tzinfo is not None
