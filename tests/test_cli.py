import json

import pytest

import run
from tourapi.errors import NotFoundError, UpstreamError
from tourapi.models import PagedResult, TourSummary


class FakeTourClient:
    def __init__(self, error=None):
        self.error = error

    def get_common_info(self, content_id):
        raise self.error

    def list_by_region_and_category(self, area_code, content_type_id, **kwargs):
        if self.error is not None:
            raise self.error
        items = (TourSummary(content_id="1", content_type_id=content_type_id, title="경복궁"),)
        return PagedResult(items=items, total_count=25, num_of_rows=kwargs["num_of_rows"], page_no=kwargs["page_no"])


@pytest.fixture(autouse=True)
def offline(monkeypatch):
    monkeypatch.setattr(run, "load_env", lambda *a, **k: None)
    monkeypatch.setattr(run.config, "load_tour_config", lambda path=None: False)


def test_resolve_runs_without_api_key(monkeypatch, capsys):
    monkeypatch.delenv("TOUR_API_KEY", raising=False)

    assert run.main(["resolve", "1271234567", "371234567"]) == 0

    out = json.loads(capsys.readouterr().out)
    assert out["lat"] == pytest.approx(37.1234567)
    assert out["lng"] == pytest.approx(127.1234567)
    assert out["in_bounds"] is True


def test_list_prints_page_with_total_pages(monkeypatch, capsys):
    monkeypatch.setattr(run, "build_client", lambda metrics=None: FakeTourClient())

    assert run.main(["list", "1", "12", "--rows", "10"]) == 0

    out = json.loads(capsys.readouterr().out)
    assert out["total_count"] == 25
    assert out["total_pages"] == 3
    assert out["items"][0]["title"] == "경복궁"


def test_not_found_exit_code(monkeypatch, capsys):
    monkeypatch.setattr(run, "build_client", lambda metrics=None: FakeTourClient(NotFoundError("no record")))

    assert run.main(["detail", "404"]) == 2
    assert "Not found" in capsys.readouterr().err


def test_upstream_error_exit_code(monkeypatch, capsys):
    monkeypatch.setattr(
        run, "build_client", lambda metrics=None: FakeTourClient(UpstreamError("down", status_code=503))
    )

    assert run.main(["--metrics", "list", "1", "12"]) == 1
    err = capsys.readouterr().err
    assert "upstream" in err
    assert "network_calls" in err


def test_missing_api_key_is_reported(monkeypatch, capsys):
    monkeypatch.delenv("TOUR_API_KEY", raising=False)
    assert run.main(["areas"]) == 1
    assert "TOUR_API_KEY" in capsys.readouterr().err
