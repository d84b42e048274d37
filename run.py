"""CLI entrypoint."""
from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

from dotenv import load_dotenv as _load_dotenv

from tourapi import config
from tourapi.detail import DetailAggregator
from tourapi.errors import ApiError, NotFoundError
from tourapi.geo import resolve_coordinate
from tourapi.http import HttpClient, RequestMetrics
from tourapi.stats import StatsAggregator
from tourapi.tour_client import TourClient


def _repo_root() -> Path:
    return Path(__file__).resolve().parent


def load_env(path: str = ".env", root_dir: Optional[Path] = None) -> None:
    """Optionally load a repo-root .env file without overriding real env vars."""
    root = Path(root_dir) if root_dir else _repo_root()
    env_path = (root / path).resolve()
    if not env_path.exists():
        return
    _load_dotenv(dotenv_path=env_path, override=False)


def to_jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        data = {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
        total_pages = getattr(value, "total_pages", None)
        if isinstance(total_pages, int):
            data["total_pages"] = total_pages
        return data
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Query the tourism data API")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--metrics", action="store_true", help="Print request counters to stderr")
    parser.add_argument("--config", type=str, default=None, help="Path to tour_config.json")
    sub = parser.add_subparsers(dest="command", required=True)

    areas = sub.add_parser("areas", help="List region codes")
    areas.add_argument("--area-code", type=str, default=None, help="List sub-districts of a region")
    areas.add_argument("--rows", type=int, default=None)

    listing = sub.add_parser("list", help="List tours by region and category")
    listing.add_argument("area_code")
    listing.add_argument("content_type_id")
    listing.add_argument("--page", type=int, default=config.DEFAULT_PAGE_NO)
    listing.add_argument("--rows", type=int, default=config.DEFAULT_NUM_OF_ROWS)
    listing.add_argument("--arrange", type=str, default=None, help="Sort code (A, C, ...)")
    listing.add_argument("--sigungu-code", type=str, default=None)

    search = sub.add_parser("search", help="Search tours by keyword")
    search.add_argument("keyword")
    search.add_argument("--area-code", type=str, default=None)
    search.add_argument("--content-type-id", type=str, default=None)
    search.add_argument("--page", type=int, default=config.DEFAULT_PAGE_NO)
    search.add_argument("--rows", type=int, default=config.DEFAULT_NUM_OF_ROWS)
    search.add_argument("--arrange", type=str, default=None)

    detail = sub.add_parser("detail", help="Assemble the full detail view of one tour")
    detail.add_argument("content_id")

    stats = sub.add_parser("stats", help="Region and category statistics")
    stats.add_argument("--view", choices=["summary", "regions", "types"], default="summary")
    stats.add_argument("--top", type=int, default=None)

    resolve = sub.add_parser("resolve", help="Resolve a mapx/mapy pair offline")
    resolve.add_argument("map_x")
    resolve.add_argument("map_y")

    return parser.parse_args(argv)


def build_client(metrics: Optional[RequestMetrics] = None) -> TourClient:
    http_client = HttpClient(api_key=config.get_api_key(), metrics=metrics)
    return TourClient(http_client)


def dispatch(args: argparse.Namespace, client: Optional[TourClient]) -> Any:
    if args.command == "resolve":
        return resolve_coordinate(args.map_x, args.map_y)
    if args.command == "areas":
        return client.list_area(num_of_rows=args.rows, area_code=args.area_code)
    if args.command == "list":
        return client.list_by_region_and_category(
            args.area_code,
            args.content_type_id,
            page_no=args.page,
            num_of_rows=args.rows,
            arrange=args.arrange,
            sigungu_code=args.sigungu_code,
        )
    if args.command == "search":
        return client.search_by_keyword(
            args.keyword,
            area_code=args.area_code,
            content_type_id=args.content_type_id,
            page_no=args.page,
            num_of_rows=args.rows,
            arrange=args.arrange,
        )
    if args.command == "detail":
        return DetailAggregator(client).assemble(args.content_id)
    if args.command == "stats":
        aggregator = StatsAggregator(client)
        if args.view == "regions":
            return aggregator.region_stats()
        if args.view == "types":
            return aggregator.type_stats()
        return aggregator.summary(top_n=args.top)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    load_env()
    args = parse_args(argv)
    config.load_tour_config(args.config)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    metrics = RequestMetrics()
    try:
        client = None if args.command == "resolve" else build_client(metrics)
        result = dispatch(args, client)
    except NotFoundError as exc:
        print(f"Not found: {exc}", file=sys.stderr)
        return 2
    except ApiError as exc:
        print(f"Error ({exc.kind}): {exc}", file=sys.stderr)
        return 1
    finally:
        if args.metrics:
            print(json.dumps(metrics.as_dict()), file=sys.stderr)

    print(json.dumps(to_jsonable(result), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
