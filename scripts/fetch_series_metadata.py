#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, is_dataclass
from datetime import date
from enum import Enum
from typing import Any

from seriesmeta.config import load_settings
from seriesmeta.http.deadline import call_deadline
from seriesmeta.http.errors import HttpClientError, NotFound
from seriesmeta.metadata.factory import build_metadata_providers
from seriesmeta.metadata.models import Provider, ProviderBookId, ProviderSeriesId
from seriesmeta.metadata.providers.kodansha.model import KodanshaClientError
from seriesmeta.metadata.providers.nautiljon.model import NautiljonClientError
from seriesmeta.utils.env import load_env


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="fetch_series_metadata",
        description="Query one metadata provider and print the canonical result as JSON.",
    )
    parser.add_argument(
        "--provider",
        required=True,
        choices=[p.value.lower() for p in Provider],
        help="Metadata source to query.",
    )
    action = parser.add_mutually_exclusive_group(required=True)
    action.add_argument("--search", help="Search series by name.")
    action.add_argument("--match", help="Resolve the best-matching series for a name.")
    action.add_argument("--series-id", help="Fetch series metadata by source-local id.")
    parser.add_argument("--book-id", default=None, help="With --series-id, fetch one book instead.")
    parser.add_argument("--limit", type=int, default=5, help="Max search results (with --search).")
    parser.add_argument("--timeout", type=float, default=None, help="Overall deadline in seconds.")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    return parser.parse_args(argv)


def _to_jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return _to_jsonable(asdict(value))
    if isinstance(value, dict):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, bytes):
        return f"<{len(value)} bytes>"
    return value


def _run(args: argparse.Namespace) -> Any:
    settings = load_settings()
    provider_key = Provider(args.provider.upper())
    providers = build_metadata_providers(settings)
    provider = providers.get(provider_key)
    if provider is None:
        raise RuntimeError(f"Provider {provider_key.value} is disabled (SERIESMETA_{provider_key.value}_ENABLED).")

    if args.search:
        return provider.search_series(args.search, args.limit)
    if args.match:
        return provider.match_series_metadata(args.match)
    if args.book_id:
        return provider.get_book_metadata(ProviderSeriesId(args.series_id), ProviderBookId(args.book_id))
    return provider.get_series_metadata(ProviderSeriesId(args.series_id))


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv or sys.argv[1:])
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    load_env()

    try:
        if args.timeout:
            with call_deadline(args.timeout):
                result = _run(args)
        else:
            result = _run(args)
    except NotFound as exc:
        print(f"ERROR: not found url={exc.url}", file=sys.stderr)
        return 2
    except HttpClientError as exc:
        print(f"ERROR: {exc} status={exc.status_code}", file=sys.stderr)
        return 1
    except (KodanshaClientError, NautiljonClientError) as exc:
        print(f"ERROR: unexpected {args.provider} payload: {exc}", file=sys.stderr)
        return 1

    if result is None:
        print("No match.", file=sys.stderr)
        return 3

    print(json.dumps(_to_jsonable(result), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
