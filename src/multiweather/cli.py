# connects settings -> providers -> aggregator, then either serves http or answers one city

from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional
from .client import ProviderError
from .config import ConfigError, Settings, build_providers, load_settings
from .server import create_app
from .service import Aggregator


def build_aggregator(settings: Settings) -> Aggregator:
    return Aggregator(
        build_providers(settings),
        deadline=settings.deadline,
        timeout_is_error=settings.timeout_is_error,
    )


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="multiweather", description="Mean temperature over several weather providers"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the http endpoint")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    temp = sub.add_parser("temp", help="print the mean temperature of one city")
    temp.add_argument("city")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _parser().parse_args(argv)
    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"config error: {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    aggregator = build_aggregator(settings)

    if args.command == "serve":
        app = create_app(aggregator)
        app.run(host=args.host or settings.host, port=args.port or settings.port)
        return 0

    try:
        temp = aggregator.temperature(args.city)
    except ProviderError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(f"{args.city}: {temp:.2f} C")
    return 0


if __name__ == "__main__":
    sys.exit(main())
