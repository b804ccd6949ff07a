"""
Review Data API CLI
===================

Command-line access to the same envelopes the HTTP API serves.

Commands:
    reviews   - List reviews with filters, sorting and pagination
    review    - Get one review by id
    stats     - Review statistics
    products  - Unique products
    call      - Route a raw endpoint string (e.g. "api/reviews?rating=5")
    serve     - Start the HTTP server

Usage:
    python -m src.api.cli reviews --rating 5 --sort date --order desc --limit 10
    python -m src.api.cli review 42
    python -m src.api.cli stats
    python -m src.api.cli call "api/reviews?product=phone"
    python -m src.api.cli --reviews-path data/reviews.json products
    python -m src.api.cli serve --port 8080
"""

import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from ..data.config import get_settings, reset_settings
from ..data.review_loader import ReviewStore
from .router import ReviewAPI

LIST_OPTIONS = (
    ("rating", "Exact rating (1-5)"),
    ("product", "Case-insensitive product substring"),
    ("name", "Case-insensitive reviewer name substring"),
    ("date-from", "Earliest date, inclusive (YYYY-MM-DD)"),
    ("date-to", "Latest date, inclusive (YYYY-MM-DD)"),
    ("sort", "Field to sort by"),
    ("order", "asc or desc (default: asc)"),
    ("page", "Page number (default: 1)"),
    ("limit", "Page size (default: all)"),
)


def setup_logging(verbose: bool = False):
    """Configure logging for CLI."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _camel(option: str) -> str:
    head, *rest = option.split("-")
    return head + "".join(part.capitalize() for part in rest)


def list_params(args) -> Dict[str, str]:
    """Collect list filters from parsed args, using the API's param names."""
    params = {}
    for option, _ in LIST_OPTIONS:
        value = getattr(args, option.replace("-", "_"))
        if value is not None:
            params[_camel(option)] = value
    for pair in args.param or []:
        key, _, value = pair.partition("=")
        params[key] = value
    return params


def emit(envelope: Dict[str, Any]) -> int:
    print(json.dumps(envelope, indent=2, default=str))
    return 0 if envelope.get("status") == 200 else 1


def cmd_reviews(api: ReviewAPI, args) -> int:
    """List reviews."""
    return emit(api.route("/api/reviews", list_params(args)))


def cmd_review(api: ReviewAPI, args) -> int:
    """Get one review."""
    return emit(api.get_review_by_id(args.id))


def cmd_stats(api: ReviewAPI, args) -> int:
    return emit(api.get_stats())


def cmd_products(api: ReviewAPI, args) -> int:
    return emit(api.get_products())


def cmd_call(api: ReviewAPI, args) -> int:
    return emit(api.call(args.endpoint))


def cmd_serve(api: ReviewAPI, args) -> int:
    """Start the HTTP server."""
    import uvicorn

    if args.reviews_path:
        os.environ["REVIEWS_PATH"] = args.reviews_path
        reset_settings()

    config = get_settings()
    uvicorn.run(
        "src.api.main:app",
        host=args.host or config.api.host,
        port=args.port or config.api.port,
        log_level="info",
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="review-api",
        description="Review Data API command-line client",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "--reviews-path",
        help="Reviews JSON document (default: REVIEWS_PATH)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # reviews command
    reviews_parser = subparsers.add_parser("reviews", help="List reviews")
    for option, help_text in LIST_OPTIONS:
        reviews_parser.add_argument(f"--{option}", help=help_text)
    reviews_parser.add_argument(
        "--param",
        action="append",
        metavar="KEY=VALUE",
        help="Extra raw query parameter (repeatable)",
    )

    # review command
    review_parser = subparsers.add_parser("review", help="Get review by ID")
    review_parser.add_argument("id", help="Review ID")

    subparsers.add_parser("stats", help="Review statistics")
    subparsers.add_parser("products", help="Unique products")

    # call command
    call_parser = subparsers.add_parser("call", help="Route a raw endpoint string")
    call_parser.add_argument("endpoint", help='e.g. "api/reviews?rating=5&limit=10"')

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Start the HTTP server")
    serve_parser.add_argument("--host", help="Bind host (default: API_HOST)")
    serve_parser.add_argument("--port", type=int, help="Bind port (default: API_PORT)")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 1

    commands = {
        "reviews": cmd_reviews,
        "review": cmd_review,
        "stats": cmd_stats,
        "products": cmd_products,
        "call": cmd_call,
        "serve": cmd_serve,
    }

    api = ReviewAPI(store=ReviewStore(path=args.reviews_path))
    return commands[args.command](api, args)


if __name__ == "__main__":
    sys.exit(main())
