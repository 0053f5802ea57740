# main.py

"""Entry point for the pricewatch command-line tracker."""

import argparse
import logging
import sys

from pricewatch.config.logging_config import setup_logging

logger = logging.getLogger("pricewatch.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="pricewatch",
        description="Track retail product prices with scraped and user-reported values.",
        epilog="Supported stores: Amazon, eBay, Best Buy (others: title only).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Fetch the current price of a product.")
    check.add_argument("url", help="Product page URL (https).")
    check.add_argument(
        "-p",
        "--price",
        default=None,
        dest="user_price",
        help="Price you saw yourself, used to validate the scraped one.",
    )
    check.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )

    history = sub.add_parser("history", help="Show recorded prices for a product.")
    history.add_argument("url")
    history.add_argument(
        "-d", "--days", type=int, default=30, help="Look-back window (default: 30)."
    )

    sub.add_parser("list", help="List every tracked product with its latest price.")

    delete = sub.add_parser("delete", help="Delete all records for a product.")
    delete.add_argument("url")

    trend = sub.add_parser("trend", help="Classify the recent price trend.")
    trend.add_argument("url")
    trend.add_argument(
        "-d", "--days", type=int, default=30, help="Look-back window (default: 30)."
    )
    return parser


def main() -> None:
    """Parse arguments and dispatch to the matching command."""
    log_file = setup_logging()
    logger.info("pricewatch starting, log file: %s", log_file)

    args = _build_parser().parse_args()

    from pricewatch.cli import runner
    from pricewatch.services.tracker import PriceTracker

    tracker = PriceTracker()
    try:
        if args.command == "check":
            exit_code = runner.run_check(
                tracker, args.url, args.user_price, args.output_format
            )
        elif args.command == "history":
            exit_code = runner.run_history(tracker, args.url, args.days)
        elif args.command == "list":
            exit_code = runner.run_list(tracker)
        elif args.command == "delete":
            exit_code = runner.run_delete(tracker, args.url)
        else:
            exit_code = runner.run_trend(tracker, args.url, args.days)
    except Exception:
        logger.critical("Fatal error running %s", args.command, exc_info=True)
        raise
    finally:
        tracker.close()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
