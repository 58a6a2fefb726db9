"""
Main entry point for the auction house.

Usage:
    python -m dutch_auctions.house [--config config.toml] <command> [options]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

import structlog

from dutch_auctions.auctions.constants import START_DELAY_MINUTES
from dutch_auctions.auctions.models import AuctionRequestError

from .config import load_config, write_default_config
from .constants import DEFAULT_DURATION_ID
from .render import render_auction_card, render_auction_list, render_durations, render_sub_auctions
from .scheduler import run_scheduler
from .service import (
    AuctionAlreadyEndedError,
    AuctionNotFoundError,
    cancel_auction,
    list_auctions,
    preview_auction,
    submit_auction,
)


def configure_logging(verbose: bool = False) -> None:
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if verbose else logging.INFO),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def _add_form_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--sell", required=True, help="Asset to sell (e.g. eth)")
    parser.add_argument("--receive", required=True, help="Asset to receive (e.g. tia)")
    parser.add_argument("--amount", required=True, help="Amount of the asset to sell")
    parser.add_argument("--start-price", required=True, help="Price the auction starts at")
    parser.add_argument("--reserve-price", required=True, help="Lowest price the asset is sold at")
    duration = parser.add_mutually_exclusive_group()
    duration.add_argument(
        "--duration",
        type=float,
        default=DEFAULT_DURATION_ID,
        help="Duration slider position (0-100 in steps of 12.5, see `durations`)",
    )
    duration.add_argument("--duration-seconds", type=int, help="Total duration in seconds")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dutch_auctions.house", description="Plan and track Dutch auctions")
    parser.add_argument("--config", help="Path to TOML config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug events")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("durations", help="Show the duration slider positions")

    plan = commands.add_parser("plan", help="Preview the sub-auctions of an auction without storing it")
    _add_form_arguments(plan)
    plan.add_argument("--json", action="store_true", help="Print ledger descriptions as JSON")

    submit = commands.add_parser("submit", help="Plan and store a new auction")
    _add_form_arguments(submit)

    commands.add_parser("list", help="Show stored auctions and their status")

    cancel = commands.add_parser("cancel", help="Cancel an auction that has not ended")
    cancel.add_argument("auction_id")

    watch = commands.add_parser("watch", help="Re-render auction statuses periodically")
    watch.add_argument("--interval", type=int, help="Seconds between renders")

    init = commands.add_parser("init-config", help="Write a config file with default values")
    init.add_argument("path")

    return parser


def _form_from_args(args: argparse.Namespace) -> dict[str, object]:
    form: dict[str, object] = {
        "asset_to_sell": args.sell,
        "asset_to_receive": args.receive,
        "amount_to_sell": args.amount,
        "start_price": args.start_price,
        "reserve_price": args.reserve_price,
    }
    if args.duration_seconds is not None:
        form["duration_seconds"] = args.duration_seconds
    else:
        form["duration"] = args.duration
    return form


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    if args.command == "init-config":
        path = write_default_config(args.path)
        print(f"Wrote {path}")
        return 0

    if args.command == "durations":
        print("\n".join(render_durations()))
        return 0

    config = load_config(args.config)
    repository = config.storage.repository()

    try:
        if args.command == "plan":
            record = preview_auction(_form_from_args(args), config)
            if args.json:
                print(json.dumps(record.descriptions(), indent=2))
            else:
                print("\n".join(render_sub_auctions(record)))
            return 0

        if args.command == "submit":
            print("Starting auction...")
            record = submit_auction(_form_from_args(args), repository, config)
            print(
                f"Auction created: {len(record.sub_auctions)} sub-auctions "
                f"queued to start in {START_DELAY_MINUTES} minutes"
            )
            view = next(v for v in list_auctions(repository, config) if v.record.id == record.id)
            print("\n".join(render_auction_card(view, config.assets)))
            return 0

        if args.command == "list":
            print("\n".join(render_auction_list(list_auctions(repository, config), config.assets)))
            return 0

        if args.command == "cancel":
            record = cancel_auction(args.auction_id, repository, config)
            print(f"Cancelled auction {record.id}")
            return 0

        if args.command == "watch":
            run_scheduler(args.config, interval_seconds=args.interval or config.watch.interval_seconds)
            return 0
    except AuctionRequestError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except (AuctionNotFoundError, AuctionAlreadyEndedError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    raise AssertionError(f"unhandled command: {args.command}")


if __name__ == "__main__":
    sys.exit(main())
