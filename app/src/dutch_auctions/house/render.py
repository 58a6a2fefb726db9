"""Plain-text rendering of auctions for the terminal."""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable, Mapping

from dutch_auctions.auctions.constants import DURATION_LABELS, DURATION_MAP
from dutch_auctions.auctions.models import AuctionRecord

from .service import AuctionView

PROGRESS_BAR_WIDTH = 20


def format_amount(value: float) -> str:
    text = f"{value:,.6f}".rstrip("0").rstrip(".")
    return text or "0"


def format_timestamp(ts: float) -> str:
    return dt.datetime.fromtimestamp(ts, tz=dt.UTC).strftime("%Y-%m-%d %H:%M:%S UTC")


def progress_bar(progress: int, width: int = PROGRESS_BAR_WIDTH) -> str:
    filled = max(0, min(width, progress * width // 100))
    return "[" + "#" * filled + "." * (width - filled) + "]"


def _symbol(asset: str | None) -> str:
    return asset.upper() if asset else "?"


def render_auction_card(view: AuctionView, assets: Mapping[str, str] | None = None) -> list[str]:
    """Lines describing one auction: amounts, prices, progress and window."""
    record = view.record
    projection = view.projection
    sell = _symbol(record.asset_to_sell)
    receive = _symbol(record.asset_to_receive)

    heading = (
        f"{format_amount(record.total)} {sell} -> "
        f"{format_amount(record.total * record.end_price)} - {format_amount(record.total * record.start_price)} {receive}"
    )
    lines = [heading]
    if assets and record.asset_to_sell in assets and record.asset_to_receive in assets:
        lines.append(f"  {assets[record.asset_to_sell]} for {assets[record.asset_to_receive]}")
    lines.extend(
        [
            f"  {format_amount(record.start_price)} {receive} / {sell} down to "
            f"{format_amount(record.end_price)} {receive} / {sell}",
            f"  {progress_bar(projection.progress)} {projection.progress:>3}% {projection.status.value}",
            f"  {format_timestamp(projection.start_timestamp)} -> {format_timestamp(projection.end_timestamp)}",
            f"  {len(record.sub_auctions)} sub-auctions from block {record.start_block}",
            f"  Auction ID: {record.id}",
        ]
    )
    return lines


def render_auction_list(views: Iterable[AuctionView], assets: Mapping[str, str] | None = None) -> list[str]:
    views = list(views)
    if not views:
        return ["No auctions yet."]
    lines = ["Your auctions", ""]
    for view in views:
        lines.extend(render_auction_card(view, assets))
        lines.append("")
    return lines[:-1]


def render_sub_auctions(record: AuctionRecord) -> list[str]:
    lines = [f"{'#':>3}  {'start':>8}  {'end':>8}  {'input':>14}  {'max output':>14}  {'min output':>14}  nonce"]
    for index, sub in enumerate(record.sub_auctions):
        lines.append(
            f"{index:>3}  {sub.start_height:>8}  {sub.end_height:>8}  "
            f"{format_amount(sub.input_amount):>14}  "
            f"{format_amount(sub.output_bounds.max_output):>14}  "
            f"{format_amount(sub.output_bounds.min_output):>14}  "
            f"{sub.nonce.hex()}"
        )
    return lines


def render_durations() -> list[str]:
    return [f"{position:>5g}  {DURATION_LABELS[position]:>6}  {seconds:>7}s" for position, seconds in DURATION_MAP.items()]
