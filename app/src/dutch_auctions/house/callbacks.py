"""
Callbacks for handling submitted auctions.

These functions are called once a new auction has been stored.
Future: hand the sub-auction descriptions to a ledger broadcaster.
"""

import structlog

from dutch_auctions.auctions.models import AuctionRecord

logger = structlog.get_logger(__name__)


def handle_auction_submitted(record: AuctionRecord) -> None:
    """
    Handle a freshly stored auction.

    This is the main entry point for broadcast integration.

    Args:
        record: The auction as it was persisted
    """
    logger.info(
        "Auction submitted",
        auction_id=record.id,
        total=record.total,
        sub_auctions=len(record.sub_auctions),
        start_block=record.start_block,
        last_end_height=record.sub_auctions[-1].end_height,
        duration_secs=record.duration_secs,
    )

    for index, sub in enumerate(record.sub_auctions):
        logger.debug(
            "Sub-auction planned",
            auction_id=record.id,
            index=index,
            start_height=sub.start_height,
            end_height=sub.end_height,
            input_amount=sub.input_amount,
            max_output=sub.output_bounds.max_output,
            min_output=sub.output_bounds.min_output,
        )


def handle_auction_cancelled(record: AuctionRecord) -> None:
    logger.info(
        "Auction cancelled",
        auction_id=record.id,
        total=record.total,
        sub_auctions=len(record.sub_auctions),
    )
