"""Split an auction request into overlapping sub-auctions positioned in block heights."""

from __future__ import annotations

import math

import structlog

from .constants import (
    BLOCK_TIME_SECONDS,
    BLOCKS_PER_MINUTE,
    MAX_DURATION_SECONDS,
    MAX_SUB_AUCTIONS,
    MIN_SUB_AUCTIONS,
    START_DELAY_MINUTES,
)
from .models import AuctionRecord, AuctionRequest, OutputBounds, SubAuctionDescriptor
from .utils import (
    RandomBytes,
    default_random_bytes,
    map_value_to_range,
    random_auction_id,
    random_fraction,
    random_nonce,
)

__all__ = [
    "number_of_auctions",
    "sub_auction_start_height",
    "plan_sub_auctions",
    "build_auction_record",
]

logger = structlog.get_logger(__name__)


def number_of_auctions(duration_seconds: float) -> int:
    """How many sub-auctions a sale of `duration_seconds` is split into.

    Scales linearly with the duration, from 1 for an instant sale up to 30 for
    the longest duration on the slider. Longer durations stay capped at 30.
    """
    n = map_value_to_range(duration_seconds, 0, MAX_DURATION_SECONDS, MIN_SUB_AUCTIONS, MAX_SUB_AUCTIONS)
    return min(max(n, MIN_SUB_AUCTIONS), MAX_SUB_AUCTIONS)


def sub_auction_start_height(current_height: int) -> int:
    return current_height + BLOCKS_PER_MINUTE * START_DELAY_MINUTES


def plan_sub_auctions(
    request: AuctionRequest,
    *,
    current_height: int,
    random_bytes: RandomBytes = default_random_bytes,
) -> list[SubAuctionDescriptor]:
    """Plan the sub-auctions for a validated request.

    All slices start together, a few minutes after `current_height`, and end one
    slice-duration apart plus up to a minute of random overlap so consecutive
    windows never leave a gap.

    Args:
        request: Validated auction request
        current_height: Chain height at submission time
        random_bytes: Source for nonces and overlap jitter

    Returns:
        Descriptors in index order
    """
    count = number_of_auctions(request.duration_seconds)
    amount_per_slice = request.amount_to_sell / count
    slice_duration = request.duration_seconds // count
    blocks_per_slice = math.ceil(slice_duration / BLOCK_TIME_SECONDS)
    start_height = sub_auction_start_height(current_height)

    sub_auctions: list[SubAuctionDescriptor] = []
    for index in range(count):
        overlap_blocks = math.floor(random_fraction(random_bytes) * BLOCKS_PER_MINUTE)
        sub_auctions.append(
            SubAuctionDescriptor(
                start_height=start_height,
                end_height=current_height + (index + 1) * blocks_per_slice + overlap_blocks,
                input_amount=amount_per_slice,
                output_bounds=OutputBounds(
                    max_output=amount_per_slice * request.start_price,
                    min_output=amount_per_slice * request.reserve_price,
                ),
                nonce=random_nonce(random_bytes),
            )
        )

    logger.debug(
        "Planned sub-auctions",
        count=count,
        start_height=start_height,
        blocks_per_slice=blocks_per_slice,
        last_end_height=sub_auctions[-1].end_height,
    )
    return sub_auctions


def build_auction_record(
    request: AuctionRequest,
    *,
    current_height: int,
    random_bytes: RandomBytes = default_random_bytes,
) -> AuctionRecord:
    """Plan a request and wrap the result into the record that gets persisted."""
    sub_auctions = plan_sub_auctions(request, current_height=current_height, random_bytes=random_bytes)
    return AuctionRecord(
        id=random_auction_id(random_bytes),
        total=request.amount_to_sell,
        sub_auctions=tuple(sub_auctions),
        duration_secs=request.duration_seconds,
        start_block=sub_auctions[0].start_height,
        start_price=request.start_price,
        end_price=request.reserve_price,
        asset_to_sell=request.asset_to_sell,
        asset_to_receive=request.asset_to_receive,
    )
