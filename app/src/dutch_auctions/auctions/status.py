"""Derive the lifecycle status and progress of a stored auction.

Nothing here is stored: status and progress are recomputed from the record and
the current time on every call, so they can only move forward as time passes.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass

from .constants import BLOCK_TIME_SECONDS
from .models import AuctionRecord
from .utils import block_to_timestamp, round_half_up

__all__ = [
    "AuctionStatus",
    "AuctionProjection",
    "ChainClock",
    "auction_window",
    "auction_status",
    "auction_progress",
    "project_auction",
]


class AuctionStatus(str, enum.Enum):
    QUEUED = "queued"
    ACTIVE = "active"
    ENDED = "ended"


@dataclass(frozen=True)
class ChainClock:
    """Linear approximation between block heights and unix timestamps."""

    genesis_timestamp: float
    block_time_seconds: int = BLOCK_TIME_SECONDS

    @classmethod
    def starting_at(cls, now: float, current_height: int = 0) -> ChainClock:
        """Clock on which `current_height` is reached exactly at `now`."""
        return cls(genesis_timestamp=now - current_height * BLOCK_TIME_SECONDS)

    def height_to_timestamp(self, height: int) -> float:
        return block_to_timestamp(height, self.genesis_timestamp, self.block_time_seconds)

    def height_at(self, timestamp: float) -> int:
        return max(0, math.floor((timestamp - self.genesis_timestamp) / self.block_time_seconds))


@dataclass(frozen=True)
class AuctionProjection:
    status: AuctionStatus
    progress: int
    start_timestamp: float
    end_timestamp: float


def _clock_or_default(clock: ChainClock | None, now: float) -> ChainClock:
    # Without a chain clock the chain is assumed to start at `now`.
    return clock if clock is not None else ChainClock.starting_at(now)


def auction_window(record: AuctionRecord, clock: ChainClock) -> tuple[float, float]:
    start = clock.height_to_timestamp(record.start_block)
    return start, start + record.duration_secs


def auction_status(record: AuctionRecord, now: float, clock: ChainClock | None = None) -> AuctionStatus:
    start, end = auction_window(record, _clock_or_default(clock, now))
    if now < start:
        return AuctionStatus.QUEUED
    if now < end:
        return AuctionStatus.ACTIVE
    return AuctionStatus.ENDED


def auction_progress(record: AuctionRecord, now: float, clock: ChainClock | None = None) -> int:
    """Elapsed share of the auction window as an integer percentage."""
    start, end = auction_window(record, _clock_or_default(clock, now))
    if now <= start:
        return 0
    if now >= end:
        return 100
    return round_half_up(100 * (now - start) / (end - start))


def project_auction(record: AuctionRecord, now: float, clock: ChainClock | None = None) -> AuctionProjection:
    clock = _clock_or_default(clock, now)
    start, end = auction_window(record, clock)
    return AuctionProjection(
        status=auction_status(record, now, clock),
        progress=auction_progress(record, now, clock),
        start_timestamp=start,
        end_timestamp=end,
    )
