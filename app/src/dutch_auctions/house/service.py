"""
Submit, list and cancel auctions against the persisted auction list.

Every operation reads the list from the repository and, when it changes it,
writes the whole list back. Nothing is cached between calls.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from dutch_auctions.auctions.models import AuctionRecord, AuctionRequest
from dutch_auctions.auctions.scheduling import build_auction_record
from dutch_auctions.auctions.status import AuctionProjection, AuctionStatus, project_auction
from dutch_auctions.auctions.utils import RandomBytes, default_random_bytes
from dutch_auctions.storage import AuctionRepository

from .callbacks import handle_auction_cancelled, handle_auction_submitted
from .config import HouseConfig

logger = structlog.get_logger(__name__)


class AuctionNotFoundError(LookupError):
    pass


class AuctionAlreadyEndedError(RuntimeError):
    pass


@dataclass(frozen=True)
class AuctionView:
    """A stored auction together with its status at render time."""

    record: AuctionRecord
    projection: AuctionProjection


def _now(now: float | None) -> float:
    return time.time() if now is None else now


def preview_auction(
    form: Mapping[str, Any],
    config: HouseConfig,
    *,
    now: float | None = None,
    random_bytes: RandomBytes = default_random_bytes,
) -> AuctionRecord:
    """Validate and plan an auction without storing it."""
    request = AuctionRequest.from_form(form, assets=config.assets)
    current_height = config.chain.height_at(_now(now))
    return build_auction_record(request, current_height=current_height, random_bytes=random_bytes)


def submit_auction(
    form: Mapping[str, Any],
    repository: AuctionRepository,
    config: HouseConfig,
    *,
    now: float | None = None,
    random_bytes: RandomBytes = default_random_bytes,
    sleep: Callable[[float], Any] = time.sleep,
) -> AuctionRecord:
    """
    Validate, plan and store a new auction.

    Invalid forms raise before any randomness is drawn or storage is touched.

    Args:
        form: Raw form values, see `AuctionRequest.from_form`
        repository: Persisted auction list
        config: Auction house configuration
        now: Submission time, defaults to the current time
        random_bytes: Source for nonces, overlap jitter and the auction id
        sleep: Called with the configured submission delay before storing

    Returns:
        The stored record
    """
    record = preview_auction(form, config, now=now, random_bytes=random_bytes)

    logger.info(
        "Starting auction",
        auction_id=record.id,
        sub_auctions=len(record.sub_auctions),
        start_block=record.start_block,
        delay_seconds=config.submission.delay_seconds,
    )
    if config.submission.delay_seconds > 0:
        sleep(config.submission.delay_seconds)

    records = repository.load()
    records.append(record)
    repository.save(records)

    handle_auction_submitted(record)
    return record


def list_auctions(repository: AuctionRepository, config: HouseConfig, *, now: float | None = None) -> list[AuctionView]:
    now = _now(now)
    clock = config.chain.clock(now)
    return [AuctionView(record=record, projection=project_auction(record, now, clock)) for record in repository.load()]


def cancel_auction(
    auction_id: str,
    repository: AuctionRepository,
    config: HouseConfig,
    *,
    now: float | None = None,
) -> AuctionRecord:
    """
    Remove an auction that has not ended yet.

    Raises:
        AuctionNotFoundError: No stored auction has `auction_id`
        AuctionAlreadyEndedError: The auction has already ended
    """
    now = _now(now)
    records = repository.load()
    match = next((r for r in records if r.id == auction_id), None)
    if match is None:
        raise AuctionNotFoundError(f"no auction with id {auction_id}")

    status = project_auction(match, now, config.chain.clock(now)).status
    if status is AuctionStatus.ENDED:
        raise AuctionAlreadyEndedError(f"auction {auction_id} has already ended")

    repository.save([r for r in records if r.id != auction_id])
    handle_auction_cancelled(match)
    return match
