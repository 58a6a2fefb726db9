"""
Auction house tasks for APScheduler.
"""

import collections
from collections.abc import Callable
from typing import Any

import structlog

from .config import load_config
from .render import render_auction_list
from .service import list_auctions

logger = structlog.get_logger(__name__)


def render_current_auctions(
    config_path: str | None = None,
    *,
    emit: Callable[[str], Any] = print,
    now: float | None = None,
    **kwargs,
) -> int:
    """
    Re-derive and print the status of every stored auction.

    Called by APScheduler job.

    Args:
        config_path: Path to TOML config file (loaded on each run)
        emit: Receives the rendered text
        now: Render time, defaults to the current time
        **kwargs: Additional kwargs from the scheduler - ignored

    Returns:
        Number of auctions rendered
    """
    config = load_config(config_path)
    views = list_auctions(config.storage.repository(), config, now=now)
    emit("\n".join(render_auction_list(views, config.assets)))

    logger.debug(
        "Rendered auctions",
        count=len(views),
        by_status=dict(collections.Counter(v.projection.status.value for v in views)),
    )
    return len(views)
