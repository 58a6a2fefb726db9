import base64
import math
import secrets
from collections.abc import Callable

import structlog

from .constants import (
    AUCTION_ID_SIZE,
    BLOCK_TIME_SECONDS,
    DEFAULT_DURATION_SECONDS,
    DURATION_MAP,
    MAX_AMOUNT,
    NONCE_SIZE,
)

__all__ = [
    "RandomBytes",
    "default_random_bytes",
    "round_half_up",
    "map_value_to_range",
    "duration_id_to_seconds",
    "block_to_timestamp",
    "random_nonce",
    "random_fraction",
    "random_auction_id",
    "number_to_amount",
]

logger = structlog.get_logger(__name__)

# Capability returning n random bytes; injected so tests can script it.
RandomBytes = Callable[[int], bytes]

default_random_bytes: RandomBytes = secrets.token_bytes

_U64_MASK = (1 << 64) - 1


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward positive infinity."""
    return math.floor(value + 0.5)


def map_value_to_range(value: float, in_min: float, in_max: float, out_min: float, out_max: float) -> int:
    """Linearly map `value` from [in_min, in_max] onto [out_min, out_max] and round."""
    if in_max == in_min:
        raise ValueError("input range must not be empty")
    ratio = (value - in_min) / (in_max - in_min)
    return round_half_up(out_min + ratio * (out_max - out_min))


def duration_id_to_seconds(duration_id: float) -> int:
    """Convert a duration slider position to seconds.

    Unknown positions fall back to the shortest duration.
    """
    if duration_id not in DURATION_MAP:
        logger.warning(
            "Duration id not found in duration map, defaulting to 10 minutes",
            duration_id=duration_id,
            default_seconds=DEFAULT_DURATION_SECONDS,
        )
        return DEFAULT_DURATION_SECONDS
    return DURATION_MAP[duration_id]


def block_to_timestamp(block_number: int, genesis_timestamp: float, block_time: int = BLOCK_TIME_SECONDS) -> float:
    return genesis_timestamp + block_time * block_number


def random_nonce(random_bytes: RandomBytes = default_random_bytes) -> bytes:
    """Random nonce used to tell otherwise identical auctions apart."""
    nonce = random_bytes(NONCE_SIZE)
    if len(nonce) != NONCE_SIZE:
        raise ValueError(f"random source returned {len(nonce)} bytes, expected {NONCE_SIZE}")
    return nonce


def random_fraction(random_bytes: RandomBytes = default_random_bytes) -> float:
    """Uniform float in [0, 1) built from 53 random bits."""
    raw = int.from_bytes(random_bytes(8), "big")
    return (raw >> 11) / float(1 << 53)


def random_auction_id(random_bytes: RandomBytes = default_random_bytes) -> str:
    return base64.urlsafe_b64encode(random_bytes(AUCTION_ID_SIZE)).decode("ascii").rstrip("=")


def number_to_amount(value: float) -> dict[str, int]:
    """Encode a non-negative amount as the ledger's 128-bit {lo, hi} pair.

    Fractional parts are floored away.
    """
    if math.isnan(value) or math.isinf(value):
        raise ValueError(f"amount is not finite: {value!r}")
    whole = math.floor(value)
    if whole < 0:
        raise ValueError(f"amount must not be negative: {value!r}")
    if whole >= MAX_AMOUNT:
        raise ValueError(f"amount does not fit in 128 bits: {value!r}")
    return {"lo": whole & _U64_MASK, "hi": whole >> 64}

