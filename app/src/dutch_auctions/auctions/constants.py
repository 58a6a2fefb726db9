"""
System constants for auction scheduling.

These values are not user-configurable and are set at the system level.
"""

# Blockchain timing
BLOCK_TIME_SECONDS = 12  # seconds per block, approximated
BLOCKS_PER_MINUTE = 60 // BLOCK_TIME_SECONDS

# Sub-auctions start this long after submission so the seller can still cancel
START_DELAY_MINUTES = 5

# Bounds on how many sub-auctions a single request is split into
MIN_SUB_AUCTIONS = 1
MAX_SUB_AUCTIONS = 30

NONCE_SIZE = 10  # bytes
AUCTION_ID_SIZE = 12  # bytes, before url-safe base64 encoding

# Ledger amounts are unsigned 128-bit integers
MAX_AMOUNT = 1 << 128

# Duration slider position -> total auction duration in seconds.
# The slider is non-linear, so its value is treated as an id.
DURATION_MAP: dict[float, int] = {
    0: 10 * 60,
    12.5: 30 * 60,
    25: 60 * 60,
    37.5: 2 * 60 * 60,
    50: 6 * 60 * 60,
    62.5: 12 * 60 * 60,
    75: 24 * 60 * 60,
    87.5: 48 * 60 * 60,
    100: 96 * 60 * 60,
}
DEFAULT_DURATION_SECONDS = DURATION_MAP[0]
MAX_DURATION_SECONDS = max(DURATION_MAP.values())

DURATION_LABELS: dict[float, str] = {
    0: "10 min",
    12.5: "30 min",
    25: "1 hr",
    37.5: "2 hr",
    50: "6 hr",
    62.5: "12 hr",
    75: "24 hr",
    87.5: "48 hr",
    100: "96 hr",
}

# Supported asset symbols and their display names
ASSET_MAP: dict[str, str] = {
    "eth": "Ethereum",
    "tia": "Celestia",
    "btc": "Bitcoin",
}
