"""
Defaults for the auction house front end.

Every value here can be overridden from the TOML config file.
"""

CONFIG_PATH_ENV = "DUTCH_AUCTIONS_CONFIG"
DEFAULT_CONFIG_PATH = "~/.dutch-auctions/config.toml"
DEFAULT_STORAGE_PATH = "~/.dutch-auctions/auctions.json"

# Artificial wait before a new auction is stored, standing in for the broadcast
SUBMISSION_DELAY_SECONDS = 2.0

# How often `watch` re-renders auction statuses (in seconds)
WATCH_INTERVAL_SECONDS = 5
WATCH_MISFIRE_GRACE_SECONDS = 2

# Slider position preselected in the form (1 hr)
DEFAULT_DURATION_ID = 25
