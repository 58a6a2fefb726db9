"""
Command line auction house.

Collects auction forms, stores planned auctions and tracks their status.
"""

from .config import HouseConfig
from .service import cancel_auction, list_auctions, submit_auction

__all__ = ["HouseConfig", "cancel_auction", "list_auctions", "submit_auction"]
