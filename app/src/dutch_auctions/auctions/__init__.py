"""Auction scheduling and status projection."""

from .models import AuctionRecord, AuctionRequest, AuctionRequestError, OutputBounds, SubAuctionDescriptor
from .scheduling import build_auction_record, number_of_auctions, plan_sub_auctions
from .status import AuctionProjection, AuctionStatus, ChainClock, project_auction

__all__ = [
    "AuctionProjection",
    "AuctionRecord",
    "AuctionRequest",
    "AuctionRequestError",
    "AuctionStatus",
    "ChainClock",
    "OutputBounds",
    "SubAuctionDescriptor",
    "build_auction_record",
    "number_of_auctions",
    "plan_sub_auctions",
    "project_auction",
]
