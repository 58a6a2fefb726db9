"""Persistence for submitted auctions."""

from .kv import JsonFileStore, KeyValueStore, MemoryStore
from .repository import DEFAULT_STORAGE_KEY, AuctionRepository, KeyValueAuctionRepository

__all__ = [
    "DEFAULT_STORAGE_KEY",
    "AuctionRepository",
    "JsonFileStore",
    "KeyValueAuctionRepository",
    "KeyValueStore",
    "MemoryStore",
]
