"""Repository holding the ordered list of submitted auctions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

import pydantic
import structlog

from dutch_auctions.auctions.models import AuctionRecord

from .kv import KeyValueStore

logger = structlog.get_logger(__name__)

DEFAULT_STORAGE_KEY = "auctions-storage"


class AuctionRepository(ABC):
    """The persisted auction list is the only source of truth; callers never keep a copy around."""

    @abstractmethod
    def load(self) -> list[AuctionRecord]:
        """Return all stored auctions in submission order."""
        ...

    @abstractmethod
    def save(self, records: Iterable[AuctionRecord]) -> None:
        """Replace the stored list with `records`."""
        ...


class KeyValueAuctionRepository(AuctionRepository):
    """Keeps the auction list serialized under a single key of a key-value store."""

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_STORAGE_KEY):
        self.store = store
        self.key = key

    def load(self) -> list[AuctionRecord]:
        raw = self.store.get(self.key)
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise ValueError(f"storage slot {self.key!r} must hold a list of auctions")

        records: list[AuctionRecord] = []
        for index, item in enumerate(raw):
            try:
                records.append(AuctionRecord.model_validate(item))
            except pydantic.ValidationError as e:
                raise ValueError(f"invalid auction #{index} in storage slot {self.key!r}: {e}") from e
        return records

    def save(self, records: Iterable[AuctionRecord]) -> None:
        payload = [record.model_dump(mode="json", by_alias=True) for record in records]
        self.store.set(self.key, payload)
        logger.debug("Saved auctions", key=self.key, count=len(payload))
