import random

import pytest
import structlog

from dutch_auctions.house.config import HouseConfig, StorageConfig, SubmissionConfig
from dutch_auctions.storage import KeyValueAuctionRepository, MemoryStore

NOW = 1_760_000_000.0


@pytest.fixture(autouse=True)
def reset_structlog():
    # The CLI binds structlog to the captured stderr of the test that ran it.
    yield
    structlog.reset_defaults()


class ScriptedRandom:
    """Seeded stand-in for the random byte source that records every draw."""

    def __init__(self, seed: int = 0, fill: int | None = None):
        self._rng = random.Random(seed)
        self._fill = fill
        self.calls: list[int] = []

    def __call__(self, n: int) -> bytes:
        self.calls.append(n)
        if self._fill is not None:
            return bytes([self._fill]) * n
        return self._rng.randbytes(n)


@pytest.fixture
def random_source():
    return ScriptedRandom(seed=1234)


@pytest.fixture
def zero_random():
    return ScriptedRandom(fill=0x00)


@pytest.fixture
def max_random():
    return ScriptedRandom(fill=0xFF)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def repository():
    return KeyValueAuctionRepository(MemoryStore())


@pytest.fixture
def house_config(tmp_path):
    return HouseConfig(
        storage=StorageConfig(path=str(tmp_path / "auctions.json")),
        submission=SubmissionConfig(delay_seconds=0),
    )


@pytest.fixture
def valid_form():
    return {
        "asset_to_sell": "eth",
        "asset_to_receive": "tia",
        "amount_to_sell": "100",
        "start_price": "5",
        "reserve_price": "3",
        "duration": 25,
    }
