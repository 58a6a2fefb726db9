"""
Configuration management for the auction house.

Loads configuration from TOML file and provides structured access.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli
import tomlkit

from dutch_auctions.auctions.constants import ASSET_MAP
from dutch_auctions.auctions.status import ChainClock
from dutch_auctions.storage import DEFAULT_STORAGE_KEY, JsonFileStore, KeyValueAuctionRepository

from .constants import (
    CONFIG_PATH_ENV,
    DEFAULT_CONFIG_PATH,
    DEFAULT_STORAGE_PATH,
    SUBMISSION_DELAY_SECONDS,
    WATCH_INTERVAL_SECONDS,
)


@dataclass
class ChainConfig:
    """Where the chain is, in the absence of a real height oracle."""

    current_height: int = 0
    genesis_timestamp: float | None = None

    def clock(self, now: float) -> ChainClock:
        """Clock used to map heights to time.

        Without a configured genesis the chain is assumed to be at
        `current_height` right now.
        """
        if self.genesis_timestamp is None:
            return ChainClock.starting_at(now, self.current_height)
        return ChainClock(genesis_timestamp=self.genesis_timestamp)

    def height_at(self, now: float) -> int:
        return self.clock(now).height_at(now)


@dataclass
class StorageConfig:
    path: str = DEFAULT_STORAGE_PATH
    key: str = DEFAULT_STORAGE_KEY

    @property
    def file_path(self) -> Path:
        """Resolve storage path with ~ expansion."""
        return Path(os.path.expanduser(self.path))

    def repository(self) -> KeyValueAuctionRepository:
        return KeyValueAuctionRepository(JsonFileStore(self.file_path), key=self.key)


@dataclass
class SubmissionConfig:
    delay_seconds: float = SUBMISSION_DELAY_SECONDS


@dataclass
class WatchConfig:
    interval_seconds: int = WATCH_INTERVAL_SECONDS


@dataclass
class HouseConfig:
    """Complete auction house configuration."""

    chain: ChainConfig = field(default_factory=ChainConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    submission: SubmissionConfig = field(default_factory=SubmissionConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)
    assets: dict[str, str] = field(default_factory=lambda: dict(ASSET_MAP))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HouseConfig:
        """Create configuration from parsed TOML dictionary."""
        chain_data = data.get("chain", {})
        storage_data = data.get("storage", {})
        submission_data = data.get("submission", {})
        watch_data = data.get("watch", {})
        assets_data = data.get("assets")

        for name, section in (
            ("chain", chain_data),
            ("storage", storage_data),
            ("submission", submission_data),
            ("watch", watch_data),
        ):
            if not isinstance(section, dict):
                raise ValueError(f"[{name}] must be a table")

        try:
            current_height = int(chain_data.get("current_height", 0))
        except (TypeError, ValueError):
            raise ValueError(f"invalid chain.current_height: {chain_data.get('current_height')!r}")
        if current_height < 0:
            raise ValueError("chain.current_height must be >= 0")

        genesis_raw = chain_data.get("genesis_timestamp")
        genesis_timestamp: float | None = None
        if genesis_raw is not None:
            try:
                genesis_timestamp = float(genesis_raw)
            except (TypeError, ValueError):
                raise ValueError(f"invalid chain.genesis_timestamp: {genesis_raw!r}")
            if not math.isfinite(genesis_timestamp):
                raise ValueError("chain.genesis_timestamp must be finite")

        storage_path = storage_data.get("path", DEFAULT_STORAGE_PATH)
        storage_key = storage_data.get("key", DEFAULT_STORAGE_KEY)
        if not isinstance(storage_path, str) or not storage_path.strip():
            raise ValueError("storage.path must be a non-empty string")
        if not isinstance(storage_key, str) or not storage_key.strip():
            raise ValueError("storage.key must be a non-empty string")

        try:
            delay_seconds = float(submission_data.get("delay_seconds", SUBMISSION_DELAY_SECONDS))
        except (TypeError, ValueError):
            raise ValueError(f"invalid submission.delay_seconds: {submission_data.get('delay_seconds')!r}")
        if not math.isfinite(delay_seconds) or delay_seconds < 0:
            raise ValueError("submission.delay_seconds must be >= 0")

        try:
            interval_seconds = int(watch_data.get("interval_seconds", WATCH_INTERVAL_SECONDS))
        except (TypeError, ValueError):
            raise ValueError(f"invalid watch.interval_seconds: {watch_data.get('interval_seconds')!r}")
        if interval_seconds <= 0:
            raise ValueError("watch.interval_seconds must be > 0")

        if assets_data is None:
            assets = dict(ASSET_MAP)
        else:
            if not isinstance(assets_data, dict):
                raise ValueError("[assets] must be a table of symbol = display name")
            assets = {}
            for symbol, name in assets_data.items():
                if not isinstance(symbol, str) or not symbol.strip():
                    raise ValueError("assets has empty/non-string symbol")
                if not isinstance(name, str) or not name.strip():
                    raise ValueError(f"assets.{symbol} must be a non-empty display name")
                assets[symbol.strip().lower()] = name.strip()
            if len(assets) < 2:
                raise ValueError("assets must list at least two symbols")

        return cls(
            chain=ChainConfig(current_height=current_height, genesis_timestamp=genesis_timestamp),
            storage=StorageConfig(path=storage_path.strip(), key=storage_key.strip()),
            submission=SubmissionConfig(delay_seconds=delay_seconds),
            watch=WatchConfig(interval_seconds=interval_seconds),
            assets=assets,
        )

    @classmethod
    def load(cls, config_path: str | Path) -> HouseConfig:
        """Load configuration from TOML file."""
        path = Path(config_path)
        with path.open("rb") as f:
            data = tomli.load(f)
        return cls.from_dict(data)


def default_config_path() -> Path:
    configured_path = os.environ.get(CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH)
    return Path(os.path.expanduser(configured_path))


def load_config(config_path: str | Path | None = None) -> HouseConfig:
    """Load an explicit config file, or the default one if it exists, or built-in defaults."""
    if config_path is not None:
        return HouseConfig.load(config_path)
    path = default_config_path()
    if path.exists():
        return HouseConfig.load(path)
    return HouseConfig()


def write_default_config(config_path: str | Path) -> Path:
    """Write a commented TOML config with every default spelled out."""
    doc = tomlkit.document()
    doc.add(tomlkit.comment("Dutch auction planner configuration"))

    chain = tomlkit.table()
    chain.add(tomlkit.comment("Height assumed at the moment of each command, unless genesis_timestamp is set"))
    chain.add("current_height", 0)
    chain.add(tomlkit.comment("genesis_timestamp = 1760000000"))
    doc.add("chain", chain)

    storage = tomlkit.table()
    storage.add("path", DEFAULT_STORAGE_PATH)
    storage.add("key", DEFAULT_STORAGE_KEY)
    doc.add("storage", storage)

    submission = tomlkit.table()
    submission.add("delay_seconds", SUBMISSION_DELAY_SECONDS)
    doc.add("submission", submission)

    watch = tomlkit.table()
    watch.add("interval_seconds", WATCH_INTERVAL_SECONDS)
    doc.add("watch", watch)

    assets = tomlkit.table()
    for symbol, name in ASSET_MAP.items():
        assets.add(symbol, name)
    doc.add("assets", assets)

    path = Path(config_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        tomlkit.dump(doc, f)
    return path
