"""
Data models for auction requests and the records persisted for them.

Requests are plain frozen dataclasses built from raw form values. Sub-auction
descriptors and auction records are pydantic models so they can be written to
and read back from storage without loss.
"""

from __future__ import annotations

import base64
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .constants import ASSET_MAP, DEFAULT_DURATION_SECONDS, MAX_AMOUNT, NONCE_SIZE
from .utils import duration_id_to_seconds, number_to_amount


class AuctionRequestError(ValueError):
    """Raised when raw form values cannot form a valid auction request."""


def _parse_asset(form: Mapping[str, Any], key: str, label: str, assets: Mapping[str, str]) -> str:
    raw = form.get(key)
    if raw is None or not str(raw).strip():
        raise AuctionRequestError(f"{label} is required")
    symbol = str(raw).strip().lower()
    if symbol not in assets:
        raise AuctionRequestError(f"unknown {label}: {raw}")
    return symbol


def _parse_positive(form: Mapping[str, Any], key: str, label: str) -> float:
    raw = form.get(key)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise AuctionRequestError(f"{label} is required")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise AuctionRequestError(f"{label} must be a number: {raw!r}")
    if math.isnan(value) or math.isinf(value):
        raise AuctionRequestError(f"{label} must be a finite number")
    if value <= 0:
        raise AuctionRequestError(f"{label} must be greater than zero")
    return value


def _parse_duration(form: Mapping[str, Any]) -> int:
    if form.get("duration_seconds") is not None:
        seconds = int(_parse_positive(form, "duration_seconds", "duration"))
        if seconds < DEFAULT_DURATION_SECONDS:
            raise AuctionRequestError(f"duration must be at least {DEFAULT_DURATION_SECONDS} seconds")
        return seconds

    raw = form.get("duration")
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise AuctionRequestError("duration is required")
    try:
        duration_id = float(raw)
    except (TypeError, ValueError):
        raise AuctionRequestError(f"duration must be a slider position: {raw!r}")
    return duration_id_to_seconds(duration_id)


@dataclass(frozen=True)
class AuctionRequest:
    """A validated request to sell `amount_to_sell` over `duration_seconds`."""

    asset_to_sell: str
    asset_to_receive: str
    amount_to_sell: float
    start_price: float
    reserve_price: float
    duration_seconds: int

    @classmethod
    def from_form(cls, form: Mapping[str, Any], assets: Mapping[str, str] = ASSET_MAP) -> AuctionRequest:
        """Validate raw form values and build a request.

        Args:
            form: Raw values keyed by `asset_to_sell`, `asset_to_receive`,
                `amount_to_sell`, `start_price`, `reserve_price` and either
                `duration` (slider position) or `duration_seconds`.
            assets: Supported asset symbols.

        Raises:
            AuctionRequestError: On the first invalid field.
        """
        asset_to_sell = _parse_asset(form, "asset_to_sell", "asset to sell", assets)
        asset_to_receive = _parse_asset(form, "asset_to_receive", "asset to receive", assets)
        amount_to_sell = _parse_positive(form, "amount_to_sell", "amount to sell")
        start_price = _parse_positive(form, "start_price", "starting price")
        reserve_price = _parse_positive(form, "reserve_price", "reserve price")

        if reserve_price > start_price:
            raise AuctionRequestError("reserve price cannot exceed starting price")
        if asset_to_sell == asset_to_receive:
            raise AuctionRequestError("asset to receive must differ from asset to sell")
        if max(amount_to_sell, amount_to_sell * start_price) >= MAX_AMOUNT:
            raise AuctionRequestError("amount to sell is too large for the ledger at this starting price")

        return cls(
            asset_to_sell=asset_to_sell,
            asset_to_receive=asset_to_receive,
            amount_to_sell=amount_to_sell,
            start_price=start_price,
            reserve_price=reserve_price,
            duration_seconds=_parse_duration(form),
        )


class _RecordModel(BaseModel):
    # Stored with camelCase keys; snake_case is accepted on the way in.
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class OutputBounds(_RecordModel):
    max_output: float = Field(..., ge=0, description="Output received if filled at the starting price")
    min_output: float = Field(..., ge=0, description="Output received if filled at the reserve price")


class SubAuctionDescriptor(_RecordModel):
    """One slice of a Dutch auction, positioned in block heights."""

    start_height: int = Field(..., ge=0)
    end_height: int = Field(..., ge=0)
    input_amount: float = Field(..., ge=0, description="Amount of the sold asset in this slice")
    output_bounds: OutputBounds
    nonce: bytes

    @field_validator("nonce", mode="before")
    @classmethod
    def _decode_nonce(cls, v):
        if isinstance(v, str):
            try:
                return bytes.fromhex(v)
            except ValueError as e:
                raise ValueError("nonce must be hex encoded") from e
        return v

    @field_validator("nonce")
    @classmethod
    def _check_nonce_size(cls, v: bytes) -> bytes:
        if len(v) != NONCE_SIZE:
            raise ValueError(f"nonce must be {NONCE_SIZE} bytes")
        return v

    @field_serializer("nonce")
    def _encode_nonce(self, nonce: bytes) -> str:
        return nonce.hex()

    @model_validator(mode="after")
    def _check_heights(self) -> SubAuctionDescriptor:
        if self.end_height <= self.start_height:
            raise ValueError("end height must be greater than start height")
        return self

    def to_description(self, asset_to_sell: str, asset_to_receive: str) -> dict[str, Any]:
        """Ledger-shaped payload for this slice, amounts encoded as 128-bit integers."""
        return {
            "startHeight": self.start_height,
            "endHeight": self.end_height,
            "input": {
                "amount": number_to_amount(self.input_amount),
                "assetId": {"altBaseDenom": asset_to_sell},
            },
            "maxOutput": number_to_amount(self.output_bounds.max_output),
            "minOutput": number_to_amount(self.output_bounds.min_output),
            "outputId": {"altBaseDenom": asset_to_receive},
            "nonce": base64.b64encode(self.nonce).decode("ascii"),
        }


class AuctionRecord(_RecordModel):
    """A submitted auction as it is kept in storage."""

    id: str = Field(..., min_length=1)
    total: float = Field(..., gt=0, description="Total amount to sell")
    sub_auctions: tuple[SubAuctionDescriptor, ...] = Field(..., min_length=1)
    duration_secs: int = Field(..., gt=0)
    start_block: int = Field(..., ge=0)
    start_price: float = Field(..., gt=0)
    end_price: float = Field(..., gt=0, description="Reserve price")
    asset_to_sell: str | None = None
    asset_to_receive: str | None = None

    def descriptions(self) -> list[dict[str, Any]]:
        if self.asset_to_sell is None or self.asset_to_receive is None:
            raise ValueError(f"auction {self.id} has no assets recorded")
        return [sub.to_description(self.asset_to_sell, self.asset_to_receive) for sub in self.sub_auctions]
