from __future__ import annotations

import pytest

from dutch_auctions.auctions.models import AuctionRequestError
from dutch_auctions.auctions.status import AuctionStatus
from dutch_auctions.house.config import ChainConfig, HouseConfig, SubmissionConfig
from dutch_auctions.house.service import (
    AuctionAlreadyEndedError,
    AuctionNotFoundError,
    cancel_auction,
    list_auctions,
    preview_auction,
    submit_auction,
)

NOW = 1_760_000_000.0


@pytest.fixture
def config() -> HouseConfig:
    return HouseConfig(chain=ChainConfig(genesis_timestamp=NOW), submission=SubmissionConfig(delay_seconds=1.5))


def test_submit_stores_record_after_delay(repository, config, valid_form, random_source) -> None:
    sleeps: list[float] = []

    record = submit_auction(
        valid_form, repository, config, now=NOW, random_bytes=random_source, sleep=sleeps.append
    )

    assert sleeps == [1.5]
    assert repository.load() == [record]
    assert record.start_block == 25
    assert record.asset_to_sell == "eth"


def test_submit_without_delay_does_not_sleep(repository, config, valid_form, random_source) -> None:
    config.submission.delay_seconds = 0
    sleeps: list[float] = []

    submit_auction(valid_form, repository, config, now=NOW, random_bytes=random_source, sleep=sleeps.append)

    assert sleeps == []
    assert len(repository.load()) == 1


def test_submit_appends_in_order(repository, config, valid_form, random_source) -> None:
    first = submit_auction(valid_form, repository, config, now=NOW, random_bytes=random_source, sleep=lambda _: None)
    second = submit_auction(
        {**valid_form, "duration": 75}, repository, config, now=NOW, random_bytes=random_source, sleep=lambda _: None
    )

    assert [r.id for r in repository.load()] == [first.id, second.id]


def test_invalid_submit_touches_nothing(repository, config, valid_form, random_source) -> None:
    sleeps: list[float] = []
    form = {**valid_form, "reserve_price": "10"}

    with pytest.raises(AuctionRequestError, match="reserve price cannot exceed starting price"):
        submit_auction(form, repository, config, now=NOW, random_bytes=random_source, sleep=sleeps.append)

    assert random_source.calls == []
    assert sleeps == []
    assert repository.load() == []


def test_preview_uses_height_at_now(repository, valid_form, random_source) -> None:
    config = HouseConfig(chain=ChainConfig(genesis_timestamp=NOW - 1200))

    record = preview_auction(valid_form, config, now=NOW, random_bytes=random_source)

    assert record.start_block == 125
    assert repository.load() == []


def test_list_projects_status_over_time(repository, config, valid_form, random_source) -> None:
    submit_auction(valid_form, repository, config, now=NOW, random_bytes=random_source, sleep=lambda _: None)

    def status_at(now: float) -> AuctionStatus:
        (view,) = list_auctions(repository, config, now=now)
        return view.projection.status

    assert status_at(NOW) is AuctionStatus.QUEUED
    assert status_at(NOW + 300 + 1800) is AuctionStatus.ACTIVE
    assert status_at(NOW + 300 + 3600) is AuctionStatus.ENDED


def test_list_without_genesis_keeps_auctions_queued(repository, valid_form, random_source) -> None:
    config = HouseConfig(submission=SubmissionConfig(delay_seconds=0))
    submit_auction(valid_form, repository, config, now=NOW, random_bytes=random_source)

    (view,) = list_auctions(repository, config, now=NOW + 1_000_000)
    assert view.projection.status is AuctionStatus.QUEUED
    assert view.projection.progress == 0


def test_cancel_removes_queued_auction(repository, config, valid_form, random_source) -> None:
    keep = submit_auction(valid_form, repository, config, now=NOW, random_bytes=random_source, sleep=lambda _: None)
    drop = submit_auction(valid_form, repository, config, now=NOW, random_bytes=random_source, sleep=lambda _: None)

    cancelled = cancel_auction(drop.id, repository, config, now=NOW)

    assert cancelled == drop
    assert repository.load() == [keep]


def test_cancel_active_auction_is_allowed(repository, config, valid_form, random_source) -> None:
    record = submit_auction(valid_form, repository, config, now=NOW, random_bytes=random_source, sleep=lambda _: None)

    cancel_auction(record.id, repository, config, now=NOW + 600)

    assert repository.load() == []


def test_cancel_ended_auction_fails(repository, config, valid_form, random_source) -> None:
    record = submit_auction(valid_form, repository, config, now=NOW, random_bytes=random_source, sleep=lambda _: None)

    with pytest.raises(AuctionAlreadyEndedError, match="already ended"):
        cancel_auction(record.id, repository, config, now=NOW + 86400)

    assert repository.load() == [record]


def test_cancel_unknown_auction_fails(repository, config) -> None:
    with pytest.raises(AuctionNotFoundError, match="no auction with id missing"):
        cancel_auction("missing", repository, config, now=NOW)


def test_submit_beyond_ledger_range_stores_nothing(repository, config, valid_form, random_source) -> None:
    sleeps: list[float] = []
    form = {**valid_form, "amount_to_sell": "1e38"}

    with pytest.raises(AuctionRequestError, match="too large"):
        submit_auction(form, repository, config, now=NOW, random_bytes=random_source, sleep=sleeps.append)

    assert random_source.calls == []
    assert sleeps == []
    assert repository.load() == []
