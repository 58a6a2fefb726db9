from __future__ import annotations

import pytest
from apscheduler.schedulers.blocking import BlockingScheduler

from dutch_auctions.house.config import HouseConfig
from dutch_auctions.house.scheduler import create_scheduler, run_scheduler
from dutch_auctions.house.service import submit_auction
from dutch_auctions.house.tasks import render_current_auctions

NOW = 1_760_000_000.0


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        f'[chain]\ngenesis_timestamp = {NOW}\n\n[storage]\npath = "{tmp_path / "auctions.json"}"\n\n'
        "[submission]\ndelay_seconds = 0\n",
        encoding="utf-8",
    )
    return path


def test_render_current_auctions_empty(config_path) -> None:
    emitted: list[str] = []

    assert render_current_auctions(str(config_path), emit=emitted.append, now=NOW) == 0
    assert emitted == ["No auctions yet."]


def test_render_current_auctions_reloads_storage(config_path, valid_form, random_source) -> None:
    config = HouseConfig.load(config_path)
    submit_auction(valid_form, config.storage.repository(), config, now=NOW, random_bytes=random_source)
    emitted: list[str] = []

    count = render_current_auctions(str(config_path), emit=emitted.append, now=NOW + 300 + 1800)

    assert count == 1
    assert "50% active" in emitted[0]


def test_render_current_auctions_ignores_scheduler_kwargs(config_path) -> None:
    emitted: list[str] = []
    assert render_current_auctions(str(config_path), emit=emitted.append, now=NOW, job_id="x") == 0


def test_create_scheduler_registers_render_job(config_path) -> None:
    emitted: list[str] = []
    scheduler = create_scheduler(str(config_path), interval_seconds=7, emit=emitted.append)

    (job,) = scheduler.get_jobs()
    assert job.id == "render_auctions"
    assert job.func is render_current_auctions
    assert job.trigger.interval.total_seconds() == 7
    assert job.kwargs == {"config_path": str(config_path), "emit": emitted.append}


def test_run_scheduler_stops_on_interrupt(config_path, monkeypatch) -> None:
    def interrupt(self, *args, **kwargs):
        raise KeyboardInterrupt

    monkeypatch.setattr(BlockingScheduler, "start", interrupt)

    run_scheduler(str(config_path), interval_seconds=1, emit=lambda _: None)
