from __future__ import annotations

import json

import pytest
import structlog

from dutch_auctions.house.__main__ import build_parser, configure_logging, main
from dutch_auctions.house.config import HouseConfig

FORM_ARGS = ["--sell", "eth", "--receive", "tia", "--amount", "100", "--start-price", "5", "--reserve-price", "3"]


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        f'[storage]\npath = "{tmp_path / "auctions.json"}"\n\n[submission]\ndelay_seconds = 0\n',
        encoding="utf-8",
    )
    return path


def _stored(config_path):
    return HouseConfig.load(config_path).storage.repository().load()


def test_form_defaults_to_one_hour_slider_position() -> None:
    args = build_parser().parse_args(["plan", *FORM_ARGS])
    assert args.duration == 25
    assert args.duration_seconds is None


def test_duration_flags_are_exclusive() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["plan", *FORM_ARGS, "--duration", "50", "--duration-seconds", "900"])


def test_submit_then_list(config_path, capsys) -> None:
    assert main(["--config", str(config_path), "submit", *FORM_ARGS, "--duration", "50"]) == 0

    out = capsys.readouterr().out
    assert out.startswith("Starting auction...\n")
    assert "Auction created: 3 sub-auctions queued to start in 5 minutes" in out
    assert "100 ETH -> 300 - 500 TIA" in out

    (record,) = _stored(config_path)
    assert record.duration_secs == 21600

    assert main(["--config", str(config_path), "list"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Your auctions")
    assert f"Auction ID: {record.id}" in out
    assert "queued" in out


def test_list_empty(config_path, capsys) -> None:
    assert main(["--config", str(config_path), "list"]) == 0
    assert capsys.readouterr().out == "No auctions yet.\n"


def test_invalid_form_exits_with_usage_status(config_path, capsys) -> None:
    argv = ["--config", str(config_path), "submit", "--sell", "eth", "--receive", "tia", "--amount", "100"]
    argv += ["--start-price", "5", "--reserve-price", "10"]

    assert main(argv) == 2

    captured = capsys.readouterr()
    assert "error: reserve price cannot exceed starting price" in captured.err
    assert "Auction created" not in captured.out
    assert _stored(config_path) == []


def test_cancel(config_path, capsys) -> None:
    main(["--config", str(config_path), "submit", *FORM_ARGS])
    (record,) = _stored(config_path)
    capsys.readouterr()

    assert main(["--config", str(config_path), "cancel", record.id]) == 0
    assert capsys.readouterr().out == f"Cancelled auction {record.id}\n"
    assert _stored(config_path) == []

    assert main(["--config", str(config_path), "cancel", record.id]) == 1
    assert f"error: no auction with id {record.id}" in capsys.readouterr().err


def test_plan_json_does_not_store(config_path, capsys) -> None:
    assert main(["--config", str(config_path), "plan", *FORM_ARGS, "--duration-seconds", "7200", "--json"]) == 0

    descriptions = json.loads(capsys.readouterr().out)
    assert len(descriptions) == 2
    assert descriptions[0]["input"] == {"amount": {"lo": 50, "hi": 0}, "assetId": {"altBaseDenom": "eth"}}
    assert descriptions[0]["outputId"] == {"altBaseDenom": "tia"}
    assert descriptions[0]["startHeight"] == 25
    assert _stored(config_path) == []


def test_plan_table(config_path, capsys) -> None:
    assert main(["--config", str(config_path), "plan", *FORM_ARGS]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 2
    assert lines[0].split()[:3] == ["#", "start", "end"]


def test_durations(capsys) -> None:
    assert main(["durations"]) == 0
    assert len(capsys.readouterr().out.splitlines()) == 9


def test_init_config(tmp_path, capsys) -> None:
    path = tmp_path / "new" / "config.toml"

    assert main(["init-config", str(path)]) == 0

    assert capsys.readouterr().out == f"Wrote {path}\n"
    assert HouseConfig.load(path) == HouseConfig()


def test_configure_logging_filters_by_verbosity(capsys) -> None:
    log = structlog.get_logger("dutch_auctions.test")

    configure_logging(verbose=False)
    log.debug("hidden")
    log.info("shown", auction_id="abc")
    lines = capsys.readouterr().err.strip().splitlines()
    assert len(lines) == 1
    event = json.loads(lines[0])
    assert event["event"] == "shown"
    assert event["level"] == "info"
    assert event["auction_id"] == "abc"

    configure_logging(verbose=True)
    log.debug("visible")
    assert json.loads(capsys.readouterr().err.strip())["event"] == "visible"


def test_verbose_submit(config_path, capsys) -> None:
    assert main(["--config", str(config_path), "-v", "submit", *FORM_ARGS]) == 0

    events = [json.loads(line)["event"] for line in capsys.readouterr().err.splitlines()]
    assert "Planned sub-auctions" in events
    assert "Auction submitted" in events


def test_plan_rejects_amount_beyond_ledger_range(config_path, capsys) -> None:
    argv = ["--config", str(config_path), "plan", "--sell", "eth", "--receive", "tia", "--amount", "1e38"]
    argv += ["--start-price", "5", "--reserve-price", "3", "--json"]

    assert main(argv) == 2

    captured = capsys.readouterr()
    assert "error: amount to sell is too large" in captured.err
    assert captured.out == ""
