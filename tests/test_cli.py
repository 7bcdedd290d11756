"""Tests for the command-line entry point."""

import json

import pytest

from asnping import cli as cli_module
from asnping.errors import PrefixSourceError
from asnping.models import DiscoveryReport, DiscoveryResult, LocationRecord


class FakeOrchestrator:
    """Replaces the real orchestrator; returns a canned report."""

    instances = []
    report = None
    error = None

    def __init__(self, settings, metrics=None):
        self.settings = settings
        self.asns = None
        FakeOrchestrator.instances.append(self)

    def run(self, asns):
        self.asns = list(asns)
        if FakeOrchestrator.error is not None:
            raise FakeOrchestrator.error
        return FakeOrchestrator.report


@pytest.fixture
def fake_orchestrator(monkeypatch):
    FakeOrchestrator.instances = []
    FakeOrchestrator.error = None
    report = DiscoveryReport()
    result = DiscoveryResult(asn=64500, address="192.0.2.1", ip="192.0.2.1", strategy="sweep",
                             location=LocationRecord(ip="192.0.2.1", country="NL"))
    report.results.append(result)
    report.aggregate.add_result(result)
    report.unreachable.append(64501)
    FakeOrchestrator.report = report
    monkeypatch.setattr(cli_module, "DiscoveryOrchestrator", FakeOrchestrator)
    return FakeOrchestrator


def test_json_output_and_asn_parsing(fake_orchestrator, capsys):
    code = cli_module.main(["-asn", "AS64500,64501", "--json", "--no-progress"])

    assert code == 0
    assert fake_orchestrator.instances[0].asns == [64500, 64501]
    output = json.loads(capsys.readouterr().out)
    assert output["countries"] == {"NL": [{"ip": "192.0.2.1", "asn": 64500}]}
    assert output["unreachable"] == [64501]


def test_flags_become_settings(fake_orchestrator):
    cli_module.main(["--asn", "64500", "--batch-size", "20", "--probe-timeout", "0.5",
                     "--lookback-hours", "12", "--min-peers", "3", "--no-fast-path",
                     "--strict", "--quiet", "--no-color"])

    settings = fake_orchestrator.instances[0].settings
    assert settings.batch_size == 20
    assert settings.probe_timeout == 0.5
    assert settings.lookback_hours == 12
    assert settings.min_peers == 3
    assert settings.use_fast_path is False
    assert settings.use_sweep is True
    assert settings.strict is True
    assert settings.show_progress is False


def test_human_report_lists_countries(fake_orchestrator, capsys):
    code = cli_module.main(["-asn", "64500", "--no-color", "--no-banner", "--no-progress"])

    out = capsys.readouterr().out
    assert code == 0
    assert "NL" in out
    assert "192.0.2.1" in out
    assert "AS64501" in out


def test_missing_asn_is_usage_error(fake_orchestrator):
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main([])
    assert excinfo.value.code == 2


@pytest.mark.parametrize("value", ["ASfoo", ",", "64500,bogus"])
def test_invalid_asn_is_usage_error(fake_orchestrator, value):
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["-asn", value])
    assert excinfo.value.code == 2


def test_invalid_setting_is_usage_error(fake_orchestrator):
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["-asn", "64500", "--batch-size", "0"])
    assert excinfo.value.code == 2


def test_strict_abort_exits_nonzero(fake_orchestrator):
    fake_orchestrator.error = PrefixSourceError("503", asn=64500)
    assert cli_module.main(["-asn", "64500", "--strict", "--quiet"]) == 1


def test_all_failed_exits_nonzero(fake_orchestrator):
    report = DiscoveryReport()
    report.failures[64500] = "RIPEstat: 503"
    fake_orchestrator.report = report

    assert cli_module.main(["-asn", "64500", "--json"]) == 1
