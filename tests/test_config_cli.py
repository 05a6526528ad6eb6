"""
Tests for configuration loading, logging setup, the engine and the CLI.
"""

import asyncio
import json
import logging
import sys
import types

import pytest
from click.testing import CliRunner

from shared.config import AdScopeConfig, get_config
from shared.console import ScopeConsole
from shared.logger import ScopeLogger, configure_logging

from adscope.cli import cli
from adscope.core.engine import AdScopeEngine

GOVEE_HEX = "0388ec000a0200"


@pytest.fixture
def events_file(tmp_path):
    path = tmp_path / "capture.jsonl"
    records = [
        {
            "peer_id": "A4:C1:38:00:11:22",
            "name": "ihoment_H6125_1A2B",
            "rssi": -58,
            "advertisement": {"manufacturer_data": GOVEE_HEX, "connectable": True},
        },
        {
            "peer_id": "5C:F3:70:AA:BB:CC",
            "rssi": -75,
            "advertisement": {"manufacturer_data": "4c0010055a1c", "tx_power": 12},
        },
    ]
    path.write_text("\n".join(json.dumps(record) for record in records) + "\n", encoding="utf-8")
    return path


class TestConfig:
    """Test suite for TOML configuration loading."""

    def test_defaults(self):
        config = AdScopeConfig()
        assert config.scan.duration == 0
        assert config.scan.scanning_mode == "active"
        assert config.scan.output_format == "text"
        assert config.global_settings.log_level == "WARNING"

    def test_load_file(self, tmp_path):
        path = tmp_path / "adscope.toml"
        path.write_text(
            '[global]\nlog_level = "DEBUG"\nversion = "0.9"\n\n'
            '[scan]\nduration = 15\nscanning_mode = "passive"\nunknown_key = 1\n',
            encoding="utf-8",
        )
        config = AdScopeConfig.load(path)

        assert config.global_settings.log_level == "DEBUG"
        assert config.scan.duration == 15
        assert config.scan.scanning_mode == "passive"
        assert config.to_dict()["scan"]["show_summary"] is True
        assert "version" not in config.to_dict()["global_settings"]

    def test_get_config_caches(self, tmp_path):
        path = tmp_path / "adscope.toml"
        path.write_text('[scan]\nscanning_mode = "passive"\n', encoding="utf-8")
        first = get_config(path)
        assert get_config() is first
        assert first.scan.scanning_mode == "passive"

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AdScopeConfig.load(tmp_path / "absent.toml")

    @pytest.mark.parametrize(
        "body",
        [
            '[scan]\nscanning_mode = "aggressive"\n',
            '[scan]\noutput_format = "xml"\n',
            "[scan]\nduration = -1\n",
        ],
    )
    def test_invalid_values(self, tmp_path, body):
        path = tmp_path / "bad.toml"
        path.write_text(body, encoding="utf-8")
        with pytest.raises(ValueError):
            AdScopeConfig.load(path)


class TestLogging:
    """Test suite for the structured logger."""

    def test_logger_name_and_level(self):
        log = ScopeLogger("tests.sample", log_level="INFO", console_output=False)
        assert log.component == "tests.sample"
        assert log.underlying.name == "adscope.tests.sample"
        assert log.underlying.level == logging.INFO
        assert not log.underlying.propagate

    def test_configure_logging_updates_all_loggers(self, tmp_path):
        log = ScopeLogger("tests.configure", console_output=False)
        log_file = tmp_path / "logs" / "adscope.log"
        try:
            configure_logging("DEBUG", log_file=log_file, json_logs=True)
            assert log.underlying.level == logging.DEBUG
            log.info("hello", peer="AA")
            log.warning("careful")
            for handler in log.underlying.handlers:
                handler.flush()
            lines = log_file.read_text(encoding="utf-8").splitlines()
            entry = json.loads(lines[-2])
            assert entry["message"] == "hello"
            assert entry["component"] == "tests.configure"
            assert entry["extra"] == {"peer": "AA"}
            assert json.loads(lines[-1])["level"] == "WARNING"
        finally:
            configure_logging("WARNING")
        assert log.underlying.level == logging.WARNING
        assert not log.underlying.handlers


class TestScopeConsole:
    """Test suite for the Rich console wrapper."""

    def test_plain_is_verbatim(self, capsys):
        ScopeConsole().plain("Name: [bold]tag[/bold] :smile:")
        assert capsys.readouterr().out == "Name: [bold]tag[/bold] :smile:\n"

    def test_messages_and_table(self, capsys):
        console = ScopeConsole()
        console.info("Scanning")
        console.warning("No advertisements received")
        console.blank()
        console.table("Advertisements by Vendor", ["Vendor", "Reports"], [("Apple, Inc.", 2)])
        out = capsys.readouterr().out

        assert "INFO: Scanning" in out
        assert "WARNING: No advertisements received" in out
        assert "Advertisements by Vendor" in out
        assert "Apple, Inc." in out

    def test_quiet(self, capsys):
        ScopeConsole(quiet=True).plain("hidden")
        assert capsys.readouterr().out == ""


class TestEngine:
    """Test suite for the orchestration layer."""

    def test_replay_counts_vendors(self, events_file):
        engine = AdScopeEngine(console=ScopeConsole(quiet=True))
        assert engine.replay(events_file) == 2
        assert engine.output.vendor_counts == {"Govee Life Inc.": 1, "Apple, Inc.": 1}

    def test_json_mode_from_config(self):
        config = AdScopeConfig()
        config.scan.output_format = "json"
        engine = AdScopeEngine(config=config, console=ScopeConsole(quiet=True))
        assert engine.output.json_lines

    def test_decode_returns_section(self):
        engine = AdScopeEngine(console=ScopeConsole(quiet=True))
        section = engine.decode(bytes.fromhex(GOVEE_HEX))
        assert section.parsed.vendor_name == "Govee Life Inc."
        assert section.byte_count == 7

    def test_scan_with_stand_in_scanner(self, monkeypatch):
        class Scanner:
            def __init__(self, detection_callback, scanning_mode):
                self.callback = detection_callback

            async def start(self):
                device = types.SimpleNamespace(address="AA:BB", name=None)
                advertisement = types.SimpleNamespace(
                    local_name=None,
                    manufacturer_data={0x0059: b"\x01\x02"},
                    service_uuids=[],
                    service_data={},
                    tx_power=None,
                    rssi=-66,
                )
                self.callback(device, advertisement)

            async def stop(self):
                pass

        module = types.ModuleType("bleak")
        module.BleakScanner = Scanner
        monkeypatch.setitem(sys.modules, "bleak", module)

        engine = AdScopeEngine(console=ScopeConsole(quiet=True))
        assert asyncio.run(engine.scan(duration=1)) == 1
        assert engine.output.vendor_counts == {"Nordic Semiconductor ASA": 1}


class TestCLI:
    """Test suite for the Click command-line interface."""

    def test_decode(self):
        result = CliRunner().invoke(cli, ["decode", GOVEE_HEX])
        assert result.exit_code == 0, result.output
        assert "Manufacturer Data (7 bytes):" in result.output
        assert "  Status/Config: 0x0a00 (inferred)" in result.output
        assert "Manufacturer: Govee Life Inc." in result.output

    def test_decode_accepts_separators(self):
        result = CliRunner().invoke(cli, ["decode", "0x4c:00:07:19"])
        assert result.exit_code == 0, result.output
        assert "AirPods" in result.output

    def test_decode_json(self):
        result = CliRunner().invoke(cli, ["decode", "--json", GOVEE_HEX])
        assert result.exit_code == 0, result.output
        parsed = json.loads(result.output)
        assert parsed["company_id"] == 0x8803
        assert parsed["raw"] == GOVEE_HEX

    def test_decode_rejects_bad_hex(self):
        result = CliRunner().invoke(cli, ["decode", "zz"])
        assert result.exit_code == 2

    def test_replay_text(self, events_file):
        result = CliRunner().invoke(cli, ["replay", str(events_file)])
        assert result.exit_code == 0, result.output
        assert result.output.count("--- Discovered Device ---") == 2
        assert "Name: ihoment_H6125_1A2B" in result.output
        assert "Advertisements by Vendor" in result.output

    def test_replay_json(self, events_file):
        result = CliRunner().invoke(cli, ["replay", "--json", str(events_file)])
        assert result.exit_code == 0, result.output
        records = [json.loads(line) for line in result.output.splitlines() if line.strip()]
        assert [record["peer_id"] for record in records] == [
            "A4:C1:38:00:11:22",
            "5C:F3:70:AA:BB:CC",
        ]
        assert records[1]["tx_power"] == 12

    def test_replay_bad_record(self, tmp_path):
        path = tmp_path / "bad.jsonl"
        path.write_text('{"peer_id": "A"}\n', encoding="utf-8")
        result = CliRunner().invoke(cli, ["replay", str(path)])
        assert result.exit_code == 1
        assert "line 1" in result.output

    def test_missing_config(self, tmp_path):
        result = CliRunner().invoke(cli, ["--config", str(tmp_path / "missing.toml"), "decode", GOVEE_HEX])
        assert result.exit_code == 1

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "1.0.0" in result.output
