"""
Tests for the Bleak adapter, the live collector and the JSON-lines replay reader.
"""

import asyncio
import json
import sys
import types
from types import SimpleNamespace

import pytest

from adscope.collectors.ble_collector import (
    BLECollector,
    event_from_bleak,
    join_manufacturer_data,
)
from adscope.collectors.replay import parse_event, read_events
from adscope.core.errors import CollectorError, ReplayError
from adscope.core.report import build_record


def bleak_pair(**overrides):
    device = SimpleNamespace(address="AA:BB:CC:DD:EE:FF", name=overrides.pop("device_name", "Tag"))
    fields = {
        "local_name": None,
        "manufacturer_data": {},
        "service_data": {},
        "service_uuids": [],
        "tx_power": None,
        "rssi": -42,
    }
    fields.update(overrides)
    return device, SimpleNamespace(**fields)


class FakeScanner:
    """Stands in for bleak.BleakScanner; fires one advertisement on start."""

    instances = []

    def __init__(self, detection_callback, scanning_mode="active"):
        self.callback = detection_callback
        self.scanning_mode = scanning_mode
        self.stopped = False
        FakeScanner.instances.append(self)

    async def start(self):
        device, advertisement = bleak_pair(manufacturer_data={0x004C: b"\x10\x05"})
        self.callback(device, advertisement)

    async def stop(self):
        self.stopped = True


@pytest.fixture
def fake_bleak(monkeypatch):
    FakeScanner.instances = []
    module = types.ModuleType("bleak")
    module.BleakScanner = FakeScanner
    monkeypatch.setitem(sys.modules, "bleak", module)
    return module


class TestBleakAdapter:
    """Test suite for converting Bleak callbacks to discovery events."""

    def test_join_manufacturer_data(self):
        assert join_manufacturer_data(0x8803, b"\xec") == b"\x03\x88\xec"

    def test_full_advertisement(self):
        device, advertisement = bleak_pair(
            local_name="Tag",
            manufacturer_data={0x004C: b"\x10\x05"},
            service_uuids=["0000180f-0000-1000-8000-00805f9b34fb"],
            service_data={"0000feaa-0000-1000-8000-00805f9b34fb": b"\x10"},
            tx_power=-8,
        )
        event = event_from_bleak(device, advertisement)

        assert event.peer_id == "AA:BB:CC:DD:EE:FF"
        assert event.name == "Tag"
        assert event.rssi == -42
        assert event.advertisement == {
            "local_name": "Tag",
            "manufacturer_data": b"\x4c\x00\x10\x05",
            "service_uuids": ["0000180f-0000-1000-8000-00805f9b34fb"],
            "service_data": {"0000feaa-0000-1000-8000-00805f9b34fb": b"\x10"},
            "tx_power": -8,
        }

    def test_empty_fields_are_omitted(self):
        event = event_from_bleak(*bleak_pair(device_name=None))
        assert event.advertisement == {}
        assert event.name is None

    def test_extra_manufacturer_entries_kept(self):
        event = event_from_bleak(*bleak_pair(
            manufacturer_data={0x004C: b"\x12", 0x0006: b"\x01"},
        ))
        assert event.advertisement["manufacturer_data"] == b"\x4c\x00\x12"
        assert event.advertisement["manufacturer_data_0x0006"] == b"\x06\x00\x01"


class TestBLECollector:
    """Test suite for the scan loop, using a stand-in Bleak module."""

    def test_scan_delivers_events(self, fake_bleak):
        events = []

        async def run():
            stop = asyncio.Event()
            stop.set()
            return await BLECollector(scanning_mode="passive").scan(events.append, stop_event=stop)

        count = asyncio.run(run())

        assert count == 1
        assert events[0].advertisement["manufacturer_data"] == b"\x4c\x00\x10\x05"
        scanner = FakeScanner.instances[0]
        assert scanner.scanning_mode == "passive"
        assert scanner.stopped

    def test_scan_stops_after_duration(self, fake_bleak):
        events = []
        count = asyncio.run(BLECollector().scan(events.append, duration=0.05))
        assert count == 1
        assert FakeScanner.instances[0].stopped

    def test_missing_bleak(self, monkeypatch):
        monkeypatch.setitem(sys.modules, "bleak", None)
        with pytest.raises(CollectorError, match="pip install bleak"):
            asyncio.run(BLECollector().scan(lambda event: None, duration=0.01))


class TestReplay:
    """Test suite for reading recorded discovery events."""

    def write(self, tmp_path, *lines):
        path = tmp_path / "events.jsonl"
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    def test_parse_event_decodes_hex(self):
        event = parse_event(json.dumps({
            "peer_id": "AA",
            "rssi": -60,
            "advertisement": {
                "manufacturer_data": "0388ec000a0200",
                "manufacturer_data_0x0006": "060001",
                "service_data": {"feaa": "10 00"},
                "tx_power": 4,
            },
        }))

        assert event.name is None
        assert event.advertisement["manufacturer_data"] == bytes.fromhex("0388ec000a0200")
        assert event.advertisement["manufacturer_data_0x0006"] == b"\x06\x00\x01"
        assert event.advertisement["service_data"] == {"feaa": b"\x10\x00"}
        assert event.advertisement["tx_power"] == 4

    def test_read_events_skips_blank_and_comments(self, tmp_path):
        path = self.write(
            tmp_path,
            "# capture",
            json.dumps({"peer_id": "A", "rssi": -40}),
            "",
            json.dumps({"peer_id": "B", "name": "Beacon", "rssi": -70}),
        )
        events = list(read_events(path))
        assert [event.peer_id for event in events] == ["A", "B"]
        assert events[1].name == "Beacon"

    def test_bad_json_reports_line(self, tmp_path):
        path = self.write(tmp_path, json.dumps({"peer_id": "A", "rssi": -40}), "{not json")
        with pytest.raises(ReplayError) as excinfo:
            list(read_events(path))
        assert excinfo.value.line_number == 2

    def test_bad_hex(self, tmp_path):
        path = self.write(tmp_path, json.dumps({
            "peer_id": "A", "rssi": -40, "advertisement": {"manufacturer_data": "zz"},
        }))
        with pytest.raises(ReplayError):
            list(read_events(path))

    def test_null_byte_fields_pass_through(self):
        event = parse_event(json.dumps({
            "peer_id": "A",
            "rssi": -40,
            "advertisement": {"manufacturer_data": None, "service_data": None},
        }))
        assert event.advertisement == {"manufacturer_data": None, "service_data": None}

        record = build_record(event)
        assert record.manufacturer is None
        assert record.service_data == ()
        assert record.other == ()

    def test_non_string_byte_fields_kept_for_other(self, tmp_path):
        path = self.write(tmp_path, json.dumps({
            "peer_id": "A",
            "rssi": -40,
            "advertisement": {
                "manufacturer_data": 1234,
                "manufacturer_data_0x0006": [6, 0, 1],
                "service_data": {"feaa": 7},
            },
        }))
        events = list(read_events(path))
        assert len(events) == 1

        other = dict(build_record(events[0]).other)
        assert other["manufacturer_data"] == "1234"
        assert other["manufacturer_data_0x0006"] == "[6, 0, 1]"
        assert other["service_data"] == "{'feaa': 7}"

    def test_missing_rssi(self, tmp_path):
        path = self.write(tmp_path, json.dumps({"peer_id": "A"}))
        with pytest.raises(ReplayError, match="line 1"):
            list(read_events(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ReplayError):
            list(read_events(tmp_path / "absent.jsonl"))
