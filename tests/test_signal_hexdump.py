"""
Tests for RSSI estimation and the hex dumper.
"""

import pytest

from adscope.analyzers.signal import SIGNAL_BANDS, estimate
from adscope.core.models import DistanceBucket, SignalQuality
from adscope.output.hexdump import dump


class TestSignalEstimator:
    """Test suite for RSSI quality / distance classification."""

    @pytest.mark.parametrize(
        "rssi, quality, distance",
        [
            (-1, SignalQuality.EXCELLENT, DistanceBucket.M_0_2),
            (-30, SignalQuality.EXCELLENT, DistanceBucket.M_0_2),
            (-31, SignalQuality.VERY_GOOD, DistanceBucket.M_2_5),
            (-50, SignalQuality.VERY_GOOD, DistanceBucket.M_2_5),
            (-51, SignalQuality.GOOD, DistanceBucket.M_5_10),
            (-60, SignalQuality.GOOD, DistanceBucket.M_5_10),
            (-61, SignalQuality.FAIR, DistanceBucket.M_10_15),
            (-70, SignalQuality.FAIR, DistanceBucket.M_10_15),
            (-71, SignalQuality.POOR, DistanceBucket.M_15_25),
            (-80, SignalQuality.POOR, DistanceBucket.M_15_25),
            (-81, SignalQuality.VERY_POOR, DistanceBucket.M_25_35),
            (-90, SignalQuality.VERY_POOR, DistanceBucket.M_25_35),
            (-91, SignalQuality.BARELY_DETECTABLE, DistanceBucket.M_35_PLUS),
            (-127, SignalQuality.BARELY_DETECTABLE, DistanceBucket.M_35_PLUS),
            (0, SignalQuality.BARELY_DETECTABLE, DistanceBucket.M_35_PLUS),
            (20, SignalQuality.BARELY_DETECTABLE, DistanceBucket.M_35_PLUS),
        ],
    )
    def test_band_edges(self, rssi, quality, distance):
        result = estimate(rssi)
        assert result.quality is quality
        assert result.distance is distance

    def test_bands_do_not_overlap(self):
        for rssi in range(-200, 51):
            matches = [band for band in SIGNAL_BANDS if band[1] <= rssi <= band[0]]
            assert len(matches) <= 1
            if not matches:
                assert estimate(rssi).quality is SignalQuality.BARELY_DETECTABLE

    def test_labels(self):
        result = estimate(-45)
        assert (result.quality.value, result.distance.value) == ("Very Good", "2-5m")


class TestHexDumper:
    """Test suite for the hex + ASCII dump."""

    def test_empty_input(self):
        assert dump(b"") == ""

    def test_short_line(self):
        expected = "00000000  " + "48 65 6c 6c 6f ".ljust(50) + "|Hello|\n"
        assert dump(b"Hello") == expected

    def test_exactly_sixteen_bytes(self):
        output = dump(bytes(range(16)))
        assert output == (
            "00000000  00 01 02 03 04 05 06 07  08 09 0a 0b 0c 0d 0e 0f  "
            "|................|\n"
        )
        assert output.count("\n") == 1

    def test_second_line_offset(self):
        lines = dump(b"A" * 17).splitlines()
        assert len(lines) == 2
        assert lines[0].endswith("|" + "A" * 16 + "|")
        assert lines[1] == "00000010  " + "41 ".ljust(50) + "|A|"

    def test_non_printable_rendered_as_dot(self):
        line = dump(bytes([0x1F, 0x20, 0x7E, 0x7F]))
        assert line.endswith("|. ~.|\n")

    def test_repeatable(self):
        data = bytes(range(256))
        assert dump(data) == dump(data)
        assert len(dump(data).splitlines()) == 16

    def test_accepts_bytearray(self):
        assert dump(bytearray(b"Hi")) == dump(b"Hi")
