"""
AdScope Signal Estimator
=========================

Maps a single RSSI reading to a coarse quality label and distance
bucket. Readings are classified independently; there is no smoothing
across samples.

The bands are tuned for 2.4 GHz BLE advertising at typical phone and
tag transmit powers. They are a proximity hint, not a ranging result:
the actual distance for a given RSSI varies with TX power, antenna
orientation, and obstructions by tens of dB.

Reference:
    Rappaport, T. S. (2002). Wireless Communications: Principles
    and Practice (2nd ed.). Prentice Hall. Chapter 4.
"""

from __future__ import annotations

from adscope.core.models import DistanceBucket, SignalEstimate, SignalQuality

# (upper, lower, quality, distance); bounds inclusive, strongest first
SIGNAL_BANDS: tuple[tuple[int, int, SignalQuality, DistanceBucket], ...] = (
    (-1, -30, SignalQuality.EXCELLENT, DistanceBucket.M_0_2),
    (-31, -50, SignalQuality.VERY_GOOD, DistanceBucket.M_2_5),
    (-51, -60, SignalQuality.GOOD, DistanceBucket.M_5_10),
    (-61, -70, SignalQuality.FAIR, DistanceBucket.M_10_15),
    (-71, -80, SignalQuality.POOR, DistanceBucket.M_15_25),
    (-81, -90, SignalQuality.VERY_POOR, DistanceBucket.M_25_35),
)

_DEFAULT = SignalEstimate(
    quality=SignalQuality.BARELY_DETECTABLE,
    distance=DistanceBucket.M_35_PLUS,
)


def estimate(rssi: int) -> SignalEstimate:
    """Classify *rssi* (dBm) into a quality / distance pair.

    Values outside every band, including zero and positive readings,
    fall through to "Barely Detectable, 35m+".
    """
    for upper, lower, quality, distance in SIGNAL_BANDS:
        if lower <= rssi <= upper:
            return SignalEstimate(quality=quality, distance=distance)
    return _DEFAULT
