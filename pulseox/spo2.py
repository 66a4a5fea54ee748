"""Heart-rate and blood-oxygen estimation from red and infrared PPG samples.

The estimator inverts the infrared signal so that its valleys become peaks,
smooths it, finds the peaks and derives the heart rate from the mean peak
interval. SpO2 comes from the ratio of the AC/DC components of the red and
infrared signals between consecutive valleys, looked up in a calibration
table. Integer arithmetic follows the 32-bit fixed-point original.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

FS = 25
"""Sampling frequency in samples per second."""

BUFFER_SIZE = FS * 4
"""Number of samples analysed at a time (four seconds)."""

MA4_SIZE = 4
"""Width of the moving-average filter."""

MAX_PEAKS = 15
"""Most peaks the detector reports."""

INVALID = -999
"""Value reported for a measurement that could not be computed."""

_MIN_THRESHOLD = 30
_MAX_THRESHOLD = 60
_PEAK_DISTANCE = 4
_MAX_RATIOS = 5

# Approximates -45.060*r*r + 30.354*r + 94.845 for ratio r (scaled by 100).
SPO2_TABLE: tuple[int, ...] = (
    95, 95, 95, 96, 96, 96, 97, 97, 97, 97, 97, 98, 98, 98, 98, 98, 99, 99, 99, 99,
    99, 99, 99, 99, 100, 100, 100, 100, 100, 100, 100, 100, 100, 100, 100, 100, 100, 100, 100, 100,
    100, 100, 100, 100, 99, 99, 99, 99, 99, 99, 99, 99, 98, 98, 98, 98, 98, 98, 97, 97,
    97, 97, 96, 96, 96, 96, 95, 95, 95, 94, 94, 94, 93, 93, 93, 92, 92, 92, 91, 91,
    90, 90, 89, 89, 89, 88, 88, 87, 87, 86, 86, 85, 85, 84, 84, 83, 82, 82, 81, 81,
    80, 80, 79, 78, 78, 77, 76, 76, 75, 74, 74, 73, 72, 72, 71, 70, 69, 69, 68, 67,
    66, 66, 65, 64, 63, 62, 62, 61, 60, 59, 58, 57, 56, 56, 55, 54, 53, 52, 51, 50,
    49, 48, 47, 46, 45, 44, 43, 42, 41, 40, 39, 38, 37, 36, 35, 34, 33, 31, 30, 29,
    28, 27, 26, 25, 23, 22, 21, 20, 19, 17, 16, 15, 14, 12, 11, 10, 9, 7, 6, 5,
    3, 2, 1, 0,
)


@dataclass(frozen=True)
class Reading:
    """Result of one estimation: each value comes with a validity flag."""

    spo2: int
    spo2_valid: bool
    heart_rate: int
    heart_rate_valid: bool


def _int32(value: int) -> int:
    """Wrap an integer to a signed 32-bit value."""
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b > 0) else -quotient


def sort_indices_descend(values: Sequence[int], indices: Sequence[int]) -> list[int]:
    """Return the indices ordered by descending value; ties keep their order."""
    return sorted(indices, key=lambda index: -values[index])


def peaks_above_min_height(values: Sequence[int], min_height: int) -> list[int]:
    """Locate up to MAX_PEAKS peaks higher than ``min_height``.

    A flat-topped peak is reported at its left edge. A plateau that runs
    to the end of the data is not a peak.
    """
    size = len(values)
    peaks: list[int] = []
    i = 1
    while i < size - 1:
        if values[i] > min_height and values[i] > values[i - 1]:
            width = 1
            while i + width < size and values[i] == values[i + width]:
                width += 1
            if i + width < size and values[i] > values[i + width] and len(peaks) < MAX_PEAKS:
                peaks.append(i)
                i += width + 1
            else:
                i += width
        else:
            i += 1
    return peaks


def remove_close_peaks(
    locations: Sequence[int], values: Sequence[int], min_distance: int
) -> list[int]:
    """Drop peaks closer than ``min_distance`` to a larger one.

    Peaks are considered from largest to smallest; a peak within
    ``min_distance`` of index -1 is also dropped. The survivors are returned
    in ascending order of location.
    """
    locs = sort_indices_descend(values, locations)
    i = -1
    while i < len(locs):
        anchor = -1 if i == -1 else locs[i]
        locs = locs[: i + 1] + [
            loc for loc in locs[i + 1:] if abs(loc - anchor) > min_distance
        ]
        i += 1
    return sorted(locs)


def find_peaks(
    values: Sequence[int], min_height: int, min_distance: int, max_num: int
) -> list[int]:
    """Find at most ``max_num`` peaks above ``min_height``, ``min_distance`` apart."""
    peaks = peaks_above_min_height(values, min_height)
    peaks = remove_close_peaks(peaks, values, min_distance)
    return peaks[:max_num]


def heart_rate_and_oxygen_saturation(ir: Sequence[int], red: Sequence[int]) -> Reading:
    """Estimate heart rate (beats per minute) and SpO2 (percent).

    ``ir`` and ``red`` must each hold BUFFER_SIZE non-negative samples.
    """
    ir = list(ir)
    red = list(red)
    if len(ir) != BUFFER_SIZE or len(red) != BUFFER_SIZE:
        raise ValueError(
            f"expected {BUFFER_SIZE} infrared and red samples, "
            f"got {len(ir)} and {len(red)}"
        )
    if any(v < 0 for v in ir) or any(v < 0 for v in red):
        raise ValueError("samples must not be negative")

    # Remove the DC level and invert, so valleys become peaks.
    ir_mean = (sum(ir) & 0xFFFFFFFF) // len(ir)
    x = [_int32(ir_mean - v) for v in ir]

    for k in range(BUFFER_SIZE - MA4_SIZE):
        x[k] = _trunc_div(x[k] + x[k + 1] + x[k + 2] + x[k + 3], 4)

    threshold = _trunc_div(sum(x), BUFFER_SIZE)
    threshold = min(max(threshold, _MIN_THRESHOLD), _MAX_THRESHOLD)

    valleys = find_peaks(x, threshold, _PEAK_DISTANCE, MAX_PEAKS)

    if len(valleys) >= 2:
        interval_sum = sum(b - a for a, b in zip(valleys, valleys[1:]))
        interval = interval_sum // (len(valleys) - 1)
        heart_rate = (FS * 60) // interval
        heart_rate_valid = True
    else:
        heart_rate = INVALID
        heart_rate_valid = False

    x = ir
    y = red

    if any(loc > BUFFER_SIZE for loc in valleys):
        return Reading(INVALID, False, heart_rate, heart_rate_valid)

    ratios: list[int] = []
    for start, end in zip(valleys, valleys[1:]):
        span = end - start
        if span <= 3:
            continue
        x_dc_idx = max(range(start, end), key=x.__getitem__)
        y_dc_idx = max(range(start, end), key=y.__getitem__)
        x_dc_max = x[x_dc_idx]
        y_dc_max = y[y_dc_idx]

        y_ac = _int32((y[end] - y[start]) * (y_dc_idx - start))
        y_ac = y[start] + _trunc_div(y_ac, span)
        y_ac = y[y_dc_idx] - y_ac

        x_ac = _int32((x[end] - x[start]) * (x_dc_idx - start))
        x_ac = x[start] + _trunc_div(x_ac, span)
        x_ac = x[y_dc_idx] - x_ac

        numerator = _int32(y_ac * x_dc_max) >> 7
        denominator = _int32(x_ac * y_dc_max) >> 7

        if denominator > 0 and len(ratios) < _MAX_RATIOS and numerator != 0:
            ratios.append(_trunc_div(_int32(numerator * 100), denominator))

    count = len(ratios)
    padded = sorted(ratios) + [0] * (_MAX_RATIOS - count)
    middle = count // 2
    if middle > 1:
        ratio = _trunc_div(padded[middle - 1] + padded[middle], 2)
    else:
        ratio = padded[middle]

    if 2 < ratio < len(SPO2_TABLE):
        return Reading(SPO2_TABLE[ratio], True, heart_rate, heart_rate_valid)
    return Reading(INVALID, False, heart_rate, heart_rate_valid)