"""Inverse-project a band of depth rows into angularly binned ranges.

Each sampled pixel is lifted to a 3-D point with the pinhole model, its
horizontal bearing selects a bin in the output scan, and :func:`use_point`
decides whether its planar range replaces the value already stored there.
The nearest in-range reading wins, so tall obstacles anywhere in the band
show up in the single horizontal scan.
"""
from __future__ import annotations

import logging
import math

import numpy as np

from .exceptions import MalformedScanError, ScanWindowError
from .models import BIN_EPSILON, CameraIntrinsics, DepthImage, OutputScan

_LOGGER = logging.getLogger(__name__)


def in_range(value: float, range_min: float, range_max: float) -> bool:
    """Return ``True`` for finite values strictly inside ``(range_min, range_max)``."""

    return math.isfinite(value) and range_min < value < range_max


def use_point(new_value: float, old_value: float, range_min: float, range_max: float) -> bool:
    """Decide whether ``new_value`` should replace ``old_value`` in a bin.

    Both range limits are exclusive. An in-range candidate seeds a bin that
    holds no in-range value yet and afterwards only a strictly shorter range
    replaces it. Out-of-range candidates never overwrite anything. A
    non-finite candidate only replaces NaN, and only when it is an infinity,
    since an infinite reading says more than a missing one.
    """

    if not math.isfinite(new_value):
        return math.isnan(old_value) and not math.isnan(new_value)
    if not range_min < new_value < range_max:
        return False
    if not in_range(old_value, range_min, range_max):
        return True
    return new_value < old_value


def window_offset(center_y: float, scan_height: int) -> int:
    """First row of a ``scan_height`` tall band centred on ``center_y``."""

    return int(math.floor(center_y - scan_height / 2.0 + 0.5))


def check_window(image: DepthImage, intrinsics: CameraIntrinsics, scan_height: int) -> int:
    """Return the band's first row, or raise if the band leaves the image."""

    if scan_height < 1:
        raise ScanWindowError(f"scan_height must be at least 1, got {scan_height}")
    offset = window_offset(intrinsics.cy, scan_height)
    if offset < 0 or offset + scan_height > image.height:
        raise ScanWindowError(
            f"scan_height ({scan_height} pixels) centred on row {intrinsics.cy} "
            f"spans rows [{offset}, {offset + scan_height}) outside an image of height {image.height}"
        )
    return offset


def project_scan(
    image: DepthImage,
    intrinsics: CameraIntrinsics,
    scan: OutputScan,
    scan_height: int,
) -> OutputScan:
    """Fill ``scan.ranges`` from the band of ``scan_height`` rows around ``cy``.

    ``scan`` must already carry its angles, range limits and a sentinel-filled
    ``ranges`` of the matching length. All checks run before the first write.
    Only ``scan.ranges`` is modified; the same object is returned.
    """

    bin_count = scan.expected_bin_count()
    if len(scan.ranges) != bin_count:
        raise MalformedScanError(
            f"Scan holds {len(scan.ranges)} ranges but its angular span needs {bin_count}"
        )
    if not (math.isfinite(scan.range_min) and math.isfinite(scan.range_max)):
        raise MalformedScanError(f"Range limits must be finite, got [{scan.range_min}, {scan.range_max}]")
    # A negative minimum would accept the zero candidate of a missing 16UC1 sample.
    if scan.range_min < 0.0 or scan.range_min >= scan.range_max:
        raise MalformedScanError(
            f"Range limits must satisfy 0 <= range_min < range_max, got [{scan.range_min}, {scan.range_max}]"
        )
    intrinsics.validate()
    offset = check_window(image, intrinsics, scan_height)

    encoding = image.encoding
    unit_scaling = encoding.unit_scale()
    constant_x = unit_scaling / intrinsics.fx

    # Bearing and bin depend on the column only.
    lateral = (np.arange(image.width, dtype=np.float64) - intrinsics.cx) * constant_x
    bearings = -np.arctan2(lateral, unit_scaling)
    bins = np.floor((bearings - scan.angle_min) / scan.angle_increment + BIN_EPSILON).astype(np.int64)
    in_view = np.flatnonzero((bins >= 0) & (bins < bin_count))

    depth = image.rows(offset, offset + scan_height)
    raw = depth.astype(np.float64)
    with np.errstate(invalid="ignore"):
        candidates = np.where(
            encoding.valid_mask(depth),
            np.hypot(lateral * raw, raw * unit_scaling),
            raw,
        )

    ranges = scan.ranges
    range_min = scan.range_min
    range_max = scan.range_max
    column_bins = bins[in_view].tolist()
    for row in candidates[:, in_view].tolist():
        for index, r in zip(column_bins, row):
            if use_point(r, ranges[index], range_min, range_max):
                ranges[index] = r

    if _LOGGER.isEnabledFor(logging.DEBUG):
        _LOGGER.debug(
            "Projected rows [%d, %d) onto %d bins (%d columns in view, %d bins populated)",
            offset,
            offset + scan_height,
            bin_count,
            len(in_view),
            sum(1 for value in ranges if in_range(value, range_min, range_max)),
        )
    return scan


__all__ = [
    "check_window",
    "in_range",
    "project_scan",
    "use_point",
    "window_offset",
]
