"""Stateful depth image to laser scan converter."""
from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Any, Mapping, Optional

from .exceptions import MalformedImageError, ScanWindowError
from .geometry import compute_field_of_view
from .models import CameraIntrinsics, DepthImage, OutputScan, ScanConfig
from .projector import project_scan

_LOGGER = logging.getLogger(__name__)


class DepthImageToLaserScan:
    """Turn depth frames into planar scans using a persistent configuration.

    Settings change only through the ``set_*`` methods and must not change
    while :meth:`convert_msg` runs. Use one instance per concurrent stream.

    Parameters
    ----------
    config:
        Initial settings. A default :class:`ScanConfig` is used when omitted.
    """

    def __init__(self, config: Optional[ScanConfig] = None) -> None:
        self._config = config if config is not None else ScanConfig()

    @property
    def config(self) -> ScanConfig:
        return self._config

    def set_scan_time(self, scan_time: float) -> None:
        """Set the time between scans in seconds, copied onto every scan."""

        scan_time = float(scan_time)
        if not math.isfinite(scan_time) or scan_time < 0.0:
            raise ValueError(f"scan_time must be a non-negative number of seconds, got {scan_time}")
        self._config.scan_time = scan_time
        _LOGGER.debug("scan_time set to %.4f s", scan_time)

    def set_range_limits(self, range_min: float, range_max: float) -> None:
        """Set the acceptance window for ranges; both limits are exclusive."""

        range_min = float(range_min)
        range_max = float(range_max)
        if not (math.isfinite(range_min) and math.isfinite(range_max)):
            raise ValueError(f"Range limits must be finite, got [{range_min}, {range_max}]")
        if range_min < 0.0 or range_min >= range_max:
            raise ValueError(f"Range limits must satisfy 0 <= range_min < range_max, got [{range_min}, {range_max}]")
        self._config.range_min = range_min
        self._config.range_max = range_max
        _LOGGER.debug("Range limits set to (%.3f, %.3f) m", range_min, range_max)

    def set_scan_height(self, scan_height: int) -> None:
        """Set how many rows around the principal point feed each scan."""

        scan_height = int(scan_height)
        if scan_height < 1:
            raise ValueError(f"scan_height must be at least 1, got {scan_height}")
        self._config.scan_height = scan_height
        _LOGGER.debug("scan_height set to %d rows", scan_height)

    def set_output_frame(self, output_frame_id: str) -> None:
        """Set the frame_id stamped on outgoing scans."""

        self._config.output_frame_id = str(output_frame_id)
        _LOGGER.debug("Output frame set to %s", self._config.output_frame_id)

    def convert_msg(
        self,
        image: DepthImage,
        intrinsics: CameraIntrinsics,
        *,
        stamp: Any = None,
    ) -> OutputScan:
        """Convert one depth frame into a freshly allocated scan.

        The scan spans the camera's horizontal field of view on the principal
        row, has one bin per image column and carries the configured range
        limits, scan time and output frame.

        Raises
        ------
        ScanConversionError
            When the image, the intrinsics or the configured window cannot be
            used. Nothing is allocated in that case.
        """

        config = self._config
        intrinsics.validate()
        if image.width < 2:
            raise MalformedImageError(f"Depth image must be at least two columns wide, got {image.width}")

        half_height = config.scan_height // 2
        if half_height > intrinsics.cy or half_height > image.height - intrinsics.cy:
            raise ScanWindowError(
                f"scan_height ({config.scan_height} pixels) is too large for the image height."
            )

        angle_min, angle_max, angle_increment = compute_field_of_view(intrinsics, image.width)
        scan = OutputScan.allocate(
            angle_min,
            angle_max,
            angle_increment,
            config.range_min,
            config.range_max,
        )
        scan.frame_id = config.output_frame_id
        scan.stamp = stamp
        scan.scan_time = config.scan_time
        scan.time_increment = 0.0

        return project_scan(image, intrinsics, scan, config.scan_height)


def apply_parameter_updates(
    converter: DepthImageToLaserScan,
    updates: Mapping[str, Any],
) -> DepthImageToLaserScan:
    """Return a new converter with ROS parameter ``updates`` applied.

    The updates are staged on a copy of the configuration so that a rejected
    value leaves ``converter`` unchanged. Unknown parameter names are ignored.
    """

    config = converter.config
    staged = DepthImageToLaserScan(replace(config))
    if "range_min" in updates or "range_max" in updates:
        staged.set_range_limits(
            updates.get("range_min", config.range_min),
            updates.get("range_max", config.range_max),
        )
    if "scan_height" in updates:
        staged.set_scan_height(updates["scan_height"])
    if "scan_time" in updates:
        staged.set_scan_time(updates["scan_time"])
    if "output_frame" in updates:
        staged.set_output_frame(updates["output_frame"])
    return staged


__all__ = ["DepthImageToLaserScan", "apply_parameter_updates"]
