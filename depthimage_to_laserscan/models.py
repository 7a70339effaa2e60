"""Data containers shared by the projector, the converter and the node."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, List, Optional

import numpy as np

from .depth_traits import DepthEncoding
from .exceptions import InvalidIntrinsicsError, MalformedImageError, MalformedScanError

# Absorbs floating point noise when the angular span is an exact multiple of
# the increment.
BIN_EPSILON = 1e-9

NO_READING = math.inf


@dataclass(frozen=True, eq=False)
class DepthImage:
    """Read-only depth frame of raw samples in native byte order.

    ``depth`` is a ``(height, width)`` array whose dtype matches ``encoding``.
    ROS images are decoded with ``cv_bridge`` before they get here.
    """

    depth: np.ndarray
    encoding: DepthEncoding

    def __post_init__(self) -> None:
        if self.depth.ndim != 2:
            raise MalformedImageError(f"Depth array must be 2-D, got shape {self.depth.shape}")
        if self.depth.dtype != self.encoding.dtype:
            raise MalformedImageError(
                f"{self.encoding.ros_encoding} samples must be {self.encoding.dtype}, got {self.depth.dtype}"
            )

    @property
    def height(self) -> int:
        return int(self.depth.shape[0])

    @property
    def width(self) -> int:
        return int(self.depth.shape[1])

    @classmethod
    def from_array(cls, array: Any, encoding: Optional[DepthEncoding] = None) -> "DepthImage":
        """Copy a 2-D array into a frame. The encoding is inferred from the dtype when omitted.

        Big-endian input is converted to native byte order.
        """

        array = np.asarray(array)
        if array.ndim != 2:
            raise MalformedImageError(f"Depth array must be 2-D, got shape {array.shape}")
        if encoding is None:
            encoding = DepthEncoding.from_dtype(array.dtype)
        samples = np.array(array, dtype=encoding.dtype, order="C")
        samples.flags.writeable = False
        return cls(depth=samples, encoding=encoding)

    def rows(self, start: int, stop: int) -> np.ndarray:
        """Return rows ``[start, stop)`` as a ``(stop - start, width)`` view."""

        if start < 0 or stop > self.height or start > stop:
            raise MalformedImageError(f"Rows [{start}, {stop}) fall outside an image of height {self.height}")
        return self.depth[start:stop]


@dataclass(frozen=True)
class CameraIntrinsics:
    """Pinhole intrinsics in pixels."""

    fx: float
    fy: float
    cx: float
    cy: float

    @classmethod
    def from_camera_model(cls, model: Any) -> "CameraIntrinsics":
        """Read intrinsics from an ``image_geometry.PinholeCameraModel``.

        The model takes them from the CameraInfo projection matrix.
        """

        return cls(
            fx=float(model.fx()),
            fy=float(model.fy()),
            cx=float(model.cx()),
            cy=float(model.cy()),
        )

    def validate(self) -> None:
        if not math.isfinite(self.fx) or self.fx == 0.0:
            raise InvalidIntrinsicsError(f"Focal length fx must be finite and non-zero, got {self.fx}")
        if not (math.isfinite(self.cx) and math.isfinite(self.cy)):
            raise InvalidIntrinsicsError(f"Principal point must be finite, got ({self.cx}, {self.cy})")


@dataclass(slots=True)
class ScanConfig:
    """Converter settings reused across frames."""

    scan_time: float = 0.033
    range_min: float = 0.45
    range_max: float = 10.0
    scan_height: int = 1
    output_frame_id: str = "camera_depth_frame"


@dataclass
class OutputScan:
    """Angularly binned ranges plus the fields of an outgoing LaserScan.

    The projector reads the angles and range limits and only ever writes
    ``ranges``. ``frame_id``, ``stamp``, ``scan_time`` and ``time_increment``
    belong to message assembly.
    """

    angle_min: float
    angle_max: float
    angle_increment: float
    range_min: float
    range_max: float
    ranges: List[float] = field(default_factory=list)
    frame_id: str = ""
    stamp: Any = None
    scan_time: float = 0.0
    time_increment: float = 0.0

    @classmethod
    def allocate(
        cls,
        angle_min: float,
        angle_max: float,
        angle_increment: float,
        range_min: float,
        range_max: float,
        *,
        fill: float = NO_READING,
    ) -> "OutputScan":
        """Return a scan whose ranges are sized for the span and filled with ``fill``."""

        scan = cls(
            angle_min=angle_min,
            angle_max=angle_max,
            angle_increment=angle_increment,
            range_min=range_min,
            range_max=range_max,
        )
        scan.reset(fill)
        return scan

    def expected_bin_count(self) -> int:
        if not math.isfinite(self.angle_increment) or self.angle_increment <= 0.0:
            raise MalformedScanError(f"angle_increment must be positive and finite, got {self.angle_increment}")
        span = (self.angle_max - self.angle_min) / self.angle_increment
        if not math.isfinite(span) or span < 0.0:
            raise MalformedScanError(
                f"Angular span [{self.angle_min}, {self.angle_max}] is not usable with increment {self.angle_increment}"
            )
        return int(math.floor(span + BIN_EPSILON)) + 1

    def reset(self, fill: float = NO_READING) -> None:
        """Resize ``ranges`` to the angular span and refill it with ``fill``."""

        self.ranges = [fill] * self.expected_bin_count()


__all__ = [
    "BIN_EPSILON",
    "CameraIntrinsics",
    "DepthImage",
    "NO_READING",
    "OutputScan",
    "ScanConfig",
]
