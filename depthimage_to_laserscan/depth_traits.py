"""Per-encoding conversion and validity rules for raw depth samples."""
from __future__ import annotations

import math
from enum import Enum
from typing import Any

import numpy as np

from .exceptions import UnsupportedEncodingError

MILLIMETERS_TO_METERS = 0.001


class DepthEncoding(Enum):
    """Closed set of depth pixel formats understood by the projector.

    ``MILLIMETERS`` stores distances as unsigned 16-bit millimetres and uses
    zero for "no return". ``METERS`` stores 32-bit float metres and uses NaN
    or infinity for missing readings.
    """

    MILLIMETERS = "16UC1"
    METERS = "32FC1"

    @property
    def ros_encoding(self) -> str:
        return self.value

    @property
    def dtype(self) -> np.dtype:
        if self is DepthEncoding.MILLIMETERS:
            return np.dtype(np.uint16)
        return np.dtype(np.float32)

    @classmethod
    def from_ros(cls, encoding: str) -> "DepthEncoding":
        """Return the variant for a ``sensor_msgs/Image`` encoding tag."""

        tag = (encoding or "").strip().upper()
        for member in cls:
            if member.value == tag:
                return member
        raise UnsupportedEncodingError(encoding)

    @classmethod
    def from_dtype(cls, dtype: Any) -> "DepthEncoding":
        """Return the variant whose sample type matches ``dtype``."""

        resolved = np.dtype(dtype)
        for member in cls:
            if member.dtype == resolved.newbyteorder("="):
                return member
        raise UnsupportedEncodingError(str(resolved))

    def to_meters(self, raw: float) -> float:
        if self is DepthEncoding.MILLIMETERS:
            return float(raw) * MILLIMETERS_TO_METERS
        return float(raw)

    def is_valid(self, raw: float) -> bool:
        if self is DepthEncoding.MILLIMETERS:
            return bool(raw != 0)
        return math.isfinite(raw)

    def unit_scale(self) -> float:
        """Return ``to_meters(1)``, the multiplier folded into the projection."""

        return self.to_meters(1)

    def valid_mask(self, samples: np.ndarray) -> np.ndarray:
        """Vectorised :meth:`is_valid` over an array of raw samples."""

        if self is DepthEncoding.MILLIMETERS:
            return samples != 0
        return np.isfinite(samples)


__all__ = ["DepthEncoding", "MILLIMETERS_TO_METERS"]
