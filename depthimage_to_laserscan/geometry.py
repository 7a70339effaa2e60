"""Ray helpers for deriving a scan's field of view from pinhole intrinsics."""
from __future__ import annotations

import math
from typing import Sequence, Tuple

from .models import CameraIntrinsics

Ray = Tuple[float, float, float]


def principal_row_ray(intrinsics: CameraIntrinsics, u: float) -> Ray:
    """Return the ray through column ``u`` on the principal row, with ``z == 1``."""

    return ((u - intrinsics.cx) / intrinsics.fx, 0.0, 1.0)


def magnitude_of_ray(ray: Sequence[float]) -> float:
    """Euclidean length of ``ray`` taken as a vector from the origin."""

    return math.sqrt(sum(component * component for component in ray))


def angle_between_rays(ray1: Sequence[float], ray2: Sequence[float]) -> float:
    """Angle in radians between two rays, ``acos(a . b / (|a| |b|))``."""

    dot = sum(a * b for a, b in zip(ray1, ray2))
    cosine = dot / (magnitude_of_ray(ray1) * magnitude_of_ray(ray2))
    # Rounding can push the cosine of parallel rays just past 1.
    return math.acos(max(-1.0, min(1.0, cosine)))


def compute_field_of_view(intrinsics: CameraIntrinsics, width: int) -> Tuple[float, float, float]:
    """Return ``(angle_min, angle_max, angle_increment)`` for an image ``width`` wide.

    The left-most column maps to ``angle_max`` and the right-most to
    ``angle_min``, matching the sign convention of the projector's bearings.
    """

    if width < 2:
        raise ValueError(f"At least two columns are needed to span a field of view, got {width}")
    left = principal_row_ray(intrinsics, 0.0)
    center = principal_row_ray(intrinsics, intrinsics.cx)
    right = principal_row_ray(intrinsics, float(width - 1))

    angle_max = angle_between_rays(left, center)
    angle_min = -angle_between_rays(center, right)
    angle_increment = (angle_max - angle_min) / (width - 1)
    return angle_min, angle_max, angle_increment


__all__ = [
    "angle_between_rays",
    "compute_field_of_view",
    "magnitude_of_ray",
    "principal_row_ray",
]
