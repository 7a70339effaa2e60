"""Convert depth camera frames into planar laser scans."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - only for type checking
    from .converter import DepthImageToLaserScan, apply_parameter_updates
    from .depth_traits import DepthEncoding
    from .exceptions import (
        InvalidIntrinsicsError,
        MalformedImageError,
        MalformedScanError,
        ScanConversionError,
        ScanWindowError,
        UnsupportedEncodingError,
    )
    from .geometry import angle_between_rays, compute_field_of_view, magnitude_of_ray
    from .models import CameraIntrinsics, DepthImage, OutputScan, ScanConfig
    from .node import (
        DepthImageToLaserScanNode,
        build_laserscan_msg,
        decode_depth_image,
        intrinsics_from_camera_info,
    )
    from .projector import project_scan, use_point

__all__ = [
    "CameraIntrinsics",
    "DepthEncoding",
    "DepthImage",
    "DepthImageToLaserScan",
    "DepthImageToLaserScanNode",
    "InvalidIntrinsicsError",
    "MalformedImageError",
    "MalformedScanError",
    "OutputScan",
    "ScanConfig",
    "ScanConversionError",
    "ScanWindowError",
    "UnsupportedEncodingError",
    "angle_between_rays",
    "apply_parameter_updates",
    "build_laserscan_msg",
    "compute_field_of_view",
    "decode_depth_image",
    "intrinsics_from_camera_info",
    "magnitude_of_ray",
    "project_scan",
    "use_point",
]

# The node pulls in rclpy and cv_bridge; everything else only needs numpy.
_MODULE_MAP = {
    "CameraIntrinsics": "depthimage_to_laserscan.models",
    "DepthEncoding": "depthimage_to_laserscan.depth_traits",
    "DepthImage": "depthimage_to_laserscan.models",
    "DepthImageToLaserScan": "depthimage_to_laserscan.converter",
    "DepthImageToLaserScanNode": "depthimage_to_laserscan.node",
    "InvalidIntrinsicsError": "depthimage_to_laserscan.exceptions",
    "MalformedImageError": "depthimage_to_laserscan.exceptions",
    "MalformedScanError": "depthimage_to_laserscan.exceptions",
    "OutputScan": "depthimage_to_laserscan.models",
    "ScanConfig": "depthimage_to_laserscan.models",
    "ScanConversionError": "depthimage_to_laserscan.exceptions",
    "ScanWindowError": "depthimage_to_laserscan.exceptions",
    "UnsupportedEncodingError": "depthimage_to_laserscan.exceptions",
    "angle_between_rays": "depthimage_to_laserscan.geometry",
    "apply_parameter_updates": "depthimage_to_laserscan.converter",
    "build_laserscan_msg": "depthimage_to_laserscan.node",
    "compute_field_of_view": "depthimage_to_laserscan.geometry",
    "decode_depth_image": "depthimage_to_laserscan.node",
    "intrinsics_from_camera_info": "depthimage_to_laserscan.node",
    "magnitude_of_ray": "depthimage_to_laserscan.geometry",
    "project_scan": "depthimage_to_laserscan.projector",
    "use_point": "depthimage_to_laserscan.projector",
}


def __getattr__(name: str):  # pragma: no cover - trivial delegation
    module_name = _MODULE_MAP.get(name)
    if module_name is None:
        raise AttributeError(f"module 'depthimage_to_laserscan' has no attribute '{name}'")
    module = import_module(module_name)
    return getattr(module, name)
