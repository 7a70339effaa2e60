"""Tests for the ROS 2 wrapper around the converter."""
from __future__ import annotations

import math

import numpy as np
import pytest

rclpy = pytest.importorskip("rclpy")
pytest.importorskip("sensor_msgs")
pytest.importorskip("cv_bridge")
pytest.importorskip("image_geometry")

from cv_bridge import CvBridge
from rclpy.parameter import Parameter
from sensor_msgs.msg import CameraInfo, Image

from depthimage_to_laserscan.depth_traits import DepthEncoding
from depthimage_to_laserscan.exceptions import InvalidIntrinsicsError, UnsupportedEncodingError
from depthimage_to_laserscan.models import CameraIntrinsics, OutputScan
from depthimage_to_laserscan.node import (
    DepthImageToLaserScanNode,
    build_laserscan_msg,
    decode_depth_image,
    intrinsics_from_camera_info,
)


def _camera_info(fx: float, cx: float, cy: float, width: int, height: int) -> CameraInfo:
    info = CameraInfo()
    info.width = width
    info.height = height
    info.k = [fx, 0.0, cx, 0.0, fx, cy, 0.0, 0.0, 1.0]
    info.p = [fx, 0.0, cx, 0.0, 0.0, fx, cy, 0.0, 0.0, 0.0, 1.0, 0.0]
    return info


def test_build_laserscan_msg_copies_every_field() -> None:
    scan = OutputScan.allocate(-0.5, 0.5, 0.5, 0.45, 10.0)
    scan.ranges[1] = 2.5
    scan.frame_id = "camera_depth_frame"
    scan.scan_time = 0.033

    msg = build_laserscan_msg(scan)

    assert msg.header.frame_id == "camera_depth_frame"
    assert msg.angle_min == pytest.approx(-0.5)
    assert msg.angle_max == pytest.approx(0.5)
    assert msg.angle_increment == pytest.approx(0.5)
    assert msg.range_min == pytest.approx(0.45)
    assert msg.range_max == pytest.approx(10.0)
    assert msg.scan_time == pytest.approx(0.033)
    assert msg.time_increment == 0.0
    assert len(msg.ranges) == 3
    assert math.isinf(msg.ranges[0])
    assert msg.ranges[1] == pytest.approx(2.5)


def test_decode_drops_row_padding() -> None:
    padded = np.array([[np.nan, 1.0, 2.0, -1.0], [3.0, 4.0, 5.0, -1.0]], dtype="<f4")
    msg = Image(height=2, width=3, encoding="32FC1", is_bigendian=0, step=16, data=padded.tobytes())

    image = decode_depth_image(CvBridge(), msg)

    assert image.encoding is DepthEncoding.METERS
    assert (image.width, image.height) == (3, 2)
    assert image.rows(1, 2).tolist() == [[3.0, 4.0, 5.0]]


def test_decode_reads_big_endian_millimeters() -> None:
    samples = np.array([[1000, 2000], [3000, 0]], dtype=">u2")
    msg = Image(height=2, width=2, encoding="16UC1", is_bigendian=1, step=4, data=samples.tobytes())

    image = decode_depth_image(CvBridge(), msg)

    assert image.encoding is DepthEncoding.MILLIMETERS
    assert image.rows(0, 2).tolist() == [[1000, 2000], [3000, 0]]


def test_decode_rejects_colour_images() -> None:
    msg = Image(height=1, width=2, encoding="bgr8", is_bigendian=0, step=6, data=bytes(6))

    with pytest.raises(UnsupportedEncodingError, match="bgr8"):
        decode_depth_image(CvBridge(), msg)


def test_intrinsics_are_read_from_camera_info() -> None:
    intrinsics = intrinsics_from_camera_info(_camera_info(fx=525.0, cx=319.5, cy=239.5, width=640, height=480))

    assert intrinsics == CameraIntrinsics(fx=525.0, fy=525.0, cx=319.5, cy=239.5)


def test_uncalibrated_camera_info_is_rejected() -> None:
    with pytest.raises(InvalidIntrinsicsError):
        intrinsics_from_camera_info(CameraInfo())


@pytest.fixture
def node():
    rclpy.init()
    instance = DepthImageToLaserScanNode()
    try:
        yield instance
    finally:
        instance.destroy_node()
        rclpy.shutdown()


def test_node_applies_valid_parameter_updates(node: DepthImageToLaserScanNode) -> None:
    results = node.set_parameters([Parameter("scan_height", value=3), Parameter("output_frame", value="laser")])

    assert all(result.successful for result in results)
    assert node._converter.config.scan_height == 3
    assert node._converter.config.output_frame_id == "laser"


def test_node_rejects_inverted_range_limits(node: DepthImageToLaserScanNode) -> None:
    results = node.set_parameters([Parameter("range_min", value=50.0)])

    assert not results[0].successful
    assert node._converter.config.range_min == pytest.approx(0.45)


def test_depth_frames_are_dropped_without_camera_info(node: DepthImageToLaserScanNode) -> None:
    published = []
    node._scan_pub.publish = published.append  # type: ignore[method-assign]

    node._depth_callback(Image(width=2, height=1, step=8, encoding="32FC1", data=bytes(8)))

    assert published == []


def test_depth_frame_is_published_as_a_scan(node: DepthImageToLaserScanNode) -> None:
    published = []
    node._scan_pub.publish = published.append  # type: ignore[method-assign]
    depth = np.full((4, 8), 2.0, dtype="<f4")
    msg = Image(height=4, width=8, encoding="32FC1", is_bigendian=0, step=32, data=depth.tobytes())
    msg.header.frame_id = "camera_depth_optical_frame"

    node._info_callback(_camera_info(fx=10.0, cx=3.5, cy=2.0, width=8, height=4))
    node._depth_callback(msg)

    assert len(published) == 1
    scan = published[0]
    assert scan.header.frame_id == "camera_depth_frame"
    assert len(scan.ranges) == 8
    assert min(scan.ranges) >= 2.0
