"""ROS 2 node that republishes depth frames as LaserScan messages."""
from __future__ import annotations

from typing import Optional

import rclpy
from cv_bridge import CvBridge, CvBridgeError
from image_geometry import PinholeCameraModel
from rcl_interfaces.msg import SetParametersResult
from rclpy.node import Node
from rclpy.qos import QoSPresetProfiles
from sensor_msgs.msg import CameraInfo, Image, LaserScan

from .converter import DepthImageToLaserScan, apply_parameter_updates
from .depth_traits import DepthEncoding
from .exceptions import InvalidIntrinsicsError, MalformedImageError, ScanConversionError
from .models import CameraIntrinsics, DepthImage, OutputScan, ScanConfig


def build_laserscan_msg(scan: OutputScan) -> LaserScan:
    """Convert an :class:`OutputScan` into a ``sensor_msgs/LaserScan``."""

    msg = LaserScan()
    if scan.stamp is not None:
        msg.header.stamp = scan.stamp
    msg.header.frame_id = scan.frame_id
    msg.angle_min = float(scan.angle_min)
    msg.angle_max = float(scan.angle_max)
    msg.angle_increment = float(scan.angle_increment)
    msg.time_increment = float(scan.time_increment)
    msg.scan_time = float(scan.scan_time)
    msg.range_min = float(scan.range_min)
    msg.range_max = float(scan.range_max)
    msg.ranges = [float(value) for value in scan.ranges]
    return msg


def decode_depth_image(bridge: CvBridge, msg: Image) -> DepthImage:
    """Decode a 16UC1 or 32FC1 ``sensor_msgs/Image`` into a :class:`DepthImage`.

    The encoding is checked before the buffer is touched. ``cv_bridge`` takes
    care of row padding and byte order.
    """

    encoding = DepthEncoding.from_ros(msg.encoding)
    try:
        depth = bridge.imgmsg_to_cv2(msg, desired_encoding="passthrough")
    except (CvBridgeError, TypeError) as exc:
        raise MalformedImageError(f"Could not decode {msg.width}x{msg.height} depth image: {exc}") from exc
    return DepthImage.from_array(depth, encoding)


def intrinsics_from_camera_info(msg: CameraInfo) -> CameraIntrinsics:
    """Read pinhole intrinsics through ``image_geometry``."""

    model = PinholeCameraModel()
    model.fromCameraInfo(msg)
    intrinsics = CameraIntrinsics.from_camera_model(model)
    intrinsics.validate()
    return intrinsics


class DepthImageToLaserScanNode(Node):
    """Subscribe to a depth camera and publish a synthesized planar scan."""

    def __init__(self) -> None:
        super().__init__("depthimage_to_laserscan")
        defaults = ScanConfig()
        self._converter = DepthImageToLaserScan()
        self._converter.set_scan_time(self.declare_parameter("scan_time", defaults.scan_time).value)
        self._converter.set_range_limits(
            self.declare_parameter("range_min", defaults.range_min).value,
            self.declare_parameter("range_max", defaults.range_max).value,
        )
        self._converter.set_scan_height(self.declare_parameter("scan_height", defaults.scan_height).value)
        self._converter.set_output_frame(
            self.declare_parameter("output_frame", defaults.output_frame_id).value
        )
        self.add_on_set_parameters_callback(self._handle_parameter_update)

        self._bridge = CvBridge()
        self._intrinsics: Optional[CameraIntrinsics] = None

        qos = QoSPresetProfiles.SENSOR_DATA.value
        self._scan_pub = self.create_publisher(LaserScan, "scan", qos)
        self.create_subscription(CameraInfo, "depth_camera_info", self._info_callback, qos)
        self.create_subscription(Image, "depth", self._depth_callback, qos)

        config = self._converter.config
        self.get_logger().info(
            f"Depth to laserscan initialised (scan_height={config.scan_height}, "
            f"range=({config.range_min}, {config.range_max}), frame={config.output_frame_id})"
        )

    # Parameter helpers -------------------------------------------------
    def _handle_parameter_update(self, params) -> SetParametersResult:
        try:
            self._converter = apply_parameter_updates(
                self._converter, {param.name: param.value for param in params}
            )
        except (TypeError, ValueError) as exc:
            self.get_logger().warning(f"Rejected parameter update: {exc}")
            return SetParametersResult(successful=False, reason=str(exc))
        return SetParametersResult(successful=True)

    # Callbacks ---------------------------------------------------------
    def _info_callback(self, msg: CameraInfo) -> None:
        try:
            self._intrinsics = intrinsics_from_camera_info(msg)
        except InvalidIntrinsicsError as exc:
            self.get_logger().warning(f"Ignoring camera info: {exc}")

    def _depth_callback(self, msg: Image) -> None:
        if self._intrinsics is None:
            self.get_logger().warning("No camera info received yet; dropping depth frame.")
            return
        try:
            image = decode_depth_image(self._bridge, msg)
            scan = self._converter.convert_msg(image, self._intrinsics, stamp=msg.header.stamp)
        except ScanConversionError as exc:
            self.get_logger().error(f"Could not convert depth image: {exc}")
            return
        self._scan_pub.publish(build_laserscan_msg(scan))


def main(args: Optional[list[str]] = None) -> None:
    rclpy.init(args=args)
    node = DepthImageToLaserScanNode()
    try:
        rclpy.spin(node)
    except KeyboardInterrupt:  # pragma: no cover - manual shutdown
        pass
    finally:
        node.destroy_node()
        rclpy.shutdown()


if __name__ == "__main__":  # pragma: no cover - script entry point
    main()
