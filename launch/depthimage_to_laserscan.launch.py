"""Launch the depth image to laser scan converter."""
from launch import LaunchDescription
from launch.actions import DeclareLaunchArgument
from launch.substitutions import LaunchConfiguration, PathJoinSubstitution
from launch_ros.actions import Node
from launch_ros.substitutions import FindPackageShare


def generate_launch_description() -> LaunchDescription:
    default_params = PathJoinSubstitution(
        [FindPackageShare("depthimage_to_laserscan"), "params", "depthimage_to_laserscan.yaml"]
    )
    params_file = LaunchConfiguration("params_file", default=default_params)
    depth_topic = LaunchConfiguration("depth_topic", default="/camera/depth/image_raw")
    camera_info_topic = LaunchConfiguration("depth_camera_info_topic", default="/camera/depth/camera_info")
    scan_topic = LaunchConfiguration("scan_topic", default="/scan")
    scan_time = LaunchConfiguration("scan_time", default="0.033")
    scan_height = LaunchConfiguration("scan_height", default="1")
    range_min = LaunchConfiguration("range_min", default="0.45")
    range_max = LaunchConfiguration("range_max", default="10.0")
    output_frame = LaunchConfiguration("output_frame", default="camera_depth_frame")

    return LaunchDescription(
        [
            DeclareLaunchArgument("params_file", default_value=default_params),
            DeclareLaunchArgument("depth_topic", default_value=depth_topic),
            DeclareLaunchArgument("depth_camera_info_topic", default_value=camera_info_topic),
            DeclareLaunchArgument("scan_topic", default_value=scan_topic),
            DeclareLaunchArgument("scan_time", default_value=scan_time),
            DeclareLaunchArgument("scan_height", default_value=scan_height),
            DeclareLaunchArgument("range_min", default_value=range_min),
            DeclareLaunchArgument("range_max", default_value=range_max),
            DeclareLaunchArgument("output_frame", default_value=output_frame),
            Node(
                package="depthimage_to_laserscan",
                executable="depthimage_to_laserscan",
                name="depthimage_to_laserscan",
                # Launch arguments override the parameter file.
                parameters=[
                    params_file,
                    {
                        "scan_time": scan_time,
                        "scan_height": scan_height,
                        "range_min": range_min,
                        "range_max": range_max,
                        "output_frame": output_frame,
                    },
                ],
                remappings=[
                    ("depth", depth_topic),
                    ("depth_camera_info", camera_info_topic),
                    ("scan", scan_topic),
                ],
                output="screen",
            ),
        ]
    )
