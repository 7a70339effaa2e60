from setuptools import find_packages, setup

package_name = "depthimage_to_laserscan"

setup(
    name=package_name,
    version="0.1.0",
    packages=find_packages(include=[package_name, f"{package_name}.*"]),
    install_requires=["setuptools", "opencv-python", "numpy"],
    zip_safe=True,
    maintainer="Psyched Dev",
    maintainer_email="devnull@example.com",
    description="Convert depth camera images into planar LaserScan messages",
    license="Apache-2.0",
    tests_require=["pytest"],
    extras_require={"test": ["pytest"]},
    data_files=[
        ("share/ament_index/resource_index/packages", [f"resource/{package_name}"]),
        (f"share/{package_name}", ["package.xml"]),
        (f"share/{package_name}/launch", ["launch/depthimage_to_laserscan.launch.py"]),
        (f"share/{package_name}/params", ["params/depthimage_to_laserscan.yaml"]),
    ],
    entry_points={
        "console_scripts": [
            "depthimage_to_laserscan = depthimage_to_laserscan.node:main",
        ]
    },
)
