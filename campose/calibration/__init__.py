"""
Camera extrinsics.

This package holds the camera pose relative to the world frame and converts
points between world and camera coordinates.

Classes:
    CameraExtrinsics: World-to-camera pose with center-preserving rotation
        and world-frame translation updates.

Standalone Functions:
    camera_center: Camera center -R^T @ t for a world-to-camera pose.

Example Usage:
    >>> from campose.calibration import CameraExtrinsics
    >>>
    >>> extrinsics = CameraExtrinsics.look_at(eye=[0, -5, 1], target=[0, 0, 1])
    >>> extrinsics.world_to_camera_point(0.0, 0.0, 1.0)
    (0.0, 0.0, 5.0)
"""

from .extrinsics import CameraExtrinsics, camera_center

__all__ = [
    "CameraExtrinsics",
    "camera_center",
]
