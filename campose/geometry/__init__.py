"""
Geometry primitives for rigid transforms and rotations.

Classes:
    Transform3D: Rigid body transformation (rotation + translation).

Functions:
    euler_angles_to_matrix: Fixed-axis X-Y-Z Euler angles to rotation matrix.
    matrix_to_euler_angles: Rotation matrix back to Euler angles.
    rotation_x, rotation_y, rotation_z: Elementary axis rotations.
    rodrigues_to_matrix, matrix_to_rodrigues: OpenCV axis-angle conversion.
    validate_rotation_matrix: Proper-rotation check.
"""

from .transform import Transform3D
from .rotations import (
    euler_angles_to_matrix,
    matrix_to_euler_angles,
    matrix_to_rodrigues,
    rodrigues_to_matrix,
    rotation_x,
    rotation_y,
    rotation_z,
    validate_rotation_matrix,
)

__all__ = [
    "Transform3D",
    "euler_angles_to_matrix",
    "matrix_to_euler_angles",
    "matrix_to_rodrigues",
    "rodrigues_to_matrix",
    "rotation_x",
    "rotation_y",
    "rotation_z",
    "validate_rotation_matrix",
]
