"""
Rotation Matrix Utilities Module.

Helpers for building and inspecting 3x3 rotation matrices.

Euler Angle Convention:
=======================

All Euler angles are in radians and follow the fixed-axis (extrinsic) X-Y-Z
convention:

    R = Rz(psi) @ Ry(theta) @ Rx(phi)

i.e. a vector is rotated first by phi about X, then by theta about the
original Y axis, then by psi about the original Z axis.

Elementary Rotations:
---------------------

    Rx(a) = | 1   0    0  |    Ry(a) = |  ca  0  sa |    Rz(a) = | ca -sa  0 |
            | 0  ca  -sa  |            |  0   1  0  |            | sa  ca  0 |
            | 0  sa   ca  |            | -sa  0  ca |            | 0   0   1 |

Axis-Angle (Rodrigues):
-----------------------
OpenCV represents rotations as a 3-vector whose direction is the rotation
axis and whose norm is the angle. cv2.Rodrigues converts in both directions.
"""

from typing import Tuple

import cv2
import numpy as np
from scipy.spatial.transform import Rotation


def rotation_x(angle: float) -> np.ndarray:
    """Rotation by `angle` radians about the X axis."""
    c, s = np.cos(angle), np.sin(angle)
    return np.array([
        [1.0, 0.0, 0.0],
        [0.0, c, -s],
        [0.0, s, c],
    ])


def rotation_y(angle: float) -> np.ndarray:
    """Rotation by `angle` radians about the Y axis."""
    c, s = np.cos(angle), np.sin(angle)
    return np.array([
        [c, 0.0, s],
        [0.0, 1.0, 0.0],
        [-s, 0.0, c],
    ])


def rotation_z(angle: float) -> np.ndarray:
    """Rotation by `angle` radians about the Z axis."""
    c, s = np.cos(angle), np.sin(angle)
    return np.array([
        [c, -s, 0.0],
        [s, c, 0.0],
        [0.0, 0.0, 1.0],
    ])


def euler_angles_to_matrix(phi: float, theta: float, psi: float) -> np.ndarray:
    """
    Convert Euler angles to a rotation matrix.

    Args:
        phi: Rotation about X in radians.
        theta: Rotation about Y in radians.
        psi: Rotation about Z in radians.

    Returns:
        np.ndarray: 3x3 rotation matrix Rz(psi) @ Ry(theta) @ Rx(phi).

    Example:
        >>> R = euler_angles_to_matrix(0.0, 0.0, np.pi / 2)
        >>> np.round(R @ np.array([1.0, 0.0, 0.0]), 6)
        array([0., 1., 0.])
    """
    return rotation_z(psi) @ rotation_y(theta) @ rotation_x(phi)


def matrix_to_euler_angles(R: np.ndarray) -> Tuple[float, float, float]:
    """
    Recover Euler angles from a rotation matrix.

    Inverse of euler_angles_to_matrix(), using scipy's extrinsic "xyz"
    sequence. theta is returned in [-pi/2, pi/2], phi and psi in [-pi, pi].

    At gimbal lock (theta = +-pi/2) only a combination of phi and psi is
    observable. scipy then emits a UserWarning and sets one of the two
    angles to zero; the returned angles still reproduce R.

    Args:
        R: 3x3 rotation matrix.

    Returns:
        Tuple[float, float, float]: (phi, theta, psi) in radians.
    """
    R = np.asarray(R, dtype=np.float64)
    if R.shape != (3, 3):
        raise ValueError(f"R must be 3x3, got {R.shape}")

    phi, theta, psi = Rotation.from_matrix(R).as_euler("xyz")
    return float(phi), float(theta), float(psi)


def rodrigues_to_matrix(rvec: np.ndarray) -> np.ndarray:
    """
    Convert an axis-angle (Rodrigues) vector to a rotation matrix.

    Args:
        rvec: Rotation vector (3,), (3, 1) or (1, 3).

    Returns:
        np.ndarray: 3x3 rotation matrix.
    """
    rvec = np.asarray(rvec, dtype=np.float64).reshape(-1)
    if rvec.shape != (3,):
        raise ValueError(f"rvec must have 3 elements, got {rvec.shape}")
    R, _ = cv2.Rodrigues(rvec.reshape(3, 1))
    return R


def matrix_to_rodrigues(R: np.ndarray) -> np.ndarray:
    """
    Convert a rotation matrix to an axis-angle (Rodrigues) vector.

    Args:
        R: 3x3 rotation matrix.

    Returns:
        np.ndarray: Rotation vector (3,).
    """
    R = np.asarray(R, dtype=np.float64)
    if R.shape != (3, 3):
        raise ValueError(f"R must be 3x3, got {R.shape}")
    rvec, _ = cv2.Rodrigues(R)
    return rvec.reshape(3)


def validate_rotation_matrix(R: np.ndarray, atol: float = 1e-6) -> bool:
    """
    Check that R is a proper rotation matrix.

    A proper rotation is orthonormal (R^T @ R = I) with determinant +1.
    Reflections (det = -1) are rejected.

    Args:
        R: Candidate matrix.
        atol: Absolute tolerance for both checks.

    Returns:
        bool: True if R is a 3x3 proper rotation within tolerance.
    """
    R = np.asarray(R, dtype=np.float64)
    if R.shape != (3, 3) or not np.all(np.isfinite(R)):
        return False
    if not np.allclose(R.T @ R, np.eye(3), atol=atol):
        return False
    return bool(np.isclose(np.linalg.det(R), 1.0, atol=atol))
