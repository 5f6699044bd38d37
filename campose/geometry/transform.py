"""
Rigid Body Transformation Module.

Mathematical Background:
========================

A rigid body transformation consists of a rotation R (3x3 orthonormal matrix)
and translation t (3x1 vector). For a point P in frame A, its coordinates
in frame B are:

    P_B = R * P_A + t

This can be written as a 4x4 homogeneous transformation matrix:

    T = | R   t |    where T transforms points: P_B = T * P_A (homogeneous)
        | 0   1 |

Dropping the constant bottom row gives the 3x4 affine form [R | t].

Inverse Transformation:
-----------------------
The inverse transformation (from B to A) is:

    T^(-1) = | R^T  -R^T * t |
             |  0       1    |

Since R is orthonormal: R^(-1) = R^T
"""

from dataclasses import dataclass, field

import numpy as np


@dataclass(eq=False)
class Transform3D:
    """
    Rigid body transformation (rotation and translation).

    Default construction gives the identity transform. R and t are stored as
    float64 copies, so the caller's arrays are never aliased.

    Attributes:
        R: Rotation matrix (3x3).
        t: Translation vector (3,).

    Example:
        >>> T = Transform3D(R=np.eye(3), t=np.array([1.0, 2.0, 3.0]))
        >>> T.transform_points(np.zeros(3))
        array([1., 2., 3.])
    """

    R: np.ndarray = field(default_factory=lambda: np.eye(3))
    t: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self):
        """Validate inputs after initialization."""
        self.R = self._as_rotation(self.R)
        self.t = self._as_translation(self.t)

    @staticmethod
    def _as_rotation(R: np.ndarray) -> np.ndarray:
        R = np.array(R, dtype=np.float64)
        if R.shape != (3, 3):
            raise ValueError(f"R must be 3x3, got {R.shape}")
        return R

    @staticmethod
    def _as_translation(t: np.ndarray) -> np.ndarray:
        t = np.array(t, dtype=np.float64).flatten()
        if t.shape != (3,):
            raise ValueError(f"t must be (3,), got {t.shape}")
        return t

    def get_rotation(self) -> np.ndarray:
        """Return a copy of the rotation matrix."""
        return self.R.copy()

    def set_rotation(self, R: np.ndarray) -> None:
        """Replace the rotation matrix. The translation is left untouched."""
        self.R = self._as_rotation(R)

    def get_translation(self) -> np.ndarray:
        """Return a copy of the translation vector."""
        return self.t.copy()

    def set_translation(self, t: np.ndarray) -> None:
        """Replace the translation vector. The rotation is left untouched."""
        self.t = self._as_translation(t)

    def get_transform_matrix(self) -> np.ndarray:
        """
        Get the 4x4 homogeneous transformation matrix.

            T = | R  t |
                | 0  1 |

        Returns:
            np.ndarray: 4x4 transformation matrix.
        """
        T = np.eye(4, dtype=np.float64)
        T[:3, :3] = self.R
        T[:3, 3] = self.t
        return T

    def dehomogenize(self) -> np.ndarray:
        """
        Get the 3x4 transformation matrix (without homogeneous row).

        Returns:
            np.ndarray: 3x4 matrix [R | t].
        """
        return np.hstack([self.R, self.t.reshape(3, 1)])

    def inverse(self) -> "Transform3D":
        """
        Get the inverse transformation.

        Given P_B = R @ P_A + t, solving for P_A:
            P_A = R^T @ P_B - R^T @ t
        So: R_inv = R^T, t_inv = -R^T @ t

        Returns:
            Transform3D: New instance representing the inverse transform.
        """
        R_inv = self.R.T
        t_inv = -R_inv @ self.t
        return Transform3D(R=R_inv, t=t_inv)

    def transform_points(self, points: np.ndarray) -> np.ndarray:
        """
        Transform 3D points.

        Args:
            points: 3D points (N, 3) or a single point (3,).

        Returns:
            np.ndarray: Transformed points with the same shape as the input.

        Raises:
            ValueError: If the last axis of `points` is not 3.
        """
        points = np.asarray(points, dtype=np.float64)
        if points.ndim not in (1, 2) or points.shape[-1] != 3:
            raise ValueError(f"points must be (3,) or (N, 3), got {points.shape}")

        transformed = points @ self.R.T + self.t
        return transformed

    def compose(self, other: "Transform3D") -> "Transform3D":
        """
        Compose this transformation with another (chain transformations).

        If this is T1 and other is T2, result is T2 @ T1
        (applies T1 first, then T2).

        Args:
            other: The transformation to apply after this one.

        Returns:
            Transform3D: Combined transformation.
        """
        R_combined = other.R @ self.R
        t_combined = other.R @ self.t + other.t
        return Transform3D(R=R_combined, t=t_combined)

    def copy(self) -> "Transform3D":
        """Return an independent copy."""
        return Transform3D(R=self.R, t=self.t)

    def allclose(self, other: "Transform3D", atol: float = 1e-9) -> bool:
        """Check element-wise equality of R and t within `atol`."""
        return bool(
            np.allclose(self.R, other.R, atol=atol)
            and np.allclose(self.t, other.t, atol=atol)
        )

    @classmethod
    def from_matrix(cls, T: np.ndarray) -> "Transform3D":
        """
        Create from 4x4 or 3x4 transformation matrix.

        Args:
            T: 4x4 homogeneous or 3x4 transformation matrix.

        Returns:
            Transform3D: Instance with extracted R and t.
        """
        T = np.asarray(T, dtype=np.float64)
        if T.shape == (4, 4):
            if not np.allclose(T[3], [0.0, 0.0, 0.0, 1.0]):
                raise ValueError(
                    f"4x4 matrix must have bottom row [0, 0, 0, 1], got {T[3].tolist()}"
                )
            return cls(R=T[:3, :3], t=T[:3, 3])
        elif T.shape == (3, 4):
            return cls(R=T[:, :3], t=T[:, 3])
        else:
            raise ValueError(f"Expected 4x4 or 3x4 matrix, got {T.shape}")

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"Transform3D(R={self.R.round(6).tolist()}, "
            f"t={self.t.round(6).tolist()})"
        )
