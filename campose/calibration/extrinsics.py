"""
Camera Extrinsic Parameters Module.

This module holds a camera pose relative to a world coordinate frame and
converts points between the world frame and the camera frame, following
the OpenCV camera model.

The default camera frame is the same as the default world frame.

Mathematical Background:
========================

World-to-Camera Transformation:
-------------------------------
The extrinsics are stored as the rigid body transformation that maps world
coordinates to camera coordinates:

    P_cam = R @ P_world + t

Camera Center:
--------------
From Hartley & Zisserman (p. 156) the extrinsics matrix can be written as

    | R  -R c |
    | 0    1  |

where c is the camera center in world coordinates. Hence

    t = -R @ c        and        c = -R^T @ t

t is NOT the position of the camera. All "translation" operations below
take and return c, and write t back through t = -R @ c.

Rotation Updates:
-----------------
Replacing R while keeping t would silently move the camera, because c
depends on both. Every rotation update therefore:
    1. recovers c from the current (R, t),
    2. stores the new rotation R',
    3. stores t' = -R' @ c.

Camera Axes (OpenCV):
=====================
    - X: Right
    - Y: Down
    - Z: Forward (optical axis)
    - Origin: At camera optical center
"""

from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple, Union

import numpy as np

from ..geometry.rotations import (
    euler_angles_to_matrix,
    matrix_to_rodrigues,
    rodrigues_to_matrix,
    validate_rotation_matrix,
)
from ..geometry.transform import Transform3D
from ..utils.config_loader import ConfigLoader
from ..utils.logger import LoggerMixin

ArrayLike = Union[np.ndarray, Sequence[float]]


def camera_center(R: np.ndarray, t: np.ndarray) -> np.ndarray:
    """
    Camera center in world coordinates for a world-to-camera pose (R, t).

        c = -R^T @ t

    Args:
        R: World-to-camera rotation (3x3).
        t: World-to-camera translation (3,).

    Returns:
        np.ndarray: Camera center (3,).
    """
    return -np.asarray(R).T @ np.asarray(t)


def _as_vector(v: ArrayLike, name: str) -> np.ndarray:
    v = np.asarray(v, dtype=np.float64).flatten()
    if v.shape != (3,):
        raise ValueError(f"{name} must have 3 elements, got {v.shape}")
    return v


class CameraExtrinsics(LoggerMixin):
    """
    Camera extrinsic parameters (pose of the camera in the world frame).

    Stores a single world-to-camera Transform3D. Rotation setters keep the
    camera center fixed; translation setters move the camera center.

    Example:
        >>> extrinsics = CameraExtrinsics()
        >>> extrinsics.rotate_euler(0.0, 0.0, np.pi / 2)
        >>> extrinsics.translate_x(1.0)
        >>> np.round(extrinsics.translation, 6)
        array([1., 0., 0.])
    """

    def __init__(self, world_to_camera: Optional[Transform3D] = None):
        """
        Initialize extrinsics.

        Args:
            world_to_camera: World-to-camera transform, stored as given.
                Defaults to identity.
        """
        if world_to_camera is None:
            world_to_camera = Transform3D()
        self._world_to_camera = world_to_camera.copy()

    # -------------------------------------------------------------------------
    # Poses
    # -------------------------------------------------------------------------

    def set_world_to_camera(self, world_to_camera: Transform3D) -> None:
        """Replace the stored world-to-camera transform (R and t) verbatim."""
        if not validate_rotation_matrix(world_to_camera.R):
            self.logger.warning(
                f"Rotation is not orthonormal, storing as given: {world_to_camera.R.tolist()}"
            )
        self._world_to_camera = world_to_camera.copy()
        self.logger.debug(f"World-to-camera set to {self._world_to_camera}")

    @property
    def world_to_camera(self) -> Transform3D:
        """World-to-camera transform (copy)."""
        return self._world_to_camera.copy()

    @property
    def camera_to_world(self) -> Transform3D:
        """Camera-to-world transform: the inverse of world_to_camera."""
        return self._world_to_camera.inverse()

    # -------------------------------------------------------------------------
    # Rotation
    # -------------------------------------------------------------------------

    def set_rotation(self, rotation: np.ndarray) -> None:
        """
        Set the world-to-camera rotation, keeping the camera center fixed.

        The matrix is not re-orthonormalized. A matrix that is not a proper
        rotation is still stored, with a warning.

        Args:
            rotation: New world-to-camera rotation (3x3).
        """
        rotation = np.asarray(rotation, dtype=np.float64)
        if rotation.shape != (3, 3):
            raise ValueError(f"rotation must be 3x3, got {rotation.shape}")
        if not validate_rotation_matrix(rotation):
            self.logger.warning(
                f"Rotation is not orthonormal, storing as given: {rotation.tolist()}"
            )

        c = self.camera_center
        self._world_to_camera.set_rotation(rotation)
        self._world_to_camera.set_translation(-rotation @ c)

    def set_rotation_euler(self, phi: float, theta: float, psi: float) -> None:
        """Set rotation from Euler angles (radians, R = Rz(psi) Ry(theta) Rx(phi))."""
        self.set_rotation(euler_angles_to_matrix(phi, theta, psi))

    def rotate(self, delta: np.ndarray) -> None:
        """
        Left-multiply the rotation by `delta` (R' = delta @ R).

        The camera center is unchanged.
        """
        self.set_rotation(np.asarray(delta, dtype=np.float64) @ self._world_to_camera.R)

    def rotate_euler(self, dphi: float, dtheta: float, dpsi: float) -> None:
        """Rotate by an incremental rotation given as Euler angles (radians)."""
        self.rotate(euler_angles_to_matrix(dphi, dtheta, dpsi))

    @property
    def rotation(self) -> np.ndarray:
        """World-to-camera rotation matrix (3x3)."""
        return self._world_to_camera.get_rotation()

    # -------------------------------------------------------------------------
    # Translation. All inputs and outputs are camera coordinates in world frame.
    # -------------------------------------------------------------------------

    def set_translation(self, translation: ArrayLike) -> None:
        """
        Place the camera center at `translation` (world frame).

        The rotation is unchanged.
        """
        c = _as_vector(translation, "translation")
        self._world_to_camera.set_translation(-self._world_to_camera.R @ c)

    def set_translation_xyz(self, wx: float, wy: float, wz: float) -> None:
        self.set_translation(np.array([wx, wy, wz], dtype=np.float64))

    def translate(self, delta: ArrayLike) -> None:
        """
        Move the camera center by `delta` (world frame).

        The rotation is unchanged.
        """
        c = self.camera_center + _as_vector(delta, "delta")
        self._world_to_camera.set_translation(-self._world_to_camera.R @ c)

    def translate_xyz(self, dx: float, dy: float, dz: float) -> None:
        self.translate(np.array([dx, dy, dz], dtype=np.float64))

    def translate_x(self, dx: float) -> None:
        self.translate(np.array([dx, 0.0, 0.0]))

    def translate_y(self, dy: float) -> None:
        self.translate(np.array([0.0, dy, 0.0]))

    def translate_z(self, dz: float) -> None:
        self.translate(np.array([0.0, 0.0, dz]))

    @property
    def camera_center(self) -> np.ndarray:
        """Camera center in world coordinates: c = -R^T @ t."""
        return camera_center(self._world_to_camera.R, self._world_to_camera.t)

    @property
    def translation(self) -> np.ndarray:
        """
        Camera position in world coordinates.

        This is the camera center c = -R^T @ t, not the raw t stored in the
        world-to-camera transform (use Rt for that).
        """
        return self.camera_center

    # -------------------------------------------------------------------------
    # Matrices
    # -------------------------------------------------------------------------

    @property
    def Rt(self) -> np.ndarray:
        """
        The 3x4 extrinsics matrix [R | t].

        The last column is the raw world-to-camera translation t = -R @ c.
        """
        return self._world_to_camera.dehomogenize()

    def get_transform_matrix(self) -> np.ndarray:
        """Get the 4x4 homogeneous world-to-camera matrix."""
        return self._world_to_camera.get_transform_matrix()

    # -------------------------------------------------------------------------
    # Point conversion
    # -------------------------------------------------------------------------

    def world_to_camera_point(
        self, wx: float, wy: float, wz: float
    ) -> Tuple[float, float, float]:
        """
        Convert a world frame point into the camera frame.

        Returns:
            Tuple[float, float, float]: (cx, cy, cz) in camera frame.
        """
        c = self._world_to_camera.transform_points(np.array([wx, wy, wz], dtype=np.float64))
        return float(c[0]), float(c[1]), float(c[2])

    def camera_to_world_point(
        self, cx: float, cy: float, cz: float
    ) -> Tuple[float, float, float]:
        """
        Convert a camera frame point into the world frame.

        Returns:
            Tuple[float, float, float]: (wx, wy, wz) in world frame.
        """
        w = self.camera_to_world.transform_points(np.array([cx, cy, cz], dtype=np.float64))
        return float(w[0]), float(w[1]), float(w[2])

    def world_to_camera_points(self, points: np.ndarray) -> np.ndarray:
        """
        Convert world frame points (N, 3) or (3,) into the camera frame.

        Raises:
            ValueError: If points are not (3,) or (N, 3).
        """
        return self._world_to_camera.transform_points(points)

    def camera_to_world_points(self, points: np.ndarray) -> np.ndarray:
        """
        Convert camera frame points (N, 3) or (3,) into the world frame.

        Raises:
            ValueError: If points are not (3,) or (N, 3).
        """
        return self.camera_to_world.transform_points(points)

    # -------------------------------------------------------------------------
    # Construction helpers
    # -------------------------------------------------------------------------

    @classmethod
    def from_matrix(cls, T: np.ndarray) -> "CameraExtrinsics":
        """Create from a 3x4 [R | t] or 4x4 world-to-camera matrix."""
        return cls(Transform3D.from_matrix(T))

    @classmethod
    def from_rvec_tvec(cls, rvec: ArrayLike, tvec: ArrayLike) -> "CameraExtrinsics":
        """
        Create from an OpenCV rotation vector and translation vector.

        This is the pose representation returned by cv2.solvePnP: rvec is the
        Rodrigues vector of R and tvec is the raw world-to-camera t.
        """
        R = rodrigues_to_matrix(rvec)
        return cls(Transform3D(R=R, t=_as_vector(tvec, "tvec")))

    def to_rvec_tvec(self) -> Tuple[np.ndarray, np.ndarray]:
        """Get the OpenCV (rvec, tvec) pair, both (3,)."""
        return (
            matrix_to_rodrigues(self._world_to_camera.R),
            self._world_to_camera.get_translation(),
        )

    @classmethod
    def look_at(
        cls,
        eye: ArrayLike,
        target: ArrayLike,
        up: ArrayLike = (0.0, 0.0, 1.0),
    ) -> "CameraExtrinsics":
        """
        Create a camera at `eye` whose optical axis points at `target`.

        The camera Y axis points "down", i.e. away from `up`.

        Args:
            eye: Camera center in world frame.
            target: World point the camera looks at.
            up: World up direction.

        Raises:
            ValueError: If eye == target or the viewing direction is parallel to up.
        """
        eye = _as_vector(eye, "eye")
        forward = _as_vector(target, "target") - eye
        up = _as_vector(up, "up")

        norm = np.linalg.norm(forward)
        if norm < 1e-12:
            raise ValueError("eye and target must be distinct")
        z_axis = forward / norm

        x_axis = np.cross(z_axis, up)
        norm = np.linalg.norm(x_axis)
        if norm < 1e-12:
            raise ValueError("Viewing direction is parallel to up vector")
        x_axis /= norm
        y_axis = np.cross(z_axis, x_axis)

        extrinsics = cls()
        extrinsics.set_rotation(np.vstack([x_axis, y_axis, z_axis]))
        extrinsics.set_translation(eye)
        return extrinsics

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "CameraExtrinsics":
        """
        Create extrinsics from a configuration mapping.

        Accepts either a full config with an `extrinsics` section or the
        section itself. Rotation keys, by precedence: world_to_camera
        (3x4 / 4x4, center is then ignored), rotation (3x3),
        euler ({phi, theta, psi, degrees}), rvec. `center` is the camera
        position in world frame.

        Raises:
            ValueError: On malformed entries, or when validate_rotation is
                true (default) and the rotation is not a proper rotation.
        """
        section = config["extrinsics"] if "extrinsics" in config else config
        # An empty `extrinsics:` key loads as None
        if section is None:
            section = {}
        if not isinstance(section, dict):
            raise ValueError(
                f"extrinsics section must be a mapping, got {type(section).__name__}"
            )

        validate = section.get("validate_rotation", True)
        tolerance = float(section.get("tolerance", 1e-6))

        if "world_to_camera" in section:
            transform = Transform3D.from_matrix(section["world_to_camera"])
            rotation = transform.R
        else:
            transform = None
            rotation = cls._rotation_from_config(section)

        if validate and not validate_rotation_matrix(rotation, atol=tolerance):
            raise ValueError(f"Config rotation is not a proper rotation: {rotation.tolist()}")

        if transform is not None:
            extrinsics = cls(transform)
        else:
            extrinsics = cls()
            extrinsics.set_rotation(rotation)
            center = section.get("center")
            extrinsics.set_translation(np.zeros(3) if center is None else center)

        extrinsics.logger.debug(f"Loaded extrinsics from config: {extrinsics}")
        return extrinsics

    @staticmethod
    def _rotation_from_config(section: Dict[str, Any]) -> np.ndarray:
        if "rotation" in section:
            R = np.asarray(section["rotation"], dtype=np.float64)
            if R.shape != (3, 3):
                raise ValueError(f"rotation must be 3x3, got {R.shape}")
            return R

        if "euler" in section:
            euler = section["euler"]
            if not isinstance(euler, dict):
                raise ValueError("euler must be a mapping with phi, theta, psi")
            unknown = set(euler) - {"phi", "theta", "psi", "degrees"}
            if unknown:
                raise ValueError(f"Unknown euler keys: {sorted(unknown)}")
            angles = np.array(
                [euler.get("phi", 0.0), euler.get("theta", 0.0), euler.get("psi", 0.0)],
                dtype=np.float64,
            )
            if euler.get("degrees", False):
                angles = np.deg2rad(angles)
            return euler_angles_to_matrix(*angles)

        if "rvec" in section:
            return rodrigues_to_matrix(section["rvec"])

        return np.eye(3)

    def to_config(self) -> Dict[str, Any]:
        """Get the `extrinsics` config section (rotation + camera center)."""
        return {
            "rotation": self.rotation.tolist(),
            "center": self.camera_center.tolist(),
        }

    @classmethod
    def from_yaml(
        cls,
        path: Union[str, Path],
        loader: Optional[ConfigLoader] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "CameraExtrinsics":
        """
        Load extrinsics from a YAML file (see from_config).

        Args:
            path: Config file path.
            loader: Loader to resolve the path with. Defaults to ConfigLoader().
            overrides: Mapping deep-merged over the file contents,
                e.g. {"extrinsics": {"center": [0, 0, 2]}}.
        """
        loader = loader or ConfigLoader()
        config = loader.load(path, use_cache=False)
        if overrides:
            config = loader.merge(config, overrides)
        return cls.from_config(config)

    def save_yaml(
        self,
        path: Union[str, Path],
        loader: Optional[ConfigLoader] = None,
    ) -> None:
        """Write the pose to a YAML file under an `extrinsics` key."""
        loader = loader or ConfigLoader()
        loader.save({"extrinsics": self.to_config()}, path)
        self.logger.debug(f"Saved extrinsics to {path}")

    def copy(self) -> "CameraExtrinsics":
        """Return an independent copy."""
        return CameraExtrinsics(self._world_to_camera)

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"CameraExtrinsics(rotation={self.rotation.round(6).tolist()}, "
            f"center={self.camera_center.round(6).tolist()})"
        )
