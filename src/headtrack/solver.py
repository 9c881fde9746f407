"""Head pose solver: 66 landmarks -> rotation / translation via solvePnP."""

from __future__ import annotations

import logging
import math
from typing import Optional, Protocol

import cv2
import numpy as np

from headtrack.constants import ROW_MAJOR_LANDMARKS
from headtrack.types import FaceResult

logger = logging.getLogger(__name__)

# Anchor landmarks in 66-point indexing (68-point minus inner mouth corners)
NOSE_TIP = 30
CHIN = 8
RIGHT_EYE_OUTER = 36  # subject's right, image left
LEFT_EYE_OUTER = 45
RIGHT_MOUTH = 48
LEFT_MOUTH = 54

ANCHOR_INDICES = [NOSE_TIP, CHIN, RIGHT_EYE_OUTER, LEFT_EYE_OUTER, RIGHT_MOUTH, LEFT_MOUTH]

# Generic face model (mm, arbitrary scale) in camera axes: x right, y down,
# z away from the camera. A frontal face solves to zero rotation.
MODEL_POINTS_3D = np.array([
    (0.0, 0.0, 0.0),           # Nose tip
    (0.0, 330.0, 65.0),        # Chin
    (-225.0, -170.0, 135.0),   # Right eye outer corner
    (225.0, -170.0, 135.0),    # Left eye outer corner
    (-150.0, 150.0, 125.0),    # Right mouth corner
    (150.0, 150.0, 125.0),     # Left mouth corner
], dtype=np.float64)

# Outer-eye width over eye-to-mouth height of the model
_MODEL_WIDTH = MODEL_POINTS_3D[3, 0] - MODEL_POINTS_3D[2, 0]
_MODEL_HEIGHT = MODEL_POINTS_3D[4, 1] - MODEL_POINTS_3D[2, 1]
MODEL_ASPECT = _MODEL_WIDTH / _MODEL_HEIGHT


class PositionSolver(Protocol):
    """Protocol for pose solvers consumed by the tracker."""

    def solve_rotation(self, result: FaceResult) -> None:
        ...

    def calibrate_head_scale(self, result: FaceResult) -> None:
        ...

    def get_x_scale(self) -> float:
        ...


def rotation_matrix_to_euler(R: np.ndarray) -> tuple[float, float, float]:
    """Return (yaw, pitch, roll) in degrees for a rotation in camera axes.

    Pitch turns about x (right), yaw about y (down) and roll about z (towards
    the scene), composed as ``R = Rz(roll) @ Ry(yaw) @ Rx(pitch)``. At +-90
    degrees of yaw, roll is folded into pitch.
    """
    R = np.asarray(R, dtype=np.float64)
    cos_yaw = np.hypot(R[0, 0], R[1, 0])
    yaw = np.arctan2(-R[2, 0], cos_yaw)
    if cos_yaw < 1e-6:
        pitch = np.arctan2(-R[1, 2], R[1, 1])
        roll = 0.0
    else:
        pitch = np.arctan2(R[2, 1], R[2, 2])
        roll = np.arctan2(R[1, 0], R[0, 0])
    yaw_deg, pitch_deg, roll_deg = np.degrees([yaw, pitch, roll])
    return float(yaw_deg), float(pitch_deg), float(roll_deg)


def image_points(landmarks: np.ndarray, row_major: bool = ROW_MAJOR_LANDMARKS) -> np.ndarray:
    """Return (N, 2) landmarks as (x, y) image points."""
    pts = np.asarray(landmarks, dtype=np.float64)
    if row_major:
        pts = pts[:, ::-1]
    return np.ascontiguousarray(pts)


class PnPPositionSolver:
    """Pinhole-camera pose solver over six anchor landmarks.

    Args:
        width: Frame width in pixels.
        height: Frame height in pixels.
        fov: Horizontal field of view in degrees.
        x_scale: Initial horizontal scale of the face model.
        y_scale: Vertical scale of the face model.
        z_scale: Depth scale of the face model.
        row_major: Landmark pair order produced by the tracker.
    """

    def __init__(
        self,
        width: int,
        height: int,
        fov: float = 56.0,
        x_scale: float = 1.0,
        y_scale: float = 1.0,
        z_scale: float = 1.0,
        row_major: bool = ROW_MAJOR_LANDMARKS,
    ):
        focal = (width / 2.0) / math.tan(math.radians(fov) / 2.0)
        self._camera = np.array([
            [focal, 0.0, width / 2.0],
            [0.0, focal, height / 2.0],
            [0.0, 0.0, 1.0],
        ], dtype=np.float64)
        self._dist = np.zeros((4, 1), dtype=np.float64)
        self._x_scale = x_scale
        self._y_scale = y_scale
        self._z_scale = z_scale
        self._row_major = row_major
        self._rvec: Optional[np.ndarray] = None
        self._tvec: Optional[np.ndarray] = None

    @property
    def camera_matrix(self) -> np.ndarray:
        return self._camera

    def model_points(self) -> np.ndarray:
        scale = np.array([self._x_scale, self._y_scale, self._z_scale])
        return MODEL_POINTS_3D * scale

    def solve_rotation(self, result: FaceResult) -> None:
        """Write (yaw, pitch, roll) degrees and translation (cm) into ``result``."""
        pts = image_points(result.landmarks, self._row_major)[ANCHOR_INDICES]

        if self._rvec is None:
            ok, rvec, tvec = cv2.solvePnP(
                self.model_points(), pts, self._camera, self._dist,
                flags=cv2.SOLVEPNP_EPNP,
            )
        else:
            ok, rvec, tvec = cv2.solvePnP(
                self.model_points(), pts, self._camera, self._dist,
                rvec=self._rvec.copy(), tvec=self._tvec.copy(),
                useExtrinsicGuess=True, flags=cv2.SOLVEPNP_ITERATIVE,
            )
        if not ok:
            logger.debug("solvePnP did not converge, keeping previous pose")
            return

        self._rvec, self._tvec = rvec, tvec
        R, _ = cv2.Rodrigues(rvec)
        result.rotation[:] = rotation_matrix_to_euler(R)
        # model units are mm
        result.translation[:] = tvec.reshape(3) / 10.0

    def calibrate_head_scale(self, result: FaceResult) -> None:
        """Fit the model's horizontal scale to the current face proportions.

        Compares outer-eye width over eye-to-mouth height with the model's
        ratio. Best called while the subject faces the camera.
        """
        pts = image_points(result.landmarks, self._row_major)
        eye_r, eye_l = pts[RIGHT_EYE_OUTER], pts[LEFT_EYE_OUTER]
        mouth_r, mouth_l = pts[RIGHT_MOUTH], pts[LEFT_MOUTH]

        width = float(np.linalg.norm(eye_l - eye_r))
        height = float(np.linalg.norm((mouth_r + mouth_l) / 2 - (eye_r + eye_l) / 2))
        if height <= 0.0 or width <= 0.0:
            logger.warning("Cannot calibrate head scale from degenerate landmarks")
            return

        self._x_scale = (width / height) / MODEL_ASPECT
        self.reset()
        logger.info("Head width scale calibrated to %.3f", self._x_scale)

    def get_x_scale(self) -> float:
        return self._x_scale

    def reset(self) -> None:
        """Forget the previous pose; the next solve starts from EPnP."""
        self._rvec = None
        self._tvec = None


__all__ = [
    "PositionSolver",
    "PnPPositionSolver",
    "rotation_matrix_to_euler",
    "image_points",
    "MODEL_POINTS_3D",
    "ANCHOR_INDICES",
]
