"""Tracking domain types."""

from dataclasses import dataclass, field

import numpy as np

from headtrack.constants import NUM_LANDMARKS


@dataclass
class DetectionBox:
    """Raw face detection in detector-input pixel space.

    Attributes:
        x: Left edge.
        y: Top edge.
        width: Box width.
        height: Box height.
        score: Detector confidence [0, 1].
    """

    x: float
    y: float
    width: float
    height: float
    score: float = 0.0

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)


@dataclass
class FaceBox:
    """Crop region (x0, y0, x1, y1) in frame pixel space, clamped to the frame."""

    x0: int = 0
    y0: int = 0
    x1: int = 0
    y1: int = 0

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.x0, self.y0, self.x1, self.y1)


def _empty_landmarks() -> np.ndarray:
    return np.zeros((NUM_LANDMARKS, 2), dtype=np.float32)


@dataclass
class FaceResult:
    """Per-frame tracking result, allocated once by the caller and reused.

    Attributes:
        detected: Whether a face was tracked in the last frame.
        box: Crop box used for landmark detection (frame pixels).
        landmarks: (66, 2) landmark pairs in frame pixels. Left untouched
            when ``detected`` is False.
        rotation: (yaw, pitch, roll) in degrees, written by the pose solver.
        translation: (x, y, z) head position, written by the pose solver.
    """

    detected: bool = False
    box: FaceBox = field(default_factory=FaceBox)
    landmarks: np.ndarray = field(default_factory=_empty_landmarks)
    rotation: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=np.float64))
    translation: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=np.float64))


@dataclass(frozen=True)
class TrackerMetadata:
    """Read-only snapshot of calibration state."""

    head_width_scale: float = 1.0


__all__ = ["DetectionBox", "FaceBox", "FaceResult", "TrackerMetadata"]
