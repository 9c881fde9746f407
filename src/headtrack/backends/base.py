"""Backend protocol definitions for face detection and landmark inference."""

from typing import List, Protocol

import numpy as np

from headtrack.types import DetectionBox


class FaceDetectorBackend(Protocol):
    """Protocol for face detection backends.

    ``detect`` receives an image already resized to the detector's fixed
    input size and returns boxes in that image's pixel space.
    """

    def initialize(self) -> None:
        """Load the detector model."""
        ...

    def detect(self, image: np.ndarray) -> List[DetectionBox]:
        """Detect faces in a detector-sized BGR image."""
        ...

    def cleanup(self) -> None:
        """Release resources."""
        ...


class LandmarkModelBackend(Protocol):
    """Protocol for landmark model inference (tensor in, tensor out)."""

    def initialize(self) -> None:
        """Create the inference session."""
        ...

    def run(self, tensor: np.ndarray) -> np.ndarray:
        """Run the model on one input tensor and return its output tensor.

        Engine failures must propagate to the caller.
        """
        ...

    def cleanup(self) -> None:
        """Release resources."""
        ...


__all__ = ["FaceDetectorBackend", "LandmarkModelBackend"]
