"""Decoder protocol shared by the landmark model families."""

from typing import Protocol

import numpy as np


class LandmarkDecoder(Protocol):
    """Preprocessing and decode contract for one landmark model family.

    Implementations should be swappable without changing tracker logic.
    """

    row_major: bool

    @property
    def input_shape(self) -> tuple[int, int, int, int]:
        """NCHW shape of the model input tensor."""
        ...

    def preprocess(self, crop: np.ndarray) -> np.ndarray:
        """Turn a BGR face crop into the model input tensor."""
        ...

    def decode(
        self,
        output: np.ndarray,
        origin: tuple[int, int],
        scale: tuple[float, float],
        out: np.ndarray,
    ) -> np.ndarray:
        """Decode model output into frame-space landmarks.

        Args:
            output: Raw model output tensor.
            origin: Crop top-left (x0, y0) in frame pixels.
            scale: (scale_x, scale_y) frame pixels per model-input pixel.
            out: (66, 2) array to write landmarks into.

        Returns:
            ``out``.
        """
        ...


__all__ = ["LandmarkDecoder"]
