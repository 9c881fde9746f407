"""Direct-regression decoder for the 114px grayscale landmark model.

Model:
  - input: [1,1,114,114] grayscale, standardized with fixed mean/std
  - output: [1,132] = 66 (x, y) pairs normalized to the input size
"""

from __future__ import annotations

import cv2
import numpy as np

from headtrack.constants import (
    NUM_LANDMARKS,
    REGRESSION_INPUT_SIZE,
    REGRESSION_MEAN,
    REGRESSION_STD,
    ROW_MAJOR_LANDMARKS,
)


def decode_regression(
    values: np.ndarray,
    origin: tuple[int, int],
    scale: tuple[float, float],
    out: np.ndarray,
    input_size: int = REGRESSION_INPUT_SIZE,
    row_major: bool = ROW_MAJOR_LANDMARKS,
) -> np.ndarray:
    """Decode 132 regressed values into frame-space landmarks.

    Raises:
        ValueError: If ``values`` does not hold 132 entries.
    """
    expected = 2 * NUM_LANDMARKS
    if values.size != expected:
        raise ValueError(
            f"Regression output has {values.size} values, expected {expected}"
        )

    pairs = values.reshape(NUM_LANDMARKS, 2).astype(np.float64)
    px = pairs[:, 0] * input_size
    py = pairs[:, 1] * input_size

    x0, y0 = origin
    scale_x, scale_y = scale
    vertical = py * scale_y + y0
    horizontal = px * scale_x + x0

    if row_major:
        out[:, 0] = vertical
        out[:, 1] = horizontal
    else:
        out[:, 0] = horizontal
        out[:, 1] = vertical
    return out


class RegressionDecoder:
    """Decoder for the direct-regression (EFFICIENT) landmark model."""

    def __init__(
        self,
        input_size: int = REGRESSION_INPUT_SIZE,
        row_major: bool = ROW_MAJOR_LANDMARKS,
    ):
        self._input_size = input_size
        self.row_major = row_major
        self._buffer = np.empty((1, 1, input_size, input_size), dtype=np.float32)

    @property
    def input_shape(self) -> tuple[int, int, int, int]:
        return (1, 1, self._input_size, self._input_size)

    def preprocess(self, crop: np.ndarray) -> np.ndarray:
        """Resize, grayscale, scale to [0, 1] and standardize."""
        size = self._input_size
        resized = cv2.resize(crop, (size, size), interpolation=cv2.INTER_LINEAR)
        gray = cv2.cvtColor(resized.astype(np.float32), cv2.COLOR_BGR2GRAY)
        gray = gray / 255.0
        self._buffer[0, 0] = (gray - REGRESSION_MEAN) / REGRESSION_STD
        return self._buffer

    def decode(
        self,
        output: np.ndarray,
        origin: tuple[int, int],
        scale: tuple[float, float],
        out: np.ndarray,
    ) -> np.ndarray:
        return decode_regression(
            output, origin, scale, out, self._input_size, self.row_major
        )


__all__ = ["RegressionDecoder", "decode_regression"]
