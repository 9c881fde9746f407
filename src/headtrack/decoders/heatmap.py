"""Heatmap decoder for the 224px landmark model.

Model:
  - input: [1,3,224,224] RGB, ImageNet normalized
  - output: [1,198,28,28] = 3 groups x 66 landmarks of 28x28 maps
      group 0: confidence
      group 1: row offset (squashed)
      group 2: col offset (squashed)

The argmax cell gives the coarse position on the 28x28 grid; the offset
channels at that cell refine it to model-input pixels.
"""

from __future__ import annotations

import cv2
import numpy as np

from headtrack.constants import (
    HEATMAP_CELLS,
    HEATMAP_GRID,
    HEATMAP_GRID_MAX,
    HEATMAP_INPUT_SIZE,
    HEATMAP_RES,
    HEATMAP_ROUND_BIAS,
    NUM_LANDMARKS,
    ROW_MAJOR_LANDMARKS,
)
from headtrack.numeric import logit

# ImageNet normalization constants
IMAGENET_MEAN = np.array([0.485, 0.456, 0.406], dtype=np.float32)
IMAGENET_STD = np.array([0.229, 0.224, 0.225], dtype=np.float32)


def decode_heatmaps(
    heatmaps: np.ndarray,
    origin: tuple[int, int],
    scale: tuple[float, float],
    out: np.ndarray,
    row_major: bool = ROW_MAJOR_LANDMARKS,
) -> np.ndarray:
    """Decode a 3 x 66 x 784 heatmap tensor into frame-space landmarks.

    Args:
        heatmaps: Model output with 3 * 66 * 784 values.
        origin: Crop top-left (x0, y0) in frame pixels.
        scale: (scale_x, scale_y) frame pixels per model-input pixel.
        out: (66, 2) destination array.
        row_major: Write (row, col) pairs if True, else (x, y).

    Raises:
        ValueError: If the tensor does not hold 3 * 66 * 784 values.
    """
    expected = 3 * NUM_LANDMARKS * HEATMAP_CELLS
    if heatmaps.size != expected:
        raise ValueError(
            f"Heatmap output has {heatmaps.size} values, expected {expected}"
        )

    # float64 gives the same landmarks as a float32 decode; it keeps the
    # floor of the offset-corrected cell index stable.
    maps = heatmaps.reshape(3, NUM_LANDMARKS, HEATMAP_CELLS).astype(np.float64)
    lm_index = np.arange(NUM_LANDMARKS)

    argmax = np.argmax(maps[0], axis=1)
    row = argmax // HEATMAP_GRID
    col = argmax % HEATMAP_GRID

    off_row = np.floor(
        HEATMAP_RES * logit(maps[1, lm_index, argmax]) + HEATMAP_ROUND_BIAS
    )
    off_col = np.floor(
        HEATMAP_RES * logit(maps[2, lm_index, argmax]) + HEATMAP_ROUND_BIAS
    )

    # position in model-input pixels
    r = HEATMAP_RES * (row / HEATMAP_GRID_MAX) + off_row
    c = HEATMAP_RES * (col / HEATMAP_GRID_MAX) + off_col

    x0, y0 = origin
    scale_x, scale_y = scale
    vertical = y0 + scale_y * r
    horizontal = x0 + scale_x * c

    if row_major:
        out[:, 0] = vertical
        out[:, 1] = horizontal
    else:
        out[:, 0] = horizontal
        out[:, 1] = vertical
    return out


class HeatmapDecoder:
    """Decoder for the heatmap (STANDARD) landmark model.

    Keeps one preprocessing buffer that is reused across frames, so a
    decoder must not be shared between concurrently running trackers.
    """

    def __init__(
        self,
        input_size: int = HEATMAP_INPUT_SIZE,
        row_major: bool = ROW_MAJOR_LANDMARKS,
    ):
        self._input_size = input_size
        self.row_major = row_major
        self._buffer = np.empty((1, 3, input_size, input_size), dtype=np.float32)

    @property
    def input_shape(self) -> tuple[int, int, int, int]:
        return (1, 3, self._input_size, self._input_size)

    def preprocess(self, crop: np.ndarray) -> np.ndarray:
        """Resize, BGR->RGB, ImageNet normalize into the NCHW buffer."""
        size = self._input_size
        resized = cv2.resize(crop, (size, size), interpolation=cv2.INTER_LINEAR)
        img = cv2.cvtColor(resized.astype(np.float32), cv2.COLOR_BGR2RGB)
        img = (img / 255.0 - IMAGENET_MEAN) / IMAGENET_STD
        self._buffer[0] = np.transpose(img, (2, 0, 1))
        return self._buffer

    def decode(
        self,
        output: np.ndarray,
        origin: tuple[int, int],
        scale: tuple[float, float],
        out: np.ndarray,
    ) -> np.ndarray:
        return decode_heatmaps(output, origin, scale, out, self.row_major)


__all__ = ["HeatmapDecoder", "decode_heatmaps", "IMAGENET_MEAN", "IMAGENET_STD"]
