"""Crop geometry: detector box -> frame crop -> model input scale."""

from __future__ import annotations

from typing import Optional

import cv2
import numpy as np

from headtrack.constants import CROP_CHIN_MARGIN, CROP_MARGIN
from headtrack.types import DetectionBox, FaceBox


def expand_detection(
    box: DetectionBox,
    w_ratio: float,
    h_ratio: float,
    frame_width: int,
    frame_height: int,
) -> FaceBox:
    """Map a detector-space box to a clamped crop box in frame space.

    The box is scaled by the detector-to-frame ratios, then padded by 10%
    on every side plus another 10% of its height below, so the chin stays
    inside the crop.

    Args:
        box: Detection in detector-input pixels.
        w_ratio: frame_width / detector_input_width.
        h_ratio: frame_height / detector_input_height.
        frame_width: Frame width in pixels.
        frame_height: Frame height in pixels.

    Returns:
        FaceBox clamped to ``[0, frame_width] x [0, frame_height]``. May be
        empty.
    """
    x = box.x * w_ratio
    y = box.y * h_ratio
    w = box.width * w_ratio
    h = box.height * h_ratio

    # int() truncates toward zero before clamping
    x0 = int(x - w * CROP_MARGIN)
    y0 = int(y - h * CROP_MARGIN)
    x1 = int(x + w + w * CROP_MARGIN)
    y1 = int(y + h + h * CROP_MARGIN + h * CROP_CHIN_MARGIN)

    return FaceBox(
        x0=max(0, x0),
        y0=max(0, y0),
        x1=min(int(frame_width), x1),
        y1=min(int(frame_height), y1),
    )


def crop_scales(
    box: FaceBox, input_width: int, input_height: int
) -> tuple[float, float]:
    """Return (scale_x, scale_y): frame pixels per model-input pixel."""
    return (box.width / input_width, box.height / input_height)


def extract_crop(image: np.ndarray, box: FaceBox) -> Optional[np.ndarray]:
    """Slice the crop region out of the frame, or None if it is empty."""
    if box.is_empty:
        return None
    crop = image[box.y0:box.y1, box.x0:box.x1]
    if crop.size == 0:
        return None
    return crop


def resize_for_detector(image: np.ndarray, size: tuple[int, int]) -> np.ndarray:
    """Bilinear resize to the detector's fixed (width, height)."""
    return cv2.resize(image, size, interpolation=cv2.INTER_LINEAR)


__all__ = ["expand_detection", "crop_scales", "extract_crop", "resize_for_detector"]
