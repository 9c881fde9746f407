"""Center-weighted face selection."""

from typing import Optional, Sequence

from headtrack.constants import ROW_MAJOR_LANDMARKS
from headtrack.numeric import distance_squared
from headtrack.types import DetectionBox


def image_center(
    width: int, height: int, row_major: bool = ROW_MAJOR_LANDMARKS
) -> tuple[float, float]:
    """Return the image center used for selection.

    Under the row-major convention the first component comes from the row
    count, matching the landmark pair order.
    """
    if row_major:
        return (float(height // 2), float(width // 2))
    return (float(width // 2), float(height // 2))


def select_center_weighted(
    boxes: Sequence[DetectionBox],
    width: int,
    height: int,
    row_major: bool = ROW_MAJOR_LANDMARKS,
) -> Optional[int]:
    """Pick the detection whose center is nearest the image center.

    Args:
        boxes: Candidate detections, all in the same pixel space.
        width: Width of that pixel space.
        height: Height of that pixel space.
        row_major: Axis convention for the image center.

    Returns:
        Index of the selected box, or None when ``boxes`` is empty. Ties go
        to the earliest box.
    """
    cx, cy = image_center(width, height, row_major)

    best_index: Optional[int] = None
    best_distance = 0.0
    for index, box in enumerate(boxes):
        bx, by = box.center
        d = distance_squared(cx, cy, bx, by)
        if best_index is None or d < best_distance:
            best_index = index
            best_distance = d
    return best_index


__all__ = ["image_center", "select_center_weighted"]
