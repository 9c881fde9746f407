"""Numeric helpers for landmark decoding and face selection."""

from typing import Union

import numpy as np

from headtrack.constants import LOGIT_EPS, LOGIT_SCALE

ArrayLike = Union[float, np.ndarray]


def logit(p: ArrayLike) -> ArrayLike:
    """Inverse of the squashing applied to heatmap offset channels.

    Clamps ``p`` to ``[1e-7, 1 - 1e-7]`` and returns ``ln(p / (1 - p)) / 16``.
    Works elementwise on arrays.
    """
    clipped = np.clip(p, LOGIT_EPS, 1.0 - LOGIT_EPS)
    result = np.log(clipped / (1.0 - clipped)) / LOGIT_SCALE
    if np.ndim(result) == 0:
        return float(result)
    return result


def distance_squared(x0: float, y0: float, x1: float, y1: float) -> float:
    dx = x1 - x0
    dy = y1 - y0
    return dx * dx + dy * dy


__all__ = ["logit", "distance_squared"]
