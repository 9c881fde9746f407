"""Temporal landmark filters.

Filters follow the ``filter(input, output)`` contract: read the current
landmarks from ``input``, write the smoothed landmarks into ``output``.
``input`` and ``output`` may be the same array.
"""

from __future__ import annotations

from collections import deque
from typing import Optional, Protocol

import numpy as np


class LandmarkFilter(Protocol):
    """Protocol for temporal landmark filters."""

    def filter(self, landmarks: np.ndarray, out: np.ndarray) -> None:
        ...


class MAFilter:
    """Moving average over the last ``steps`` frames.

    Args:
        steps: Window length in frames.
    """

    def __init__(self, steps: int = 3) -> None:
        if steps < 1:
            raise ValueError(f"steps must be >= 1, got {steps}")
        self._history: deque[np.ndarray] = deque(maxlen=steps)

    def filter(self, landmarks: np.ndarray, out: np.ndarray) -> None:
        self._history.append(np.array(landmarks, dtype=np.float64, copy=True))
        out[...] = np.mean(self._history, axis=0)

    def reset(self) -> None:
        self._history.clear()


class EAFilter:
    """Exponential moving average smoother for landmarks.

    Args:
        alpha: EMA smoothing factor in (0, 1]. Lower = smoother.
    """

    def __init__(self, alpha: float = 0.5) -> None:
        if not 0.0 < alpha <= 1.0:
            raise ValueError(f"alpha must be in (0, 1], got {alpha}")
        self._alpha = alpha
        self._state: Optional[np.ndarray] = None

    def filter(self, landmarks: np.ndarray, out: np.ndarray) -> None:
        raw = np.asarray(landmarks, dtype=np.float64)
        if self._state is None:
            self._state = raw.copy()
        else:
            a = self._alpha
            self._state = a * raw + (1 - a) * self._state
        out[...] = self._state

    def reset(self) -> None:
        self._state = None


__all__ = ["LandmarkFilter", "MAFilter", "EAFilter"]
