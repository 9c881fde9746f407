"""Per-frame tracking: detect -> select -> crop -> landmarks -> filter -> pose.

Coordinate spaces:
  - frame: pixels of the caller's image
  - detector input: frame resized to the detector's fixed size
  - model input: crop resized to the landmark model's input size

A Tracker owns scratch buffers and inference sessions that are reused across
calls. Use one instance per thread or stream; calls must not overlap.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from headtrack.backends.base import FaceDetectorBackend, LandmarkModelBackend
from headtrack.constants import SELECTION_CENTER_SPACE, SELECTION_DETECTOR, SELECTION_FRAME
from headtrack.crop import crop_scales, expand_detection, extract_crop, resize_for_detector
from headtrack.decoders.base import LandmarkDecoder
from headtrack.filters import LandmarkFilter
from headtrack.selection import select_center_weighted
from headtrack.solver import PositionSolver
from headtrack.types import FaceResult, TrackerMetadata

logger = logging.getLogger(__name__)


class Tracker:
    """Head tracker parameterized by a landmark decoder.

    Both backends are initialized at construction; a failure there
    propagates and no tracker is created.

    Args:
        detector: Face detector backend.
        landmark_model: Landmark inference backend.
        decoder: Preprocessing/decode strategy matching ``landmark_model``.
        solver: Pose solver that owns pose and calibration state.
        detector_input_size: (width, height) frames are resized to before
            detection.
        selection_space: Centre used for face selection, ``"frame"`` or
            ``"detector"``. See ``constants.SELECTION_CENTER_SPACE``.

    Example:
        >>> with Tracker(detector, model, HeatmapDecoder(), solver) as tracker:
        ...     result = FaceResult()
        ...     tracker.predict(frame, result)
    """

    def __init__(
        self,
        detector: FaceDetectorBackend,
        landmark_model: LandmarkModelBackend,
        decoder: LandmarkDecoder,
        solver: PositionSolver,
        detector_input_size: tuple[int, int] = (114, 114),
        selection_space: str = SELECTION_CENTER_SPACE,
    ):
        if selection_space not in (SELECTION_FRAME, SELECTION_DETECTOR):
            raise ValueError(f"Unknown selection space: {selection_space}")
        self._detector = detector
        self._landmark_model = landmark_model
        self._decoder = decoder
        self._solver = solver
        self._detector_input_size = (int(detector_input_size[0]), int(detector_input_size[1]))
        self._selection_space = selection_space

        self._detector.initialize()
        try:
            self._landmark_model.initialize()
        except Exception:
            self._detector.cleanup()
            raise
        self._active = True

    @property
    def decoder(self) -> LandmarkDecoder:
        return self._decoder

    @property
    def detector_input_size(self) -> tuple[int, int]:
        return self._detector_input_size

    @property
    def selection_space(self) -> str:
        return self._selection_space

    def predict(
        self,
        image: np.ndarray,
        result: FaceResult,
        landmark_filter: Optional[LandmarkFilter] = None,
    ) -> FaceResult:
        """Track the most central face in ``image`` and update ``result``.

        ``result.landmarks`` is left untouched when no face is tracked.
        Inference errors propagate.
        """
        if not self._active:
            raise RuntimeError("Tracker has been cleaned up")

        frame_h, frame_w = image.shape[:2]
        det_w, det_h = self._detector_input_size

        resized = resize_for_detector(image, self._detector_input_size)
        boxes = self._detector.detect(resized)

        result.detected = False
        if not boxes:
            logger.debug("No faces detected")
            return result

        if self._selection_space == SELECTION_FRAME:
            sel_w, sel_h = frame_w, frame_h
        else:
            sel_w, sel_h = det_w, det_h
        index = select_center_weighted(boxes, sel_w, sel_h, self._decoder.row_major)
        logger.debug("%d faces detected, tracking #%d", len(boxes), index)

        box = expand_detection(
            boxes[index], frame_w / det_w, frame_h / det_h, frame_w, frame_h,
        )
        result.box = box

        crop = extract_crop(image, box)
        if crop is None:
            logger.debug("Degenerate crop %s, treating as no detection", box.as_tuple())
            return result

        _, _, in_h, in_w = self._decoder.input_shape
        scale = crop_scales(box, in_w, in_h)

        tensor = self._decoder.preprocess(crop)
        output = self._landmark_model.run(tensor)
        self._decoder.decode(output, (box.x0, box.y0), scale, result.landmarks)
        result.detected = True

        if landmark_filter is not None:
            landmark_filter.filter(result.landmarks, result.landmarks)

        self._solver.solve_rotation(result)
        return result

    def calibrate(self, result: FaceResult) -> None:
        """Re-establish the head scale baseline from ``result``."""
        self._solver.calibrate_head_scale(result)

    def get_metadata(self) -> TrackerMetadata:
        return TrackerMetadata(head_width_scale=self._solver.get_x_scale())

    def cleanup(self) -> None:
        if not self._active:
            return
        self._active = False
        try:
            self._landmark_model.cleanup()
        finally:
            self._detector.cleanup()
        logger.info("Tracker cleaned up")

    def __enter__(self) -> "Tracker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()


__all__ = ["Tracker"]
