"""Tracker construction from configuration."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from headtrack.backends.onnx import OnnxLandmarkModel
from headtrack.backends.yunet import YuNetDetector
from headtrack.config import TrackerConfig, TrackerModel
from headtrack.decoders.base import LandmarkDecoder
from headtrack.decoders.heatmap import HeatmapDecoder
from headtrack.decoders.regression import RegressionDecoder
from headtrack.paths import resolve_model_path
from headtrack.solver import PositionSolver
from headtrack.tracker import Tracker

logger = logging.getLogger(__name__)


def create_decoder(model: Union[TrackerModel, str], row_major: bool = True) -> LandmarkDecoder:
    """Return the decoder for a landmark model family."""
    if isinstance(model, str):
        model = TrackerModel.from_string(model)
    if model is TrackerModel.STANDARD:
        return HeatmapDecoder(row_major=row_major)
    return RegressionDecoder(row_major=row_major)


def create_tracker(
    config: TrackerConfig,
    solver: PositionSolver,
    models_dir: Optional[Path] = None,
) -> Tracker:
    """Build a tracker with the YuNet detector and an ONNX landmark model.

    Raises:
        FileNotFoundError: If a model file is missing.
    """
    detection_path = resolve_model_path(config.detection_model, models_dir)
    landmark_path = resolve_model_path(config.effective_landmark_model, models_dir)

    detector = YuNetDetector(detection_path, config.detector)
    landmark_model = OnnxLandmarkModel(landmark_path, config.session)
    decoder = create_decoder(config.model, config.row_major)

    logger.info("Creating %s tracker (landmarks=%s)", config.model.value, landmark_path)
    return Tracker(
        detector,
        landmark_model,
        decoder,
        solver,
        detector_input_size=config.detector.input_size,
        selection_space=config.selection_space,
    )


__all__ = ["create_decoder", "create_tracker"]
