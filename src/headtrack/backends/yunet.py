"""YuNet face detection backend (OpenCV ``FaceDetectorYN``).

Output rows from the detector are ``[x, y, w, h, 10 landmark coords, score]``
in the coordinate space of the input image.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

import numpy as np

from headtrack.config import DetectorConfig
from headtrack.types import DetectionBox

logger = logging.getLogger(__name__)

_SCORE_COLUMN = 14


class YuNetDetector:
    """Face detection backend using OpenCV's YuNet model.

    Args:
        model_path: Path to the YuNet ONNX file.
        config: Detector thresholds and fixed input size.

    Example:
        >>> detector = YuNetDetector("face_detection_yunet_2022mar.onnx")
        >>> detector.initialize()
        >>> boxes = detector.detect(resized)
        >>> detector.cleanup()
    """

    def __init__(
        self,
        model_path: Union[str, Path],
        config: Optional[DetectorConfig] = None,
    ):
        self._model_path = Path(model_path)
        self._config = config or DetectorConfig()
        self._detector = None
        self._initialized = False

    @property
    def input_size(self) -> tuple[int, int]:
        return tuple(self._config.input_size)

    def initialize(self) -> None:
        if self._initialized:
            return

        import cv2

        if not self._model_path.exists():
            raise FileNotFoundError(
                f"Face detection model not found at {self._model_path}."
            )

        cfg = self._config
        self._detector = cv2.FaceDetectorYN.create(
            str(self._model_path),
            "",
            tuple(cfg.input_size),
            cfg.score_threshold,
            cfg.nms_threshold,
            cfg.top_k,
        )
        self._initialized = True
        logger.info(
            "YuNet detector initialized from %s (input=%s, score>=%.2f)",
            self._model_path, cfg.input_size, cfg.score_threshold,
        )

    def detect(self, image: np.ndarray) -> List[DetectionBox]:
        if not self._initialized:
            raise RuntimeError("Backend not initialized. Call initialize() first.")

        _, faces = self._detector.detect(image)
        if faces is None:
            return []

        return [
            DetectionBox(
                x=float(row[0]),
                y=float(row[1]),
                width=float(row[2]),
                height=float(row[3]),
                score=float(row[_SCORE_COLUMN]) if len(row) > _SCORE_COLUMN else 0.0,
            )
            for row in faces
        ]

    def cleanup(self) -> None:
        self._detector = None
        self._initialized = False
        logger.info("YuNet detector cleaned up")


__all__ = ["YuNetDetector"]
