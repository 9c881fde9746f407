"""Configuration classes for the tracker.

Example:
    >>> from headtrack.config import DetectorConfig, TrackerConfig, TrackerModel
    >>>
    >>> config = TrackerConfig(
    ...     model=TrackerModel.EFFICIENT,
    ...     detector=DetectorConfig(score_threshold=0.7),
    ... )
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from headtrack.constants import SELECTION_CENTER_SPACE


class TrackerModel(Enum):
    """Landmark model family, fixed for the lifetime of a tracker."""

    STANDARD = "standard"  # 224px heatmap model
    EFFICIENT = "efficient"  # 114px direct-regression model

    @classmethod
    def from_string(cls, value: str) -> "TrackerModel":
        aliases = {
            "standard": cls.STANDARD,
            "heatmap": cls.STANDARD,
            "efficient": cls.EFFICIENT,
            "regression": cls.EFFICIENT,
        }
        try:
            return aliases[value.strip().lower()]
        except KeyError:
            raise ValueError(
                f"Unknown tracker model: {value}. "
                f"Valid names: {sorted(aliases)}"
            )


DEFAULT_DETECTOR_MODEL = "face_detection_yunet_2022mar.onnx"

DEFAULT_LANDMARK_MODELS = {
    TrackerModel.STANDARD: "lm_model_heatmap.onnx",
    TrackerModel.EFFICIENT: "lm_model_regression.onnx",
}


@dataclass(frozen=True)
class DetectorConfig:
    """Face detector parameters.

    Attributes:
        score_threshold: Minimum detection confidence.
        nms_threshold: IoU threshold for non-maximum suppression.
        top_k: Maximum number of candidates kept before NMS.
        input_size: Fixed (width, height) the frame is resized to.
    """

    score_threshold: float = 0.8
    nms_threshold: float = 0.5
    top_k: int = 7
    input_size: Tuple[int, int] = (114, 114)


@dataclass(frozen=True)
class SessionConfig:
    """Inference session options for the landmark model.

    Attributes:
        inter_op_threads: Threads for parallel graph execution.
        intra_op_threads: Threads inside a single operator.
        graph_optimization: "disable", "basic", "extended" or "all".
        execution_mode: "sequential" or "parallel".
        device: "cpu" or "cuda[:N]".
    """

    inter_op_threads: int = 1
    intra_op_threads: int = 1
    graph_optimization: str = "extended"
    execution_mode: str = "parallel"
    device: str = "cpu"


@dataclass(frozen=True)
class TrackerConfig:
    """Complete tracker configuration.

    Attributes:
        model: Landmark model family.
        detection_model: Detector model path or file name in the models dir.
        landmark_model: Landmark model path; defaults per ``model``.
        detector: Detector parameters.
        session: Inference session options.
        row_major: Landmark pair order, see ``constants.ROW_MAJOR_LANDMARKS``.
        selection_space: Centre used for face selection, see
            ``constants.SELECTION_CENTER_SPACE``.
    """

    model: TrackerModel = TrackerModel.STANDARD
    detection_model: str = DEFAULT_DETECTOR_MODEL
    landmark_model: Optional[str] = None
    detector: DetectorConfig = field(default_factory=DetectorConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    row_major: bool = True
    selection_space: str = SELECTION_CENTER_SPACE

    @property
    def effective_landmark_model(self) -> str:
        return self.landmark_model or DEFAULT_LANDMARK_MODELS[self.model]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrackerConfig":
        """Create TrackerConfig from a dictionary (e.g., loaded from YAML).

        Example:
            >>> config = TrackerConfig.from_dict({
            ...     "model": "efficient",
            ...     "detector": {"score_threshold": 0.7},
            ... })
        """
        data = data or {}
        model = data.get("model", TrackerModel.STANDARD)
        if isinstance(model, str):
            model = TrackerModel.from_string(model)

        det_data = dict(data.get("detector") or {})
        if "input_size" in det_data:
            det_data["input_size"] = tuple(det_data["input_size"])

        return cls(
            model=model,
            detection_model=data.get("detection_model", DEFAULT_DETECTOR_MODEL),
            landmark_model=data.get("landmark_model"),
            detector=DetectorConfig(**det_data),
            session=SessionConfig(**(data.get("session") or {})),
            row_major=bool(data.get("row_major", True)),
            selection_space=data.get("selection_space", SELECTION_CENTER_SPACE),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "TrackerConfig":
        """Load TrackerConfig from a YAML file.

        Raises:
            FileNotFoundError: If the file doesn't exist.
        """
        import yaml

        with open(yaml_path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "model": self.model.value,
            "detection_model": self.detection_model,
            "landmark_model": self.effective_landmark_model,
            "detector": {
                "score_threshold": self.detector.score_threshold,
                "nms_threshold": self.detector.nms_threshold,
                "top_k": self.detector.top_k,
                "input_size": list(self.detector.input_size),
            },
            "session": {
                "inter_op_threads": self.session.inter_op_threads,
                "intra_op_threads": self.session.intra_op_threads,
                "graph_optimization": self.session.graph_optimization,
                "execution_mode": self.session.execution_mode,
                "device": self.session.device,
            },
            "row_major": self.row_major,
            "selection_space": self.selection_space,
        }


__all__ = [
    "TrackerModel",
    "DetectorConfig",
    "SessionConfig",
    "TrackerConfig",
    "DEFAULT_DETECTOR_MODEL",
    "DEFAULT_LANDMARK_MODELS",
]
