"""ONNX Runtime backend for landmark model inference."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

import numpy as np

from headtrack.config import SessionConfig

logger = logging.getLogger(__name__)

INPUT_NODE = "input"
OUTPUT_NODE = "output"

_GRAPH_OPTIMIZATION = {
    "disable": "ORT_DISABLE_ALL",
    "basic": "ORT_ENABLE_BASIC",
    "extended": "ORT_ENABLE_EXTENDED",
    "all": "ORT_ENABLE_ALL",
}

_EXECUTION_MODE = {
    "sequential": "ORT_SEQUENTIAL",
    "parallel": "ORT_PARALLEL",
}


def _select_providers(ort, device: str) -> List[str]:
    available = ort.get_available_providers()
    if device.startswith("cuda"):
        if "CUDAExecutionProvider" in available:
            return ["CUDAExecutionProvider", "CPUExecutionProvider"]
        logger.warning("CUDAExecutionProvider not available, falling back to CPU")
    return ["CPUExecutionProvider"]


class OnnxLandmarkModel:
    """Landmark model session bound for the lifetime of a tracker.

    Args:
        model_path: Path to the landmark ONNX file.
        config: Session threading and optimization options.
        input_name: Name of the input node.
        output_name: Name of the output node.
    """

    def __init__(
        self,
        model_path: Union[str, Path],
        config: Optional[SessionConfig] = None,
        input_name: str = INPUT_NODE,
        output_name: str = OUTPUT_NODE,
    ):
        self._model_path = Path(model_path)
        self._config = config or SessionConfig()
        self._input_name = input_name
        self._output_name = output_name
        self._session = None
        self._initialized = False

    def initialize(self) -> None:
        if self._initialized:
            return

        import onnxruntime as ort

        if not self._model_path.exists():
            raise FileNotFoundError(
                f"Landmark model not found at {self._model_path}."
            )

        cfg = self._config
        try:
            optimization = _GRAPH_OPTIMIZATION[cfg.graph_optimization]
            mode = _EXECUTION_MODE[cfg.execution_mode]
        except KeyError as e:
            raise ValueError(f"Invalid session option: {e}") from e

        options = ort.SessionOptions()
        options.graph_optimization_level = getattr(ort.GraphOptimizationLevel, optimization)
        options.execution_mode = getattr(ort.ExecutionMode, mode)
        options.inter_op_num_threads = cfg.inter_op_threads
        options.intra_op_num_threads = cfg.intra_op_threads

        self._session = ort.InferenceSession(
            str(self._model_path),
            sess_options=options,
            providers=_select_providers(ort, cfg.device),
        )
        self._initialized = True
        logger.info("Landmark model initialized from %s", self._model_path)

    def run(self, tensor: np.ndarray) -> np.ndarray:
        if not self._initialized:
            raise RuntimeError("Backend not initialized. Call initialize() first.")

        try:
            outputs = self._session.run(
                [self._output_name], {self._input_name: tensor}
            )
        except Exception as e:
            raise RuntimeError(f"Landmark inference failed: {e}") from e
        return outputs[0]

    def cleanup(self) -> None:
        self._session = None
        self._initialized = False
        logger.info("Landmark model cleaned up")


__all__ = ["OnnxLandmarkModel", "INPUT_NODE", "OUTPUT_NODE"]
