"""Tests for detector and inference backends."""

import numpy as np
import pytest

from headtrack.backends.onnx import OnnxLandmarkModel
from headtrack.backends.yunet import YuNetDetector
from headtrack.config import DetectorConfig, SessionConfig


class TestOnnxLandmarkModel:
    def test_missing_model(self, tmp_path):
        model = OnnxLandmarkModel(tmp_path / "missing.onnx")
        with pytest.raises(FileNotFoundError):
            model.initialize()

    def test_run_before_initialize(self, tmp_path):
        model = OnnxLandmarkModel(tmp_path / "missing.onnx")
        with pytest.raises(RuntimeError):
            model.run(np.zeros((1, 1, 114, 114), dtype=np.float32))

    def test_invalid_session_option(self, tmp_path):
        path = tmp_path / "lm.onnx"
        path.write_bytes(b"")
        model = OnnxLandmarkModel(path, SessionConfig(execution_mode="async"))
        with pytest.raises(ValueError):
            model.initialize()

    def test_engine_error_wrapped(self, tmp_path):
        class FailingSession:
            def run(self, output_names, feeds):
                raise ValueError("bad input shape")

        model = OnnxLandmarkModel(tmp_path / "lm.onnx")
        model._session = FailingSession()
        model._initialized = True

        with pytest.raises(RuntimeError, match="bad input shape") as exc_info:
            model.run(np.zeros((1, 1, 114, 114), dtype=np.float32))
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_run_uses_node_names(self, tmp_path):
        class RecordingSession:
            def run(self, output_names, feeds):
                self.output_names = output_names
                self.feeds = feeds
                return [np.ones((1, 132), dtype=np.float32)]

        session = RecordingSession()
        model = OnnxLandmarkModel(tmp_path / "lm.onnx")
        model._session = session
        model._initialized = True

        out = model.run(np.zeros((1, 1, 114, 114), dtype=np.float32))
        assert out.shape == (1, 132)
        assert session.output_names == ["output"]
        assert list(session.feeds) == ["input"]

    def test_cleanup(self, tmp_path):
        model = OnnxLandmarkModel(tmp_path / "lm.onnx")
        model._session = object()
        model._initialized = True
        model.cleanup()
        with pytest.raises(RuntimeError):
            model.run(np.zeros((1, 1, 114, 114), dtype=np.float32))


class TestYuNetDetector:
    def test_missing_model(self, tmp_path):
        detector = YuNetDetector(tmp_path / "missing.onnx")
        with pytest.raises(FileNotFoundError):
            detector.initialize()

    def test_detect_before_initialize(self, tmp_path):
        detector = YuNetDetector(tmp_path / "missing.onnx")
        with pytest.raises(RuntimeError):
            detector.detect(np.zeros((114, 114, 3), dtype=np.uint8))

    def test_input_size(self, tmp_path):
        detector = YuNetDetector(tmp_path / "d.onnx", DetectorConfig(input_size=(160, 120)))
        assert detector.input_size == (160, 120)

    def test_rows_to_boxes(self, tmp_path):
        class FakeYN:
            def detect(self, image):
                row = np.zeros(15, dtype=np.float32)
                row[:4] = (10, 20, 30, 40)
                row[14] = 0.93
                return 1, row[np.newaxis, :]

        detector = YuNetDetector(tmp_path / "d.onnx")
        detector._detector = FakeYN()
        detector._initialized = True

        boxes = detector.detect(np.zeros((114, 114, 3), dtype=np.uint8))
        assert len(boxes) == 1
        assert (boxes[0].x, boxes[0].y, boxes[0].width, boxes[0].height) == (10, 20, 30, 40)
        assert boxes[0].score == pytest.approx(0.93)

    def test_no_faces(self, tmp_path):
        class FakeYN:
            def detect(self, image):
                return 1, None

        detector = YuNetDetector(tmp_path / "d.onnx")
        detector._detector = FakeYN()
        detector._initialized = True
        assert detector.detect(np.zeros((114, 114, 3), dtype=np.uint8)) == []
