from headtrack.backends.base import FaceDetectorBackend, LandmarkModelBackend
from headtrack.backends.onnx import OnnxLandmarkModel
from headtrack.backends.yunet import YuNetDetector

__all__ = [
    "FaceDetectorBackend",
    "LandmarkModelBackend",
    "OnnxLandmarkModel",
    "YuNetDetector",
]
