"""Monocular head tracking: face detection, 66-point landmarks and head pose."""

from headtrack.config import DetectorConfig, SessionConfig, TrackerConfig, TrackerModel
from headtrack.factory import create_decoder, create_tracker
from headtrack.filters import EAFilter, LandmarkFilter, MAFilter
from headtrack.solver import PnPPositionSolver, PositionSolver
from headtrack.tracker import Tracker
from headtrack.types import DetectionBox, FaceBox, FaceResult, TrackerMetadata

__all__ = [
    "DetectorConfig",
    "SessionConfig",
    "TrackerConfig",
    "TrackerModel",
    "create_decoder",
    "create_tracker",
    "EAFilter",
    "LandmarkFilter",
    "MAFilter",
    "PnPPositionSolver",
    "PositionSolver",
    "Tracker",
    "DetectionBox",
    "FaceBox",
    "FaceResult",
    "TrackerMetadata",
]
