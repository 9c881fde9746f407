from headtrack.decoders.base import LandmarkDecoder
from headtrack.decoders.heatmap import HeatmapDecoder, decode_heatmaps
from headtrack.decoders.regression import RegressionDecoder, decode_regression

__all__ = [
    "LandmarkDecoder",
    "HeatmapDecoder",
    "RegressionDecoder",
    "decode_heatmaps",
    "decode_regression",
]
