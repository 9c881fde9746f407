"""Tests for the heatmap and direct-regression landmark decoders."""

import math

import numpy as np
import pytest

from headtrack.decoders import HeatmapDecoder, RegressionDecoder, decode_heatmaps, decode_regression
from headtrack.decoders.heatmap import IMAGENET_MEAN, IMAGENET_STD


def _squash(pixels):
    """Offset channel value whose decoded offset is ``pixels``."""
    return 1.0 / (1.0 + math.exp(-16.0 * pixels / 223.0))


def _heatmaps(peaks=None, offsets=0.5):
    """Build a [1, 198, 28, 28] output with the given confidence peaks.

    Args:
        peaks: {landmark: (row, col, row_offset_value, col_offset_value)}.
        offsets: Fill value for the offset channels.
    """
    maps = np.zeros((3, 66, 28, 28), dtype=np.float32)
    maps[1:] = offsets
    for lm, (row, col, off_r, off_c) in (peaks or {}).items():
        maps[0, lm, row, col] = 1.0
        maps[1, lm, row, col] = off_r
        maps[2, lm, row, col] = off_c
    return maps.reshape(1, 198, 28, 28)


class TestDecodeHeatmaps:
    def test_golden_peak(self):
        out = np.zeros((66, 2), dtype=np.float32)
        heatmaps = _heatmaps({0: (5, 10, 0.5, 0.5)})
        decode_heatmaps(heatmaps, origin=(20, 40), scale=(2.0, 3.0), out=out, row_major=True)

        assert out[0, 0] == pytest.approx(40 + 3.0 * (223 * 5 / 27))
        assert out[0, 1] == pytest.approx(20 + 2.0 * (223 * 10 / 27))

    def test_golden_values(self):
        out = np.zeros((66, 2), dtype=np.float32)
        heatmaps = _heatmaps({0: (5, 10, 0.5, 0.5)})
        decode_heatmaps(heatmaps, origin=(0, 0), scale=(1.0, 1.0), out=out)

        assert out[0, 0] == pytest.approx(41.296296, abs=1e-4)
        assert out[0, 1] == pytest.approx(82.592593, abs=1e-4)

    def test_unpeaked_landmarks_use_first_cell(self):
        out = np.zeros((66, 2), dtype=np.float32)
        decode_heatmaps(_heatmaps({0: (5, 10, 0.5, 0.5)}), (7, 9), (1.0, 1.0), out)
        # all-zero confidence -> argmax 0 -> grid (0, 0), offset 0
        assert out[1, 0] == pytest.approx(9.0)
        assert out[1, 1] == pytest.approx(7.0)

    def test_positive_offset(self):
        out = np.zeros((66, 2), dtype=np.float32)
        heatmaps = _heatmaps({3: (2, 4, _squash(2.0), _squash(5.0))})
        decode_heatmaps(heatmaps, (0, 0), (1.0, 1.0), out)

        assert out[3, 0] == pytest.approx(223 * 2 / 27 + 2)
        assert out[3, 1] == pytest.approx(223 * 4 / 27 + 5)

    def test_negative_offset_floors(self):
        out = np.zeros((66, 2), dtype=np.float32)
        heatmaps = _heatmaps({3: (20, 20, _squash(-3.0), _squash(-1.0))})
        decode_heatmaps(heatmaps, (0, 0), (1.0, 1.0), out)

        assert out[3, 0] == pytest.approx(223 * 20 / 27 - 3)
        assert out[3, 1] == pytest.approx(223 * 20 / 27 - 1)

    def test_rounding_bias(self):
        # offset 0.95px rounds up through the +0.1 bias
        out = np.zeros((66, 2), dtype=np.float32)
        heatmaps = _heatmaps({0: (0, 0, _squash(0.95), _squash(0.85))})
        decode_heatmaps(heatmaps, (0, 0), (1.0, 1.0), out)

        assert out[0, 0] == pytest.approx(1.0)
        assert out[0, 1] == pytest.approx(0.0)

    def test_xy_order(self):
        row_major = np.zeros((66, 2), dtype=np.float32)
        xy = np.zeros((66, 2), dtype=np.float32)
        heatmaps = _heatmaps({0: (5, 10, 0.5, 0.5)})
        decode_heatmaps(heatmaps, (20, 40), (2.0, 3.0), row_major, row_major=True)
        decode_heatmaps(heatmaps, (20, 40), (2.0, 3.0), xy, row_major=False)

        assert np.array_equal(row_major[:, ::-1], xy)

    def test_accepts_flat_output(self):
        out = np.zeros((66, 2), dtype=np.float32)
        flat = _heatmaps({0: (5, 10, 0.5, 0.5)}).ravel()
        decode_heatmaps(flat, (0, 0), (1.0, 1.0), out)
        assert out[0, 0] == pytest.approx(223 * 5 / 27)

    def test_wrong_size(self):
        out = np.zeros((66, 2), dtype=np.float32)
        with pytest.raises(ValueError):
            decode_heatmaps(np.zeros((1, 66, 28, 28)), (0, 0), (1.0, 1.0), out)


class TestDecodeRegression:
    def test_golden_uniform(self):
        out = np.zeros((66, 2), dtype=np.float32)
        values = np.full((1, 132), 0.5, dtype=np.float32)
        decode_regression(values, origin=(10, 20), scale=(0.5, 2.0), out=out, row_major=True)

        # 0.5 * 114 = 57
        assert np.allclose(out[:, 0], 57 * 2.0 + 20)
        assert np.allclose(out[:, 1], 57 * 0.5 + 10)

    def test_pair_order(self):
        out = np.zeros((66, 2), dtype=np.float32)
        values = np.zeros(132, dtype=np.float32)
        values[0] = 0.25  # x of landmark 0
        values[1] = 0.75  # y of landmark 0
        decode_regression(values, (0, 0), (1.0, 1.0), out, row_major=True)

        assert out[0, 0] == pytest.approx(0.75 * 114)
        assert out[0, 1] == pytest.approx(0.25 * 114)

    def test_xy_order(self):
        out = np.zeros((66, 2), dtype=np.float32)
        values = np.zeros(132, dtype=np.float32)
        values[0] = 0.25
        values[1] = 0.75
        decode_regression(values, (0, 0), (1.0, 1.0), out, row_major=False)

        assert out[0, 0] == pytest.approx(0.25 * 114)
        assert out[0, 1] == pytest.approx(0.75 * 114)

    def test_wrong_size(self):
        out = np.zeros((66, 2), dtype=np.float32)
        with pytest.raises(ValueError):
            decode_regression(np.zeros(130), (0, 0), (1.0, 1.0), out)


class TestHeatmapDecoder:
    def test_input_shape(self):
        assert HeatmapDecoder().input_shape == (1, 3, 224, 224)

    def test_preprocess_rgb_normalized(self):
        crop = np.zeros((40, 50, 3), dtype=np.uint8)
        crop[..., 0] = 255  # blue in BGR
        tensor = HeatmapDecoder().preprocess(crop)

        assert tensor.shape == (1, 3, 224, 224)
        assert tensor.dtype == np.float32
        # channel 0 is red after BGR->RGB
        assert tensor[0, 0, 0, 0] == pytest.approx((0.0 - IMAGENET_MEAN[0]) / IMAGENET_STD[0], abs=1e-4)
        assert tensor[0, 2, 0, 0] == pytest.approx((1.0 - IMAGENET_MEAN[2]) / IMAGENET_STD[2], abs=1e-4)

    def test_buffer_reused(self):
        decoder = HeatmapDecoder()
        crop = np.zeros((40, 50, 3), dtype=np.uint8)
        assert decoder.preprocess(crop) is decoder.preprocess(crop)


class TestRegressionDecoder:
    def test_input_shape(self):
        assert RegressionDecoder().input_shape == (1, 1, 114, 114)

    def test_preprocess_standardized(self):
        crop = np.full((60, 70, 3), 128, dtype=np.uint8)
        tensor = RegressionDecoder().preprocess(crop)

        assert tensor.shape == (1, 1, 114, 114)
        assert tensor.dtype == np.float32
        expected = (128 / 255.0 - 0.445313568967) / 0.269246187
        assert np.allclose(tensor, expected, atol=1e-4)

    def test_decode_delegates(self):
        decoder = RegressionDecoder(row_major=False)
        out = np.zeros((66, 2), dtype=np.float32)
        decoder.decode(np.full(132, 0.5), (1, 2), (1.0, 1.0), out)
        assert np.allclose(out[:, 0], 58.0)
        assert np.allclose(out[:, 1], 59.0)
