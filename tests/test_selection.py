"""Tests for center-weighted face selection."""

from headtrack.selection import image_center, select_center_weighted
from headtrack.types import DetectionBox


def _box_at(cx, cy, size=2.0):
    return DetectionBox(x=cx - size / 2, y=cy - size / 2, width=size, height=size, score=0.9)


class TestImageCenter:
    def test_row_major(self):
        assert image_center(200, 100, row_major=True) == (50.0, 100.0)

    def test_xy(self):
        assert image_center(200, 100, row_major=False) == (100.0, 50.0)

    def test_integer_halving(self):
        assert image_center(101, 51, row_major=False) == (50.0, 25.0)


class TestSelectCenterWeighted:
    def test_empty(self):
        assert select_center_weighted([], 100, 100) is None

    def test_single(self):
        assert select_center_weighted([_box_at(10, 10)], 100, 100) == 0

    def test_first_minimum_wins(self):
        # squared distances from (50, 50): 5, 2, 2
        boxes = [_box_at(52, 51), _box_at(51, 51), _box_at(49, 49)]
        assert select_center_weighted(boxes, 100, 100) == 1

    def test_prefers_center_over_score(self):
        boxes = [
            DetectionBox(x=0, y=0, width=20, height=20, score=0.99),
            DetectionBox(x=40, y=40, width=20, height=20, score=0.81),
        ]
        assert select_center_weighted(boxes, 100, 100) == 1

    def test_axis_convention_changes_center(self):
        # 200 wide, 100 tall: (x, y) center is (100, 50); row-major is (50, 100)
        boxes = [_box_at(100, 50), _box_at(50, 100)]
        assert select_center_weighted(boxes, 200, 100, row_major=False) == 0
        assert select_center_weighted(boxes, 200, 100, row_major=True) == 1
