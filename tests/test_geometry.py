"""
Tests for region resolution and block partitioning.
"""

import pytest

from mosaicify.config import AbsoluteRect, Anchor, Offset, Region
from mosaicify.geometry import iter_blocks, resolve_region


def make_region(x, y, width, height):
    return Region(name="test", x=x, y=y, width=width, height=height)


class TestOffset:
    """Test the signed offset encoding."""

    def test_non_negative_is_from_start(self):
        assert Offset.from_signed(0) == Offset(Anchor.START, 0)
        assert Offset.from_signed(15) == Offset(Anchor.START, 15)

    def test_negative_is_from_end(self):
        assert Offset.from_signed(-10) == Offset(Anchor.END, 10)

    def test_from_end_never_negative(self):
        assert Offset(Anchor.END, 500).to_absolute(100) == 0


class TestResolveRegion:
    """Test CoordinateResolver semantics."""

    def test_positive_offsets_pass_through(self):
        rect = resolve_region(make_region(10, 20, 30, 40), 100, 100)
        assert rect == AbsoluteRect(10, 20, 30, 40)

    @pytest.mark.parametrize("x,y", [(150, 5), (5, 150), (999, 999)])
    def test_positive_offsets_clamped_to_last_pixel(self, x, y):
        rect = resolve_region(make_region(x, y, 10, 10), 100, 100)
        assert rect.x == min(x, 99)
        assert rect.y == min(y, 99)

    @pytest.mark.parametrize("k", [1, 10, 50, 100])
    def test_negative_offset_counts_from_far_edge(self, k):
        rect = resolve_region(make_region(-k, -k, 1, 1), 100, 80)
        assert rect.x == 100 - k
        assert rect.y == max(0, 80 - k)

    def test_bottom_right_corner_scenario(self):
        rect = resolve_region(make_region(-10, -10, 20, 20), 100, 100)
        assert rect == AbsoluteRect(90, 90, 10, 10)

    def test_size_clamped_to_image(self):
        rect = resolve_region(make_region(50, 60, 500, 500), 100, 100)
        assert rect == AbsoluteRect(50, 60, 50, 40)

    def test_negative_offset_beyond_image_starts_at_zero(self):
        rect = resolve_region(make_region(-300, -300, 20, 20), 100, 100)
        assert rect == AbsoluteRect(0, 0, 20, 20)

    def test_zero_sized_image(self):
        rect = resolve_region(make_region(10, -10, 20, 20), 0, 0)
        assert rect == AbsoluteRect(0, 0, 0, 0)

    def test_zero_sized_region_does_not_raise(self):
        rect = resolve_region(make_region(5, 5, 0, 0), 100, 100)
        assert rect.area == 0

    def test_always_within_bounds(self):
        """Sweep offsets and sizes; the rectangle must stay on the canvas."""
        sizes = [(0, 0), (1, 1), (7, 13), (100, 100)]
        offsets = [-200, -100, -7, -1, 0, 1, 6, 99, 100, 250]
        extents = [0, 1, 5, 50, 300]

        for img_w, img_h in sizes:
            for x in offsets:
                for y in offsets:
                    for extent in extents:
                        rect = resolve_region(make_region(x, y, extent, extent), img_w, img_h)
                        assert rect.x >= 0 and rect.y >= 0
                        assert rect.width >= 0 and rect.height >= 0
                        assert rect.x + rect.width <= img_w
                        assert rect.y + rect.height <= img_h


class TestIterBlocks:
    """Test block partitioning."""

    def test_ten_by_ten_with_block_four(self):
        blocks = list(iter_blocks(AbsoluteRect(0, 0, 10, 10), 4))

        assert len(blocks) == 9
        assert sorted({b.width for b in blocks}) == [2, 4]
        assert [b.width for b in blocks[:3]] == [4, 4, 2]
        assert [b.height for b in blocks[::3]] == [4, 4, 2]

    def test_row_major_order_from_origin(self):
        blocks = list(iter_blocks(AbsoluteRect(3, 5, 8, 8), 4))
        origins = [(b.x, b.y) for b in blocks]
        assert origins == [(3, 5), (7, 5), (3, 9), (7, 9)]

    def test_even_division_keeps_full_blocks(self):
        blocks = list(iter_blocks(AbsoluteRect(0, 0, 12, 8), 4))
        assert all(b.width == 4 and b.height == 4 for b in blocks)
        assert len(blocks) == 6

    @pytest.mark.parametrize("width,block_size", [(10, 3), (17, 5), (9, 9), (5, 8)])
    def test_rightmost_column_width(self, width, block_size):
        rect = AbsoluteRect(2, 2, width, 6)
        blocks = list(iter_blocks(rect, block_size))
        rightmost = max(b.x for b in blocks)
        edge_widths = {b.width for b in blocks if b.x == rightmost}

        expected = width % block_size or block_size
        assert edge_widths == {min(expected, width)}

    def test_blocks_cover_rect_without_overlap(self):
        rect = AbsoluteRect(1, 2, 11, 7)
        covered = set()
        for block in iter_blocks(rect, 3):
            assert block.right <= rect.right and block.bottom <= rect.bottom
            for py in range(block.y, block.bottom):
                for px in range(block.x, block.right):
                    assert (px, py) not in covered
                    covered.add((px, py))
        assert len(covered) == rect.area

    def test_zero_area_rect_has_no_blocks(self):
        assert list(iter_blocks(AbsoluteRect(5, 5, 0, 10), 4)) == []

    def test_invalid_block_size(self):
        with pytest.raises(ValueError):
            list(iter_blocks(AbsoluteRect(0, 0, 4, 4), 0))
