"""
Tune space analyzer tests.

Covers the backward scan over 0xFF padding, degenerate regions and the
32KB tune split.
"""

import pytest

from rom_inspector import Region, SpaceUsage, analyze_space, analyze_tunes, tune_regions
from rom_inspector.constants import FILE_SIZE_32KB, FILE_SIZE_64KB


def _image(size: int, used: dict = None) -> bytes:
    """0xFF image with selected offsets overwritten."""
    data = bytearray(b"\xFF" * size)
    for offset, value in (used or {}).items():
        data[offset] = value
    return bytes(data)


# ─── analyze_space ─────────────────────────

class TestAnalyzeSpace:
    def test_all_padding_is_unused(self):
        usage = analyze_space(_image(64), Region(0, 64))
        assert usage == SpaceUsage(used_bytes=0, leftover_bytes=64)

    def test_first_byte_used_counts_whole_region(self):
        usage = analyze_space(_image(64, {0: 0x12}), Region(0, 1))
        assert usage.used_bytes == 1
        data = _image(32, {8: 0x00})
        usage = analyze_space(data, Region(8, 32))
        assert usage.used_bytes == 1
        assert usage.leftover_bytes == 23

    def test_single_byte_at_start_with_padding_after(self):
        data = _image(16, {0: 0x42})
        usage = analyze_space(data, Region(0, 1))
        assert usage == SpaceUsage(1, 0)

    def test_last_used_byte_sets_boundary(self):
        data = _image(100, {0: 0x01, 40: 0x02})
        usage = analyze_space(data, Region(0, 100))
        assert usage.used_bytes == 41
        assert usage.leftover_bytes == 59

    def test_padding_inside_used_part_not_counted_free(self):
        data = _image(10, {0: 0x00, 9: 0x00})
        assert analyze_space(data, Region(0, 10)) == SpaceUsage(10, 0)

    def test_empty_region(self):
        assert analyze_space(_image(16, {4: 0}), Region(4, 4)) == SpaceUsage(0, 0)

    def test_region_offset_into_buffer(self):
        data = _image(64, {10: 0x00, 40: 0x33})
        usage = analyze_space(data, Region(32, 64))
        assert usage == SpaceUsage(9, 23)

    def test_scan_stops_at_region_start(self):
        """Used bytes before the region must not leak into it."""
        data = _image(64, {0: 0x00})
        assert analyze_space(data, Region(16, 64)) == SpaceUsage(0, 48)

    def test_sum_equals_region_length(self):
        data = bytes((i * 37) & 0xFF for i in range(256))
        for start, end in [(0, 256), (5, 200), (100, 101), (255, 256), (17, 17)]:
            usage = analyze_space(data, Region(start, end))
            assert usage.used_bytes + usage.leftover_bytes == end - start

    def test_region_past_buffer_rejected(self):
        with pytest.raises(ValueError):
            analyze_space(_image(16), Region(0, 32))


class TestRegion:
    def test_invalid_bounds(self):
        with pytest.raises(ValueError):
            Region(10, 5)
        with pytest.raises(ValueError):
            Region(-1, 5)

    def test_label(self):
        assert Region(0, 0x8000).label() == "0x0000 - 0x7FFF"
        assert Region(0x8000, 0x10000).label() == "0x8000 - 0xFFFF"


# ─── Tunes ─────────────────────────────────

class TestTunes:
    def test_32kb_has_one_tune(self):
        assert tune_regions(FILE_SIZE_32KB) == [Region(0, 0x8000)]

    def test_64kb_has_two_tunes(self):
        assert tune_regions(FILE_SIZE_64KB) == [Region(0, 0x8000), Region(0x8000, 0x10000)]

    def test_short_and_empty_images(self):
        assert tune_regions(100) == [Region(0, 100)]
        assert tune_regions(0) == []

    def test_analyze_tunes_per_bank(self):
        data = _image(FILE_SIZE_64KB, {0x0FFF: 0x00, 0x8000: 0x01})
        (r1, u1), (r2, u2) = analyze_tunes(data)
        assert u1 == SpaceUsage(0x1000, 0x8000 - 0x1000)
        assert u2 == SpaceUsage(1, 0x7FFF)
