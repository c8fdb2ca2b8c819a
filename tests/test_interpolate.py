from __future__ import annotations

import pytest

from toonframe.engine.easing import ease_in_out_cubic, ease_out_back, ease_out_cubic, map_range, seeded_random
from toonframe.engine.interpolate import interpolate
from toonframe.engine.placement import resolve_placement
from toonframe.schema import CameraKeyframe, CharacterPlacement, PlacementKeyframe


def _kf(frame: float, x: float = 0.0, y: float = 0.0, zoom: float = 1.0) -> CameraKeyframe:
    return CameraKeyframe(frame_offset=frame, x=x, y=y, zoom=zoom)


class TestEasing:
    def test_ease_out_cubic_endpoints(self):
        assert ease_out_cubic(0.0) == 0.0
        assert ease_out_cubic(1.0) == 1.0
        assert ease_out_cubic(0.5) == pytest.approx(0.875)

    def test_ease_out_cubic_clamps(self):
        assert ease_out_cubic(-1.0) == 0.0
        assert ease_out_cubic(2.0) == 1.0

    def test_ease_out_back_overshoots(self):
        assert ease_out_back(1.0) == pytest.approx(1.0)
        assert max(ease_out_back(i / 20) for i in range(21)) > 1.0

    def test_ease_in_out_cubic_is_symmetric(self):
        assert ease_in_out_cubic(0.0) == 0.0
        assert ease_in_out_cubic(0.5) == pytest.approx(0.5)
        assert ease_in_out_cubic(1.0) == 1.0
        assert ease_in_out_cubic(0.25) == pytest.approx(1.0 - ease_in_out_cubic(0.75))

    def test_seeded_random_is_repeatable(self):
        values = [seeded_random(s) for s in range(50)]
        assert values == [seeded_random(s) for s in range(50)]
        assert all(0.0 <= v < 1.0 for v in values)
        assert len(set(values)) > 40

    def test_map_range_clamps_and_handles_zero_width(self):
        assert map_range(5, 0, 10, 0, 100) == pytest.approx(50)
        assert map_range(-5, 0, 10, 0, 100) == 0
        assert map_range(15, 0, 10, 0, 100) == 100
        assert map_range(3, 3, 3, 0, 1) == 1
        assert map_range(2, 3, 3, 0, 1) == 0


class TestInterpolate:
    def test_empty_is_identity(self):
        assert interpolate([], 10) == (0.0, 0.0, 1.0)

    def test_single_keyframe_is_constant(self):
        kfs = [_kf(10, 5, 6, 1.5)]
        assert interpolate(kfs, 0) == (5, 6, 1.5)
        assert interpolate(kfs, 99) == (5, 6, 1.5)

    def test_clamps_outside_range(self):
        kfs = [_kf(0, 0, 0, 1.0), _kf(100, 100, 50, 2.0)]
        assert interpolate(kfs, -5) == (0, 0, 1.0)
        assert interpolate(kfs, 150) == (100, 50, 2.0)

    def test_eases_between_keyframes(self):
        kfs = [_kf(0, 0, 0, 1.0), _kf(100, 100, 50, 2.0)]
        x, y, zoom = interpolate(kfs, 50)
        assert x == pytest.approx(87.5)
        assert y == pytest.approx(43.75)
        assert zoom == pytest.approx(1.875)

    def test_hits_keyframes_exactly(self):
        kfs = [_kf(0, 0), _kf(30, 60), _kf(90, -30)]
        assert interpolate(kfs, 30)[0] == 60
        assert interpolate(kfs, 90)[0] == -30

    def test_duplicate_offsets_use_first_bracketing_pair(self):
        kfs = [_kf(0, 0), _kf(10, 10), _kf(10, 20), _kf(20, 30)]
        assert interpolate(kfs, 10)[0] == 10

    def test_pure(self):
        kfs = [_kf(0, 0), _kf(40, 80)]
        assert interpolate(kfs, 17) == interpolate(kfs, 17)


class TestPlacement:
    def test_static_position(self):
        char = CharacterPlacement(id="hero", x=300, y=500)
        assert resolve_placement(char, 42) == (300, 500)

    def test_path_is_linear(self):
        char = CharacterPlacement(
            id="hero",
            path=[
                PlacementKeyframe(frame_offset=0, x=500, y=600),
                PlacementKeyframe(frame_offset=40, x=1400, y=600),
            ],
        )
        assert resolve_placement(char, 20) == pytest.approx((950, 600))
        assert resolve_placement(char, 80) == (1400, 600)
