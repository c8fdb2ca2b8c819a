from __future__ import annotations

import pytest

from toonframe.engine.camera import CameraCompositor, resolve_camera, target_camera
from toonframe.engine.directory import SceneDirectory
from toonframe.schema import CameraKeyframe, CameraSpec, CharacterPlacement, Scene


def _scene(scene_id: str, start: int, end: int, **camera) -> Scene:
    return Scene(id=scene_id, start=start, end=end, background_id="bg", camera=CameraSpec(**camera))


class TestKeyframedCamera:
    def test_clamps_before_and_after_keyframes(self) -> None:
        scene = _scene(
            "a",
            100,
            300,
            keyframes=[
                CameraKeyframe(frame_offset=0, x=0, y=0, zoom=1.0),
                CameraKeyframe(frame_offset=100, x=100, y=0, zoom=2.0),
            ],
        )
        early = resolve_camera(scene, None, 95)
        assert (early.x, early.y, early.zoom) == (0, 0, 1.0)
        late = resolve_camera(scene, None, 250)
        assert (late.x, late.y, late.zoom) == (100, 0, 2.0)

    def test_static_camera_without_keyframes(self) -> None:
        cam = resolve_camera(_scene("a", 0, 50, x=40, y=-10, zoom=1.2), None, 25)
        assert (cam.x, cam.y, cam.zoom) == (40, -10, 1.2)

    def test_preset_expands_over_scene_duration(self) -> None:
        scene = _scene("a", 0, 100, preset="slow-zoom-in")
        cam = target_camera(scene, 100)
        assert cam.zoom == pytest.approx(1.3)
        assert cam.y == pytest.approx(-30)


class TestEntryContinuity:
    def test_starts_at_previous_final_camera(self) -> None:
        a = _scene("a", 0, 60, x=-200)
        b = _scene("b", 60, 120, x=100, zoom=1.5)
        first = resolve_camera(b, a, 60)
        assert (first.x, first.y, first.zoom) == (-200, 0, 1.0)

    def test_reaches_target_after_entry_window(self) -> None:
        a = _scene("a", 0, 60, x=-200)
        b = _scene("b", 60, 120, x=100, zoom=1.5)
        settled = resolve_camera(b, a, 60 + 28)
        assert (settled.x, settled.y, settled.zoom) == (100, 0, 1.5)

    def test_blend_is_eased(self) -> None:
        a = _scene("a", 0, 60, x=-200)
        b = _scene("b", 60, 120, x=100)
        mid = resolve_camera(b, a, 60 + 14)
        assert mid.x == pytest.approx(-200 + 300 * 0.875)

    def test_explicit_previous_camera_overrides(self) -> None:
        from toonframe.engine.state import CameraState

        b = _scene("b", 60, 120, x=100)
        cam = resolve_camera(b, None, 60, previous_camera=CameraState(x=7, y=8, zoom=2))
        assert (cam.x, cam.y, cam.zoom) == (7, 8, 2)

    def test_first_scene_has_no_blend(self) -> None:
        cam = resolve_camera(_scene("a", 0, 60, x=50), None, 0)
        assert cam.x == 50


class TestTracking:
    def _tracked(self, **camera) -> Scene:
        return Scene(
            id="t",
            start=0,
            end=60,
            background_id="bg",
            characters=[CharacterPlacement(id="hero", x=1260, y=540)],
            camera=CameraSpec(track_character_id="hero", **camera),
        )

    def test_damped_offset_from_canvas_center(self) -> None:
        cam = target_camera(self._tracked(), 10)
        assert cam.x == pytest.approx(90)
        assert cam.y == pytest.approx(0)

    def test_tracking_offset_added(self) -> None:
        cam = target_camera(self._tracked(track_offset_y=-40), 10)
        assert cam.y == pytest.approx(-40)

    def test_missing_character_is_ignored(self) -> None:
        scene = _scene("t", 0, 60, x=5, track_character_id="ghost")
        assert target_camera(scene, 10).x == 5


class TestCameraCompositor:
    def test_short_scene_chain_is_continuous(self) -> None:
        a = _scene("a", 0, 60, x=-200)
        b = _scene("b", 60, 70, x=0)
        c = _scene("c", 70, 200, x=300)
        comp = CameraCompositor(SceneDirectory([a, b, c]))

        last_of_b = comp.resolve(b, 69)
        first_of_c = comp.resolve(c, 70)
        assert first_of_c == last_of_b
        # B never finished blending away from A
        assert first_of_c.x < 0

    def test_matches_pairwise_for_long_scenes(self) -> None:
        a = _scene("a", 0, 60, x=-200)
        b = _scene("b", 60, 120, x=100)
        comp = CameraCompositor(SceneDirectory([a, b]))
        for frame in (60, 70, 88, 119):
            assert comp.resolve(b, frame) == resolve_camera(b, a, frame)

    def test_final_camera_of_first_scene(self) -> None:
        a = _scene("a", 0, 10, x=12)
        comp = CameraCompositor(SceneDirectory([a]))
        assert comp.final_camera(a).x == 12
