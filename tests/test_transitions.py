from __future__ import annotations

import pytest

from toonframe.engine.transitions import CircleClip, Layer, RectClip, apply, transition_progress
from toonframe.schema import Scene, TransitionSpec

KINDS = ["none", "crossfade", "wipe", "zoom-in", "slide", "iris"]


def _scene(kind: str, duration: int) -> Scene:
    return Scene(
        id="s",
        start=100,
        end=200,
        background_id="bg",
        transition=TransitionSpec(kind=kind, duration_frames=duration),
    )


class TestTransitionProgress:
    def test_eased_from_scene_start(self):
        scene = _scene("crossfade", 15)
        assert transition_progress(scene, 100) == 0.0
        assert 0.0 < transition_progress(scene, 105) < 1.0
        assert transition_progress(scene, 115) == 1.0
        assert transition_progress(scene, 150) == 1.0

    def test_none_or_zero_duration_is_complete(self):
        assert transition_progress(_scene("none", 15), 100) == 1.0
        assert transition_progress(_scene("wipe", 0), 100) == 1.0


class TestApply:
    @pytest.mark.parametrize("kind", KINDS)
    def test_complete_progress_is_identity(self, kind: str):
        layer = Layer(content="frame")
        assert apply(kind, 1.0, layer) == layer

    def test_none_is_identity_at_any_progress(self):
        layer = Layer(content="frame", opacity=0.7)
        assert apply("none", 0.2, layer) is layer

    def test_crossfade(self):
        assert apply("crossfade", 0.5, Layer(content=None)).opacity == 0.5

    def test_wipe(self):
        assert apply("wipe", 0.25, Layer(content=None)).clip == RectClip(width=0.25)

    def test_zoom_in(self):
        start = apply("zoom-in", 0.0, Layer(content=None))
        assert start.scale == pytest.approx(0.6)
        assert start.opacity == 0.0
        mid = apply("zoom-in", 0.5, Layer(content=None))
        assert mid.scale == pytest.approx(0.8)
        assert mid.opacity == 1.0
        assert apply("zoom-in", 0.15, Layer(content=None)).opacity == pytest.approx(0.5)

    def test_slide(self):
        assert apply("slide", 0.0, Layer(content=None)).translate_x == 1.0
        assert apply("slide", 0.75, Layer(content=None)).translate_x == pytest.approx(0.25)

    def test_iris(self):
        assert apply("iris", 0.5, Layer(content=None)).clip == CircleClip(radius=0.5)

    def test_content_is_untouched(self):
        content = object()
        assert apply("crossfade", 0.3, Layer(content=content)).content is content

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            apply("spin", 0.5, Layer(content=None))
