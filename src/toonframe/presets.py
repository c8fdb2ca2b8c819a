from __future__ import annotations

from typing import Callable

from .schema import CameraKeyframe, CameraPreset, CameraSpec, Scene

KeyframeRow = tuple[float, float, float, float]


def _static(dur: int) -> list[KeyframeRow]:
    return [(0, 0, 0, 1.0)]


def _slow_zoom_in(dur: int) -> list[KeyframeRow]:
    return [(0, 0, 0, 1.0), (dur, 0, -30, 1.3)]


def _slow_zoom_out(dur: int) -> list[KeyframeRow]:
    return [(0, 0, -20, 1.3), (dur, 0, 0, 1.0)]


def _pan_left_to_right(dur: int) -> list[KeyframeRow]:
    return [(0, -200, 0, 1.15), (dur, 200, 0, 1.15)]


def _pan_right_to_left(dur: int) -> list[KeyframeRow]:
    return [(0, 200, 0, 1.15), (dur, -200, 0, 1.15)]


def _tilt_down(dur: int) -> list[KeyframeRow]:
    return [(0, 0, -120, 1.2), (dur, 0, 60, 1.2)]


def _tilt_up(dur: int) -> list[KeyframeRow]:
    return [(0, 0, 60, 1.2), (dur, 0, -120, 1.2)]


def _establishing_shot(dur: int) -> list[KeyframeRow]:
    return [(0, 0, 0, 1.0), (dur * 3 // 10, 0, 0, 1.0), (dur, 50, -20, 1.4)]


def _dramatic_zoom(dur: int) -> list[KeyframeRow]:
    return [
        (0, 0, 0, 1.1),
        (dur * 6 // 10, 0, 0, 1.1),
        (dur * 8 // 10, 0, -30, 1.6),
        (dur, 0, -30, 1.6),
    ]


def _follow_character(dur: int) -> list[KeyframeRow]:
    return [(0, 0, 0, 1.2), (dur, 0, 0, 1.2)]


def _sweeping_pan(dur: int) -> list[KeyframeRow]:
    return [(0, -300, -50, 1.1), (dur // 2, 0, 0, 1.15), (dur, 300, -50, 1.1)]


def _reveal_down(dur: int) -> list[KeyframeRow]:
    return [(0, 0, -200, 1.3), (dur * 7 // 10, 0, 0, 1.15), (dur, 0, 0, 1.15)]


CAMERA_PRESETS: dict[str, Callable[[int], list[KeyframeRow]]] = {
    "static": _static,
    "slow-zoom-in": _slow_zoom_in,
    "slow-zoom-out": _slow_zoom_out,
    "pan-left-to-right": _pan_left_to_right,
    "pan-right-to-left": _pan_right_to_left,
    "tilt-down": _tilt_down,
    "tilt-up": _tilt_up,
    "establishing-shot": _establishing_shot,
    "dramatic-zoom": _dramatic_zoom,
    "follow-character": _follow_character,
    "sweeping-pan": _sweeping_pan,
    "reveal-down": _reveal_down,
}

FOLLOW_OFFSET_Y = -40.0


def preset_keyframes(preset: CameraPreset, duration: int) -> list[CameraKeyframe]:
    rows = CAMERA_PRESETS[preset](duration)
    return [CameraKeyframe(frame_offset=f, x=x, y=y, zoom=z) for f, x, y, z in rows]


def resolve_camera_spec(scene: Scene) -> CameraSpec:
    """Return the scene's camera with any preset expanded into keyframes.

    Explicit keyframes always win over a preset. ``follow-character`` tracks
    the first placed character unless a tracking target is already set.
    """
    camera = scene.camera
    if camera.preset is None or camera.keyframes:
        return camera

    update: dict = {"keyframes": preset_keyframes(camera.preset, scene.duration)}
    if camera.preset == "follow-character" and camera.track_character_id is None and scene.characters:
        update["track_character_id"] = scene.characters[0].id
        update["track_offset_y"] = camera.track_offset_y or FOLLOW_OFFSET_Y
    return camera.model_copy(update=update)


def suggest_camera_preset(beat_type: str, scene_index: int) -> CameraPreset:
    if beat_type == "intro":
        return "establishing-shot"
    if beat_type == "hook":
        return "slow-zoom-in" if scene_index % 2 == 0 else "pan-left-to-right"
    if beat_type == "explain":
        return ("tilt-down", "slow-zoom-in", "pan-right-to-left")[scene_index % 3]
    if beat_type == "example":
        return "sweeping-pan" if scene_index % 2 == 0 else "pan-left-to-right"
    if beat_type == "revelation":
        return "dramatic-zoom"
    if beat_type in ("recap", "outro"):
        return "slow-zoom-out"
    return "slow-zoom-in"
