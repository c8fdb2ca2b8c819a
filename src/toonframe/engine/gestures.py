from __future__ import annotations

from typing import Optional

from ..schema import Gesture
from .easing import clamp01, ease_in_out_cubic, ease_out_cubic, sine_wave
from .state import GesturePose

GESTURE_ENTRY_FRAMES = 8

GESTURE_DURATIONS: dict[str, int] = {
    "wave": 45,
    "point": 30,
    "shrug": 40,
    "explain": 60,
    "cheers": 35,
}
DEFAULT_GESTURE_DURATION = 30


def gesture_duration(gesture: Optional[Gesture]) -> int:
    return GESTURE_DURATIONS.get(gesture or "idle", DEFAULT_GESTURE_DURATION)


def _arms(gesture: Gesture, frame: int, gesture_frame: int, fps: int) -> tuple[float, float, float, float]:
    entry = ease_out_cubic(gesture_frame / GESTURE_ENTRY_FRAMES)

    if gesture == "wave":
        return (-45 + sine_wave(frame, 3, fps=fps) * 20) * entry, -40 * entry, 0.0, 0.0
    if gesture == "point":
        return -55 * entry, -70 * entry, 0.0, 0.0
    if gesture == "shrug":
        hold = ease_in_out_cubic(gesture_frame / 12)
        return -30 * hold, -50 * hold, 30 * hold, 50 * hold
    if gesture == "explain":
        return (
            (-35 + sine_wave(frame, 1.5, fps=fps) * 15) * entry,
            (-45 + sine_wave(frame, 1.5, 1.57, fps=fps) * 8) * entry,
            0.0,
            0.0,
        )
    if gesture == "cheers":
        lift = ease_out_cubic(gesture_frame / 15)
        return 0.0, 0.0, -15 * lift, -20 * lift
    return 0.0, 0.0, 0.0, 0.0


def gesture_pose(
    gesture: Optional[Gesture],
    frame: int,
    gesture_frame: int,
    fps: int = 30,
) -> GesturePose:
    """Arm rotations (degrees) layered on top of idle and talking motion.

    ``frame`` drives the looping part of a gesture, ``gesture_frame`` counts
    frames since it began and drives the ease-in. Before the gesture starts
    the arms rest.
    """
    if gesture is None or gesture == "idle" or gesture_frame < 0:
        return GesturePose()

    left_arm, left_fore, right_arm, right_fore = _arms(gesture, frame, gesture_frame, fps)
    return GesturePose(
        gesture=gesture,
        progress=clamp01(gesture_frame / gesture_duration(gesture)),
        left_arm_rotation=left_arm,
        left_forearm_angle=left_fore,
        right_arm_rotation=right_arm,
        right_forearm_angle=right_fore,
    )
