from __future__ import annotations

from .easing import seeded_random, sine_wave
from .state import IdlePose

BLINK_WINDOW_FRAMES = 60
BLINK_CHANCE_THRESHOLD = 0.35


def breathing(frame: int, fps: int = 30) -> tuple[float, float]:
    """Vertical body offset and horizontal chest scale."""
    wave = sine_wave(frame, 0.5, fps=fps)
    return wave * 1.5, 1.0 + wave * 0.003


def blink(frame: int) -> float:
    """Eye openness, 1 open and 0 shut.

    Each window may hold one blink at a seeded offset, so every frame
    resolves on its own without tracking when the last blink happened.
    """
    window = frame // BLINK_WINDOW_FRAMES
    if seeded_random(window * 7) <= BLINK_CHANCE_THRESHOLD:
        return 1.0

    offset = int(seeded_random(window * 13) * (BLINK_WINDOW_FRAMES - 10))
    f = frame - (window * BLINK_WINDOW_FRAMES + offset)
    if f < 0 or f > 5:
        return 1.0
    if f <= 2:
        return 1.0 - f / 2
    if f == 3:
        return 0.05
    return (f - 3) / 2


def body_sway(frame: int, fps: int = 30) -> tuple[float, float]:
    """Horizontal drift and the matching lean in degrees."""
    x = sine_wave(frame, 0.15, fps=fps) * 0.8 + sine_wave(frame, 0.23, 1.5, fps=fps) * 0.4
    return x, x * 0.3


def pupil_offset(frame: int, fps: int = 30) -> tuple[float, float]:
    x = sine_wave(frame, 0.3, fps=fps) * 0.5 + sine_wave(frame, 0.7, 2, fps=fps) * 0.3
    y = sine_wave(frame, 0.25, 1, fps=fps) * 0.4 + sine_wave(frame, 0.6, 3, fps=fps) * 0.2
    return x, y


def talking_bounce(frame: int, talking: bool, fps: int = 30) -> float:
    # upward only
    if not talking:
        return 0.0
    return -abs(sine_wave(frame, 3.5, fps=fps)) * 1.2


def talking_arm_rotation(frame: int, talking: bool, fps: int = 30) -> float:
    if not talking:
        return 0.0
    return sine_wave(frame, 1.2, 0.5, fps=fps) * 12


def idle_pose(frame: int, talking: bool = False, fps: int = 30) -> IdlePose:
    breath_y, breath_scale_x = breathing(frame, fps)
    sway_x, sway_rotation = body_sway(frame, fps)
    pupil_x, pupil_y = pupil_offset(frame, fps)
    return IdlePose(
        breath_y=breath_y,
        breath_scale_x=breath_scale_x,
        blink=blink(frame),
        sway_x=sway_x,
        sway_rotation=sway_rotation,
        pupil_x=pupil_x,
        pupil_y=pupil_y,
        bounce_y=talking_bounce(frame, talking, fps),
        talk_arm_rotation=talking_arm_rotation(frame, talking, fps),
    )
