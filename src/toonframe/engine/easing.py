from __future__ import annotations

import math


def clamp01(t: float) -> float:
    return max(0.0, min(1.0, t))


def linear(t: float) -> float:
    return clamp01(t)


def ease_out_cubic(t: float) -> float:
    """Fast start, smooth deceleration. Input is clamped to [0, 1]."""
    t = clamp01(t)
    return 1.0 - (1.0 - t) ** 3


def ease_in_out_cubic(t: float) -> float:
    t = clamp01(t)
    if t < 0.5:
        return 4.0 * t ** 3
    return 1.0 - (-2.0 * t + 2.0) ** 3 / 2.0


def ease_out_back(t: float, overshoot: float = 1.5) -> float:
    """Ease-out that overshoots slightly past 1 before settling."""
    t = clamp01(t) - 1.0
    return 1.0 + (overshoot + 1.0) * t ** 3 + overshoot * t ** 2


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def map_range(
    value: float,
    in_min: float,
    in_max: float,
    out_min: float,
    out_max: float,
    easing=linear,
) -> float:
    """Map value from [in_min, in_max] to [out_min, out_max], clamping both ends."""
    if in_max == in_min:
        t = 1.0 if value >= in_max else 0.0
    else:
        t = clamp01((value - in_min) / (in_max - in_min))
    return out_min + (out_max - out_min) * easing(t)


def sine_wave(frame: int, frequency: float, phase: float = 0.0, fps: int = 30) -> float:
    return math.sin((frame / fps) * frequency * math.pi * 2 + phase)


def seeded_random(seed: float) -> float:
    """Deterministic pseudo-random value in [0, 1) for a given seed."""
    x = math.sin(seed * 12.9898 + 78.233) * 43758.5453
    return x - math.floor(x)
