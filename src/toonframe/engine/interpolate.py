"""Piecewise keyframe interpolation.

Everything here is a pure function of its arguments so frames can be
rendered out of order or on separate workers and still agree bit for bit.
"""
from __future__ import annotations

from typing import Callable, Protocol, Sequence

from .easing import ease_out_cubic

IDENTITY_CAMERA = (0.0, 0.0, 1.0)
CAMERA_CHANNELS = ("x", "y", "zoom")


class Keyframe(Protocol):
    frame_offset: float


def _values(kf, channels: Sequence[str]) -> tuple[float, ...]:
    return tuple(float(getattr(kf, ch)) for ch in channels)


def interpolate_channels(
    keyframes: Sequence[Keyframe],
    offset: float,
    channels: Sequence[str],
    easing: Callable[[float], float] = ease_out_cubic,
) -> tuple[float, ...]:
    """Interpolate the named attributes of ``keyframes`` at ``offset``.

    The first pair whose closed range contains ``offset`` is used. Offsets
    outside the keyframe range clamp to the nearest endpoint. Callers handle
    the empty case; a single keyframe is returned as a constant.
    """
    if len(keyframes) == 1:
        return _values(keyframes[0], channels)

    before = keyframes[0]
    after = keyframes[-1]
    for i in range(len(keyframes) - 1):
        if keyframes[i].frame_offset <= offset <= keyframes[i + 1].frame_offset:
            before = keyframes[i]
            after = keyframes[i + 1]
            break

    if offset <= before.frame_offset:
        return _values(before, channels)
    if offset >= after.frame_offset:
        return _values(after, channels)

    t = easing((offset - before.frame_offset) / (after.frame_offset - before.frame_offset))
    return tuple(
        a + (b - a) * t for a, b in zip(_values(before, channels), _values(after, channels))
    )


def interpolate(keyframes: Sequence[Keyframe], offset: float) -> tuple[float, float, float]:
    """Camera interpolation: ``(x, y, zoom)`` at ``offset`` frames into the scene."""
    if not keyframes:
        return IDENTITY_CAMERA
    x, y, zoom = interpolate_channels(keyframes, offset, CAMERA_CHANNELS)
    return x, y, zoom
