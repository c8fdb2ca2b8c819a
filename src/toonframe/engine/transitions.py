"""Scene-entry transitions.

Each kind is a pure function of progress in ``[0, 1]``. Progress is measured
from the cut, so the same frame always yields the same blend.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Optional, Union

from ..schema import Scene, TransitionKind
from .easing import clamp01, ease_out_cubic

ZOOM_START_SCALE = 0.6
ZOOM_FADE_SPAN = 0.3


@dataclass(frozen=True)
class RectClip:
    """Visible region from the left edge, as a fraction of the width."""

    width: float


@dataclass(frozen=True)
class CircleClip:
    """Centered circle; radius as a fraction of the full diagonal."""

    radius: float


Clip = Union[RectClip, CircleClip]


@dataclass(frozen=True)
class Layer:
    content: Any
    opacity: float = 1.0
    scale: float = 1.0
    translate_x: float = 0.0  # fraction of canvas width
    clip: Optional[Clip] = None


def transition_progress(scene: Scene, frame: int) -> float:
    spec = scene.transition
    if spec.kind == "none" or spec.duration_frames <= 0:
        return 1.0
    return ease_out_cubic((frame - scene.start) / spec.duration_frames)


def apply(kind: TransitionKind, progress: float, content: Layer) -> Layer:
    if kind == "none" or progress >= 1.0:
        return content
    p = clamp01(progress)

    if kind == "crossfade":
        return dataclasses.replace(content, opacity=content.opacity * p)
    if kind == "wipe":
        return dataclasses.replace(content, clip=RectClip(width=p))
    if kind == "zoom-in":
        return dataclasses.replace(
            content,
            scale=content.scale * (ZOOM_START_SCALE + (1.0 - ZOOM_START_SCALE) * p),
            opacity=content.opacity * clamp01(p / ZOOM_FADE_SPAN),
        )
    if kind == "slide":
        return dataclasses.replace(content, translate_x=content.translate_x + (1.0 - p))
    if kind == "iris":
        return dataclasses.replace(content, clip=CircleClip(radius=p))
    raise ValueError(f"unknown transition kind: {kind}")
