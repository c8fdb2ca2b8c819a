from __future__ import annotations

from typing import Sequence

from ..schema import OverlayInstance
from .easing import ease_out_back, ease_out_cubic, map_range
from .state import ElementState, OverlayState

DEFAULT_FADES: dict[str, tuple[int, int]] = {
    "stat-card": (12, 10),
    "bar-chart": (15, 10),
    "fact-box": (10, 8),
    "topic-card": (15, 12),
    "caption": (8, 8),
}

BAR_STAGGER_FRAMES = 5
BAR_GROW_FRAMES = 15
STAT_SLIDE_PX = 60.0
TOPIC_SLIDE_PX = -300.0
ACCENT_BAR_WINDOW = (5, 20)


def fade_frames(overlay: OverlayInstance) -> tuple[float, float]:
    """Fade-in/out lengths, shrunk to fit the overlay's window.

    When both fades do not fit they are scaled down together and neither
    exceeds half the window.
    """
    default_in, default_out = DEFAULT_FADES[overlay.kind]
    fade_in = float(overlay.fade_in if overlay.fade_in is not None else default_in)
    fade_out = float(overlay.fade_out if overlay.fade_out is not None else default_out)
    window = overlay.end_frame - overlay.start_frame

    if fade_in + fade_out >= window:
        factor = window / (fade_in + fade_out)
        half = window / 2
        fade_in = min(fade_in * factor, half)
        fade_out = min(fade_out * factor, half)
    return fade_in, fade_out


def envelope(overlay: OverlayInstance, frame: int) -> float:
    """Opacity: ramp up, hold, ramp down. Zero outside the window."""
    if not (overlay.start_frame <= frame < overlay.end_frame):
        return 0.0
    local = frame - overlay.start_frame
    window = overlay.end_frame - overlay.start_frame
    fade_in, fade_out = fade_frames(overlay)

    if fade_in > 0 and local < fade_in:
        return local / fade_in
    if fade_out > 0 and local > window - fade_out:
        return (window - local) / fade_out
    return 1.0


def _position(overlay: OverlayInstance) -> str:
    default = "left" if overlay.kind == "bar-chart" else "right"
    return str(overlay.payload.get("position", default))


def resolve_overlay(overlay: OverlayInstance, index: int, frame: int) -> OverlayState:
    local = frame - overlay.start_frame
    fade_in, _ = fade_frames(overlay)
    offset_x = 0.0
    offset_y = 0.0
    scale = 1.0
    elements: list[ElementState] = []

    if overlay.kind == "stat-card":
        position = _position(overlay)
        start_x = {"left": -STAT_SLIDE_PX, "right": STAT_SLIDE_PX}.get(position, 0.0)
        scale = map_range(local, 0, fade_in, 0.8, 1.0, easing=ease_out_back)
        offset_x = map_range(local, 0, fade_in, start_x, 0.0, easing=ease_out_cubic)
    elif overlay.kind == "fact-box":
        offset_y = map_range(local, 0, fade_in, 20.0, 0.0, easing=ease_out_cubic)
    elif overlay.kind == "caption":
        offset_y = map_range(local, 0, fade_in, 10.0, 0.0, easing=ease_out_cubic)
    elif overlay.kind == "topic-card":
        offset_x = map_range(local, 0, fade_in, TOPIC_SLIDE_PX, 0.0, easing=ease_out_cubic)
        lo, hi = ACCENT_BAR_WINDOW
        elements.append(
            ElementState(index=0, progress=map_range(local, lo, hi, 0.0, 1.0, easing=ease_out_cubic))
        )
    elif overlay.kind == "bar-chart":
        bars = overlay.payload.get("bars", [])
        for i in range(len(bars)):
            delay = fade_in + i * BAR_STAGGER_FRAMES
            progress = map_range(local, delay, delay + BAR_GROW_FRAMES, 0.0, 1.0, easing=ease_out_cubic)
            elements.append(ElementState(index=i, progress=progress))

    return OverlayState(
        kind=overlay.kind,
        index=index,
        start_frame=overlay.start_frame,
        end_frame=overlay.end_frame,
        local_frame=local,
        opacity=envelope(overlay, frame),
        offset_x=offset_x,
        offset_y=offset_y,
        scale=scale,
        payload=dict(overlay.payload),
        elements=elements,
    )


class OverlayScheduler:
    """Windowed visibility for any number of possibly overlapping overlays."""

    def __init__(self, overlays: Sequence[OverlayInstance]):
        self._overlays: tuple[OverlayInstance, ...] = tuple(overlays)

    def __len__(self) -> int:
        return len(self._overlays)

    def active_overlays(self, frame: int) -> list[OverlayInstance]:
        return [o for o in self._overlays if o.start_frame <= frame < o.end_frame]

    def resolve(self, frame: int, index_base: int = 0) -> list[OverlayState]:
        return [
            resolve_overlay(o, index_base + i, frame)
            for i, o in enumerate(self._overlays)
            if o.start_frame <= frame < o.end_frame
        ]
