from __future__ import annotations

from ..schema import CharacterPlacement
from .easing import linear
from .interpolate import interpolate_channels


def resolve_placement(char: CharacterPlacement, offset: float) -> tuple[float, float]:
    """Character position ``offset`` frames into its scene.

    Without a path the authored ``(x, y)`` is constant. Paths move at constant
    speed between points.
    """
    if not char.path:
        return char.x, char.y
    x, y = interpolate_channels(char.path, offset, ("x", "y"), easing=linear)
    return x, y
