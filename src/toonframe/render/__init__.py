from .compositor import Compositor, CompositorError, MissingAssetError
from .frames import render_frames_from_timeline, render_timeline_frames

__all__ = [
    "Compositor",
    "CompositorError",
    "MissingAssetError",
    "render_frames_from_timeline",
    "render_timeline_frames",
]
