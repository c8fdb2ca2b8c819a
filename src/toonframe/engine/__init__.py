from .camera import CameraCompositor, resolve_camera
from .directory import SceneDirectory
from .interpolate import interpolate
from .overlays import OverlayScheduler
from .renderer import Renderer
from .state import ResolvedFrameState
from .transitions import Layer, apply, transition_progress
from .visemes import MouthShape, Viseme, VisemeResolver

__all__ = [
    "CameraCompositor",
    "Layer",
    "MouthShape",
    "OverlayScheduler",
    "Renderer",
    "ResolvedFrameState",
    "SceneDirectory",
    "Viseme",
    "VisemeResolver",
    "apply",
    "interpolate",
    "resolve_camera",
    "transition_progress",
]
