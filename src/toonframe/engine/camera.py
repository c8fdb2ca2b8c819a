from __future__ import annotations

from typing import Optional

from ..presets import resolve_camera_spec
from ..schema import Scene
from .directory import SceneDirectory
from .easing import ease_out_cubic
from .interpolate import interpolate
from .placement import resolve_placement
from .state import CameraState

ENTRY_WINDOW_FRAMES = 28
TRACKING_DAMPING = 0.3
DEFAULT_CANVAS = (1920, 1080)


def target_camera(
    scene: Scene,
    offset: float,
    canvas: tuple[int, int] = DEFAULT_CANVAS,
    damping: float = TRACKING_DAMPING,
) -> CameraState:
    """The scene's own camera at ``offset``, before any entry blend."""
    spec = resolve_camera_spec(scene)
    if spec.keyframes:
        x, y, zoom = interpolate(spec.keyframes, offset)
    else:
        x, y, zoom = spec.x, spec.y, spec.zoom

    if spec.track_character_id:
        tracked = scene.character(spec.track_character_id)
        if tracked is not None:
            tx, ty = resolve_placement(tracked, offset)
            x += (tx - canvas[0] / 2) * damping + spec.track_offset_x
            y += (ty - canvas[1] / 2) * damping + spec.track_offset_y

    return CameraState(x=x, y=y, zoom=zoom)


def blend_entry(
    previous: Optional[CameraState],
    target: CameraState,
    offset: float,
    entry_window: int = ENTRY_WINDOW_FRAMES,
) -> CameraState:
    if previous is None or entry_window <= 0:
        return target
    t = ease_out_cubic(min(1.0, offset / entry_window))
    if t >= 1.0:
        return target
    return CameraState(
        x=previous.x + (target.x - previous.x) * t,
        y=previous.y + (target.y - previous.y) * t,
        zoom=previous.zoom + (target.zoom - previous.zoom) * t,
    )


def resolve_camera(
    scene: Scene,
    previous_scene: Optional[Scene],
    frame: int,
    *,
    previous_camera: Optional[CameraState] = None,
    canvas: tuple[int, int] = DEFAULT_CANVAS,
    entry_window: int = ENTRY_WINDOW_FRAMES,
    damping: float = TRACKING_DAMPING,
) -> CameraState:
    """Camera for ``frame`` inside ``scene``.

    For the first ``entry_window`` frames the camera eases from where the
    previous scene ended toward this scene's own path, so cuts never pop.
    ``previous_camera`` overrides the previous scene's final camera; when it
    is omitted the previous scene is resolved at its last frame as if it had
    no predecessor of its own (see ``CameraCompositor`` for full chains).
    """
    offset = max(0, frame - scene.start)
    target = target_camera(scene, offset, canvas=canvas, damping=damping)

    if previous_camera is None and previous_scene is not None:
        previous_camera = resolve_camera(
            previous_scene,
            None,
            previous_scene.end - 1,
            canvas=canvas,
            entry_window=entry_window,
            damping=damping,
        )

    return blend_entry(previous_camera, target, offset, entry_window)


class CameraCompositor:
    """Resolves cameras against a directory so entry blends chain across cuts."""

    def __init__(
        self,
        directory: SceneDirectory,
        canvas: tuple[int, int] = DEFAULT_CANVAS,
        entry_window: int = ENTRY_WINDOW_FRAMES,
        damping: float = TRACKING_DAMPING,
    ):
        self.directory = directory
        self.canvas = canvas
        self.entry_window = entry_window
        self.damping = damping

    def _resolve(self, scene: Scene, frame: int, previous_camera: Optional[CameraState]) -> CameraState:
        return resolve_camera(
            scene,
            None,
            frame,
            previous_camera=previous_camera,
            canvas=self.canvas,
            entry_window=self.entry_window,
            damping=self.damping,
        )

    def final_camera(self, scene: Scene) -> CameraState:
        """Fully resolved camera on the last frame of ``scene``."""
        chain = [scene]
        current = scene
        # a scene shorter than the entry window still carries part of its predecessor
        while current.end - 1 - current.start < self.entry_window:
            previous = self.directory.previous_of(current)
            if previous is None:
                break
            chain.append(previous)
            current = previous

        camera: Optional[CameraState] = None
        for s in reversed(chain):
            camera = self._resolve(s, s.end - 1, camera)
        return camera

    def resolve(self, scene: Scene, frame: int) -> CameraState:
        previous = self.directory.previous_of(scene)
        previous_camera = self.final_camera(previous) if previous is not None else None
        return self._resolve(scene, frame, previous_camera)
