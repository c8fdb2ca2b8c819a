from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..config import EngineSettings, resolve_config
from ..engine.renderer import Renderer
from ..schema import Timeline
from ..timeline import load_timeline
from .compositor import Compositor

logger = logging.getLogger(__name__)


def render_frames_from_timeline(
    timeline: Timeline,
    assets_dir: Path,
    output_dir: Path,
    start: int = 0,
    end: Optional[int] = None,
    settings: Optional[EngineSettings] = None,
    background_color: tuple[int, int, int] = (26, 26, 26),
    strict: bool = False,
) -> list[Path]:
    """Rasterise frames ``[start, end)`` as ``frame_NNNNNN.png``.

    Files are named by timeline frame, so separate workers can each render a
    slice of the range into the same directory.
    """
    renderer = Renderer(timeline, settings)
    if end is None:
        end = renderer.total_frames
    output_dir.mkdir(parents=True, exist_ok=True)
    compositor = Compositor(
        assets_dir,
        resolution=(int(timeline.resolution[0]), int(timeline.resolution[1])),
        background_color=background_color,
        strict=strict,
    )

    frame_paths: list[Path] = []
    for frame_num in range(start, end):
        frame = compositor.render_frame(renderer.render(frame_num))
        frame_path = output_dir / f"frame_{frame_num:06d}.png"
        frame.convert("RGB").save(frame_path)
        frame_paths.append(frame_path)

    logger.info(f"Rendered {len(frame_paths)} frames to {output_dir}")
    return frame_paths


def render_timeline_frames(
    timeline_path: Path,
    output_dir: Optional[Path] = None,
    start: int = 0,
    end: Optional[int] = None,
    config_path: Optional[Path] = None,
    strict: bool = False,
) -> list[Path]:
    config = resolve_config(config_path)
    timeline = load_timeline(timeline_path)
    if output_dir is None:
        output_dir = timeline_path.parent / "renders" / "frames"
    return render_frames_from_timeline(
        timeline,
        config.render.assets_dir,
        output_dir,
        start=start,
        end=end,
        settings=config.engine,
        background_color=config.render.background_color,
        strict=strict,
    )
