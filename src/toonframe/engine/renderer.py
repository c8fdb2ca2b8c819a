from __future__ import annotations

import logging
from typing import Optional

from ..config import EngineSettings
from ..schema import CharacterPlacement, Scene, Timeline
from .camera import CameraCompositor
from .directory import SceneDirectory
from .easing import map_range
from .emotions import emotion_at_entry
from .gestures import gesture_pose
from .idle import idle_pose
from .overlays import OverlayScheduler
from .placement import resolve_placement
from .state import CaptionState, CharacterState, ResolvedFrameState, TransitionState
from .transitions import transition_progress
from .visemes import VisemeResolver, babble_mouth_shape

logger = logging.getLogger(__name__)


def resolve_caption(
    scene: Scene,
    frame: int,
    margin: int = 5,
    fade: int = 8,
) -> Optional[CaptionState]:
    if not scene.caption_text:
        return None
    start = scene.start + margin
    end = scene.end - margin
    if frame < start or frame > end:
        return None

    local = frame - start
    duration = end - start
    opacity = min(
        map_range(local, 0, fade, 0.0, 1.0),
        map_range(local, duration - fade, duration, 1.0, 0.0),
    )
    offset_y = map_range(local, 0, fade, 10.0, 0.0)
    return CaptionState(text=scene.caption_text, opacity=opacity, offset_y=offset_y)


class Renderer:
    """Resolves the full visual state of any frame of a timeline.

    Construction indexes the timeline once. ``render`` reads that data and
    nothing else, so one instance can serve frames in any order or from
    several threads.
    """

    def __init__(self, timeline: Timeline, settings: Optional[EngineSettings] = None):
        self.timeline = timeline
        self.settings = settings or EngineSettings()
        self.fps = timeline.fps
        self.canvas = (int(timeline.resolution[0]), int(timeline.resolution[1]))

        self.directory = SceneDirectory(timeline.scenes)
        self.cameras = CameraCompositor(
            self.directory,
            canvas=self.canvas,
            entry_window=self.settings.entry_window_frames,
            damping=self.settings.tracking_damping,
        )
        self.visemes = VisemeResolver(
            timeline.audio,
            fps=self.fps,
            buffer_frames=round(self.settings.audio_buffer_seconds * self.fps),
        )
        self._scene_overlays = tuple(OverlayScheduler(s.overlays) for s in self.directory)
        self._global_overlays = OverlayScheduler(timeline.global_overlays)

        if timeline.audio:
            logger.debug(f"Indexed {len(timeline.audio)} audio segments")

    @property
    def warnings(self) -> list[str]:
        return list(self.visemes.warnings)

    @property
    def total_frames(self) -> int:
        return self.directory.total_frames

    def _character_state(
        self,
        char: CharacterPlacement,
        previous: Optional[Scene],
        offset: int,
        frame: int,
    ) -> CharacterState:
        x, y = resolve_placement(char, offset)

        prev_char = previous.character(char.id) if previous is not None else None
        from_emotion = prev_char.emotion if prev_char is not None else char.emotion
        emotion = emotion_at_entry(
            from_emotion, char.emotion, offset, self.settings.emotion_window_frames
        )

        if self.visemes.has_audio:
            viseme = self.visemes.resolve(char.id, frame)
            mouth_shape, talking = int(viseme.mouth_shape), viseme.talking
        else:
            talking = char.talking
            mouth_shape = int(babble_mouth_shape(frame, talking, fps=self.fps))

        return CharacterState(
            id=char.id,
            x=x,
            y=y,
            scale=char.scale,
            gesture=char.gesture,
            emotion=emotion,
            mouth_shape=mouth_shape,
            talking=talking,
            idle=idle_pose(frame, talking, fps=self.fps),
            pose=gesture_pose(char.gesture, frame, offset - char.gesture_start, fps=self.fps),
        )

    def render(self, frame: int) -> ResolvedFrameState:
        scene = self.directory.scene_at(frame)
        if scene is None:
            return ResolvedFrameState.blank(frame)

        index = self.directory.index_of(scene)
        previous = self.directory[index - 1] if index > 0 else None
        offset = frame - scene.start

        scene_overlays = self._scene_overlays[index]
        overlays = scene_overlays.resolve(frame)
        overlays += self._global_overlays.resolve(frame, index_base=len(scene_overlays))

        return ResolvedFrameState(
            frame=frame,
            scene_id=scene.id,
            scene_index=index,
            background_id=scene.background_id,
            board_text=scene.board_text,
            camera=self.cameras.resolve(scene, frame),
            transition=TransitionState(
                kind=scene.transition.kind,
                progress=transition_progress(scene, frame),
            ),
            characters=[self._character_state(c, previous, offset, frame) for c in scene.characters],
            overlays=overlays,
            caption=resolve_caption(
                scene,
                frame,
                margin=self.settings.caption_margin_frames,
                fade=self.settings.caption_fade_frames,
            ),
        )

    def debug_dump(self, frame: int) -> str:
        state = self.render(frame)
        if state.is_blank:
            return f"Frame {frame} | no scene"

        scene = self.directory[state.scene_index]
        lines = [
            f"Scene {state.scene_index + 1}/{len(self.directory)} [{scene.id}]",
            f"Frame {frame} | {scene.start}-{scene.end}",
            " | ".join(
                f"{c.id}: {c.emotion.to_emotion}{' (talking)' if c.talking else ''}"
                for c in state.characters
            ),
        ]
        if self.timeline.audio:
            lines.append(f"Audio: {len(self.timeline.audio)} segments")
        return "\n".join(lines)
