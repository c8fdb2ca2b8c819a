from __future__ import annotations

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field

from ..schema import Emotion, Gesture, OverlayKind, TransitionKind


class _State(BaseModel):
    model_config = ConfigDict(frozen=True)


class CameraState(_State):
    x: float = 0.0
    y: float = 0.0
    zoom: float = 1.0


class TransitionState(_State):
    kind: TransitionKind = "none"
    progress: float = 1.0


class ExpressionParams(_State):
    eye_scale_y: float
    eye_offset_y: float
    pupil_scale: float
    brow_left_y: float
    brow_right_y: float
    brow_left_rotation: float
    brow_right_rotation: float
    mouth_curve: float
    mouth_width: float
    mouth_open: float
    blush_opacity: float
    head_tilt: float


class EmotionBlend(_State):
    from_emotion: Emotion
    to_emotion: Emotion
    progress: float
    params: ExpressionParams


class IdlePose(_State):
    """Ambient motion every character carries, in character-local units."""

    breath_y: float = 0.0
    breath_scale_x: float = 1.0
    blink: float = 1.0
    sway_x: float = 0.0
    sway_rotation: float = 0.0
    pupil_x: float = 0.0
    pupil_y: float = 0.0
    bounce_y: float = 0.0
    talk_arm_rotation: float = 0.0


class GesturePose(_State):
    gesture: Gesture = "idle"
    progress: float = 0.0
    left_arm_rotation: float = 0.0
    left_forearm_angle: float = 0.0
    right_arm_rotation: float = 0.0
    right_forearm_angle: float = 0.0


class CharacterState(_State):
    id: str
    x: float
    y: float
    scale: float
    gesture: Optional[Gesture] = None
    emotion: EmotionBlend
    mouth_shape: int = 0
    talking: bool = False
    idle: IdlePose = IdlePose()
    pose: GesturePose = GesturePose()


class ElementState(_State):
    index: int
    progress: float


class OverlayState(_State):
    kind: OverlayKind
    index: int
    start_frame: int
    end_frame: int
    local_frame: int
    opacity: float
    offset_x: float = 0.0
    offset_y: float = 0.0
    scale: float = 1.0
    payload: dict[str, Any] = Field(default_factory=dict)
    elements: list[ElementState] = Field(default_factory=list)


class CaptionState(_State):
    text: str
    opacity: float
    offset_y: float = 0.0


class ResolvedFrameState(_State):
    """Everything the presentation layer needs for one frame."""

    frame: int
    scene_id: Optional[str] = None
    scene_index: Optional[int] = None
    background_id: Optional[str] = None
    board_text: Optional[str] = None
    camera: CameraState = CameraState()
    transition: TransitionState = TransitionState()
    characters: list[CharacterState] = Field(default_factory=list)
    overlays: list[OverlayState] = Field(default_factory=list)
    caption: Optional[CaptionState] = None

    @property
    def is_blank(self) -> bool:
        return self.scene_id is None

    @classmethod
    def blank(cls, frame: int) -> "ResolvedFrameState":
        return cls(frame=frame)
