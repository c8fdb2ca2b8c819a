from __future__ import annotations

from typing import Any, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Emotion = Literal["neutral", "happy", "shocked", "thinking", "angry", "sad"]

TransitionKind = Literal["none", "crossfade", "wipe", "zoom-in", "slide", "iris"]

Gesture = Literal["idle", "wave", "point", "shrug", "explain", "cheers"]

OverlayKind = Literal["stat-card", "bar-chart", "fact-box", "topic-card", "caption"]

CameraPreset = Literal[
    "static",
    "slow-zoom-in",
    "slow-zoom-out",
    "pan-left-to-right",
    "pan-right-to-left",
    "tilt-down",
    "tilt-up",
    "establishing-shot",
    "dramatic-zoom",
    "follow-character",
    "sweeping-pan",
    "reveal-down",
]


class InvalidTimelineError(ValueError):
    """Raised when a timeline cannot be trusted and must be rejected as a whole."""


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class CameraKeyframe(_Frozen):
    frame_offset: float
    x: float = 0.0
    y: float = 0.0
    zoom: float = Field(default=1.0, gt=0.0)


class CameraSpec(_Frozen):
    x: float = 0.0
    y: float = 0.0
    zoom: float = Field(default=1.0, gt=0.0)
    keyframes: list[CameraKeyframe] = Field(default_factory=list)
    preset: Optional[CameraPreset] = None
    track_character_id: Optional[str] = None
    track_offset_x: float = 0.0
    track_offset_y: float = 0.0

    @field_validator("keyframes")
    @classmethod
    def _keyframes_ordered(cls, v: list[CameraKeyframe]) -> list[CameraKeyframe]:
        for prev, cur in zip(v, v[1:]):
            if cur.frame_offset < prev.frame_offset:
                raise ValueError(
                    f"camera keyframes must be non-decreasing: {cur.frame_offset} after {prev.frame_offset}"
                )
        return v


class PlacementKeyframe(_Frozen):
    frame_offset: float
    x: float
    y: float


class CharacterPlacement(_Frozen):
    id: str
    x: float = 960.0
    y: float = 700.0
    scale: float = Field(default=2.0, gt=0.0)
    emotion: Emotion = "neutral"
    talking: bool = False
    gesture: Optional[Gesture] = None
    gesture_start: int = Field(default=0, ge=0)
    path: list[PlacementKeyframe] = Field(default_factory=list)

    @field_validator("path")
    @classmethod
    def _path_ordered(cls, v: list[PlacementKeyframe]) -> list[PlacementKeyframe]:
        for prev, cur in zip(v, v[1:]):
            if cur.frame_offset < prev.frame_offset:
                raise ValueError("placement path must be non-decreasing in frame_offset")
        return v


class TransitionSpec(_Frozen):
    kind: TransitionKind = "none"
    duration_frames: int = Field(default=0, ge=0)


class Phoneme(_Frozen):
    time_seconds: float = Field(ge=0.0)
    phoneme_class: str


class AudioSegment(_Frozen):
    character_id: str
    start_frame: int
    phonemes: list[Phoneme] = Field(default_factory=list)
    audio_file: Optional[str] = None


class OverlayInstance(_Frozen):
    kind: OverlayKind
    start_frame: int
    end_frame: int
    payload: dict[str, Any] = Field(default_factory=dict)
    fade_in: Optional[int] = Field(default=None, ge=0)
    fade_out: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _window(self):
        if self.end_frame <= self.start_frame:
            raise ValueError(
                f"overlay {self.kind}: end_frame {self.end_frame} must be after start_frame {self.start_frame}"
            )
        return self


class Scene(_Frozen):
    id: str
    start: int = Field(ge=0)
    end: int
    background_id: str
    board_text: Optional[str] = None
    camera: CameraSpec = CameraSpec()
    characters: list[CharacterPlacement] = Field(default_factory=list)
    caption_text: str = ""
    transition: TransitionSpec = TransitionSpec()
    overlays: list[OverlayInstance] = Field(default_factory=list)

    @property
    def duration(self) -> int:
        return self.end - self.start

    def character(self, character_id: str) -> Optional[CharacterPlacement]:
        for c in self.characters:
            if c.id == character_id:
                return c
        return None

    @model_validator(mode="after")
    def _no_dupe_chars(self):
        ids = [c.id for c in self.characters]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Scene {self.id}: duplicate character")
        return self


def check_scene_intervals(scenes: list[Scene]) -> None:
    bad = [s for s in scenes if s.end <= s.start]
    if bad:
        details = ", ".join(f"{s.id} [{s.start}, {s.end})" for s in bad)
        raise InvalidTimelineError(f"scene end must be after start: {details}")


class Timeline(_Frozen):
    schema_version: int = 1
    title: str = ""
    fps: int = Field(default=30, ge=1)
    resolution: tuple[int, int] = (1920, 1080)
    scenes: list[Scene] = Field(default_factory=list)
    audio: list[AudioSegment] = Field(default_factory=list)
    global_overlays: list[OverlayInstance] = Field(default_factory=list)

    @model_validator(mode="after")
    def _intervals(self):
        check_scene_intervals(self.scenes)
        return self

    @property
    def total_frames(self) -> int:
        return max((s.end for s in self.scenes), default=0)
