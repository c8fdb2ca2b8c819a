from __future__ import annotations

from ..schema import Emotion
from .easing import clamp01, lerp
from .state import EmotionBlend, ExpressionParams

EMOTION_WINDOW_FRAMES = 10

# Offsets relative to the neutral face. All emotions share one parameter schema.
EMOTION_PARAMS: dict[str, ExpressionParams] = {
    "neutral": ExpressionParams(
        eye_scale_y=1.0, eye_offset_y=0.0, pupil_scale=1.0,
        brow_left_y=0.0, brow_right_y=0.0, brow_left_rotation=0.0, brow_right_rotation=0.0,
        mouth_curve=0.0, mouth_width=1.0, mouth_open=0.0,
        blush_opacity=0.0, head_tilt=0.0,
    ),
    "happy": ExpressionParams(
        eye_scale_y=0.8, eye_offset_y=0.5, pupil_scale=1.05,
        brow_left_y=-2.0, brow_right_y=-2.0, brow_left_rotation=-3.0, brow_right_rotation=3.0,
        mouth_curve=8.0, mouth_width=1.15, mouth_open=0.2,
        blush_opacity=0.3, head_tilt=2.0,
    ),
    "shocked": ExpressionParams(
        eye_scale_y=1.5, eye_offset_y=-1.0, pupil_scale=0.7,
        brow_left_y=-6.0, brow_right_y=-6.0, brow_left_rotation=0.0, brow_right_rotation=0.0,
        mouth_curve=-2.0, mouth_width=0.8, mouth_open=0.8,
        blush_opacity=0.0, head_tilt=0.0,
    ),
    "thinking": ExpressionParams(
        eye_scale_y=0.9, eye_offset_y=-1.0, pupil_scale=1.0,
        brow_left_y=-1.0, brow_right_y=-4.0, brow_left_rotation=0.0, brow_right_rotation=8.0,
        mouth_curve=-1.0, mouth_width=0.85, mouth_open=0.0,
        blush_opacity=0.0, head_tilt=-5.0,
    ),
    "angry": ExpressionParams(
        eye_scale_y=0.7, eye_offset_y=1.0, pupil_scale=0.85,
        brow_left_y=1.0, brow_right_y=1.0, brow_left_rotation=12.0, brow_right_rotation=-12.0,
        mouth_curve=-5.0, mouth_width=1.1, mouth_open=0.1,
        blush_opacity=0.0, head_tilt=-2.0,
    ),
    "sad": ExpressionParams(
        eye_scale_y=0.85, eye_offset_y=1.0, pupil_scale=1.1,
        brow_left_y=-2.0, brow_right_y=-2.0, brow_left_rotation=-8.0, brow_right_rotation=8.0,
        mouth_curve=-6.0, mouth_width=0.9, mouth_open=0.0,
        blush_opacity=0.0, head_tilt=3.0,
    ),
}


def blend_params(from_emotion: Emotion, to_emotion: Emotion, progress: float) -> ExpressionParams:
    """Linear blend in parameter space; ``progress`` 0 is ``from_emotion``."""
    t = clamp01(progress)
    a = EMOTION_PARAMS[from_emotion].model_dump()
    b = EMOTION_PARAMS[to_emotion].model_dump()
    return ExpressionParams(**{k: lerp(a[k], b[k], t) for k in a})


def emotion_at_entry(
    from_emotion: Emotion,
    to_emotion: Emotion,
    frames_into_scene: int,
    window: int = EMOTION_WINDOW_FRAMES,
) -> EmotionBlend:
    progress = 1.0 if window <= 0 else min(1.0, max(0, frames_into_scene) / window)
    if progress >= 1.0 or from_emotion == to_emotion:
        params = EMOTION_PARAMS[to_emotion]
    else:
        params = blend_params(from_emotion, to_emotion, progress)
    return EmotionBlend(
        from_emotion=from_emotion,
        to_emotion=to_emotion,
        progress=progress,
        params=params,
    )
