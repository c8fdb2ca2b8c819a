from __future__ import annotations

import logging
import math
import re
from bisect import bisect_right
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Sequence

from ..schema import AudioSegment
from .easing import sine_wave

logger = logging.getLogger(__name__)


class MouthShape(IntEnum):
    CLOSED = 0
    SLIGHT = 1
    ROUND = 2
    WIDE = 3


PHONEME_SHAPES: dict[str, MouthShape] = {
    **{p: MouthShape.WIDE for p in ("AA", "AE", "AH", "AY", "EH", "EY")},
    **{p: MouthShape.ROUND for p in ("AO", "OW", "UH", "UW", "OY")},
    **{p: MouthShape.SLIGHT for p in ("B", "M", "P", "F", "V", "W")},
    **{
        p: MouthShape.SLIGHT
        for p in (
            "T", "D", "N", "S", "Z", "K", "G", "L", "R", "Y", "HH", "NG",
            "TH", "DH", "SH", "ZH", "CH", "JH", "ER", "IH", "IY", "AW",
        )
    },
    "SIL": MouthShape.CLOSED,
    "SP": MouthShape.CLOSED,
}

_STRESS = re.compile(r"\d+$")


def mouth_shape_for(phoneme_class: str) -> MouthShape:
    """Map an ARPAbet class (stress digits allowed) to a mouth shape."""
    key = _STRESS.sub("", phoneme_class.strip().upper())
    return PHONEME_SHAPES.get(key, MouthShape.CLOSED)


@dataclass(frozen=True)
class Viseme:
    mouth_shape: MouthShape = MouthShape.CLOSED
    talking: bool = False


SILENT = Viseme()


@dataclass(frozen=True)
class _IndexedSegment:
    segment: AudioSegment
    times: tuple[float, ...]
    shapes: tuple[MouthShape, ...]
    end_frame: int


class VisemeResolver:
    """Per-character lip-sync lookup driven by phoneme timestamps.

    Segments are indexed once; ``resolve`` only reads. If two segments of the
    same character are active at once, the one declared first wins. That case
    is reported as a warning at construction and otherwise left alone.
    """

    def __init__(
        self,
        segments: Sequence[AudioSegment],
        fps: int = 30,
        buffer_frames: Optional[int] = None,
    ):
        self.fps = fps
        self.buffer_frames = fps if buffer_frames is None else buffer_frames
        self.warnings: list[str] = []
        self._by_character: dict[str, list[_IndexedSegment]] = {}

        for seg in segments:
            if not seg.phonemes:
                continue
            times = tuple(p.time_seconds for p in seg.phonemes)
            if any(b < a for a, b in zip(times, times[1:])):
                self._warn(
                    f"{seg.character_id}@{seg.start_frame}: phoneme timestamps are not non-decreasing"
                )
            end_frame = seg.start_frame + math.ceil(times[-1] * fps) + self.buffer_frames
            indexed = _IndexedSegment(
                segment=seg,
                times=times,
                shapes=tuple(mouth_shape_for(p.phoneme_class) for p in seg.phonemes),
                end_frame=end_frame,
            )
            self._by_character.setdefault(seg.character_id, []).append(indexed)

        for character_id, items in self._by_character.items():
            for i, a in enumerate(items):
                for b in items[i + 1:]:
                    if a.segment.start_frame <= b.end_frame and b.segment.start_frame <= a.end_frame:
                        self._warn(
                            f"{character_id}: audio segments at frames {a.segment.start_frame} and "
                            f"{b.segment.start_frame} overlap; the first declared wins"
                        )

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    @property
    def has_audio(self) -> bool:
        return bool(self._by_character)

    def active_segment(self, character_id: str, frame: int) -> Optional[AudioSegment]:
        found = self._active(character_id, frame)
        return found.segment if found is not None else None

    def _active(self, character_id: str, frame: int) -> Optional[_IndexedSegment]:
        for item in self._by_character.get(character_id, ()):
            if item.segment.start_frame <= frame <= item.end_frame:
                return item
        return None

    def resolve(self, character_id: str, frame: int) -> Viseme:
        item = self._active(character_id, frame)
        if item is None:
            return SILENT
        relative_seconds = (frame - item.segment.start_frame) / self.fps
        idx = bisect_right(item.times, relative_seconds) - 1
        if idx < 0:
            return SILENT
        shape = item.shapes[idx]
        return Viseme(mouth_shape=shape, talking=shape != MouthShape.CLOSED)


def babble_mouth_shape(frame: int, talking: bool, fps: int = 30) -> MouthShape:
    """Speech-like mouth movement for characters without phoneme data."""
    if not talking:
        return MouthShape.CLOSED

    fast = sine_wave(frame, 4.5, fps=fps)
    medium = sine_wave(frame, 2.2, 0.7, fps=fps)
    slow = sine_wave(frame, 0.8, 1.3, fps=fps)

    # pause between phrases
    if slow < -0.6:
        return MouthShape.CLOSED

    combined = fast * 0.6 + medium * 0.4
    if combined > 0.5:
        return MouthShape.WIDE
    if combined > 0.0:
        return MouthShape.ROUND
    if combined > -0.4:
        return MouthShape.SLIGHT
    return MouthShape.CLOSED
