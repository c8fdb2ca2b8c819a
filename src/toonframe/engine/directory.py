from __future__ import annotations

from typing import Iterator, Optional, Sequence

from ..schema import InvalidTimelineError, Scene, check_scene_intervals


class SceneDirectory:
    """Read-only, ordered view over a timeline's scenes.

    When several scenes contain the same frame, the one declared last wins.
    Deliberate overlaps use this to let an insert shot sit on top of a
    longer scene.
    """

    def __init__(self, scenes: Sequence[Scene]):
        check_scene_intervals(list(scenes))
        self._scenes: tuple[Scene, ...] = tuple(scenes)

    def __len__(self) -> int:
        return len(self._scenes)

    def __iter__(self) -> Iterator[Scene]:
        return iter(self._scenes)

    def __getitem__(self, index: int) -> Scene:
        return self._scenes[index]

    @property
    def total_frames(self) -> int:
        return max((s.end for s in self._scenes), default=0)

    def scene_at(self, frame: int) -> Optional[Scene]:
        for scene in reversed(self._scenes):
            if scene.start <= frame < scene.end:
                return scene
        return None

    def index_of(self, scene: Scene) -> int:
        for i, s in enumerate(self._scenes):
            if s is scene:
                return i
        for i, s in enumerate(self._scenes):
            if s.id == scene.id:
                return i
        raise KeyError(f"scene not in directory: {scene.id}")

    def previous_of(self, scene: Scene) -> Optional[Scene]:
        idx = self.index_of(scene)
        return self._scenes[idx - 1] if idx > 0 else None

    def gaps(self) -> list[tuple[int, int]]:
        """Frame ranges ``[start, end)`` before the last scene end that no scene covers."""
        spans = sorted((s.start, s.end) for s in self._scenes)
        out: list[tuple[int, int]] = []
        cursor = 0
        for start, end in spans:
            if start > cursor:
                out.append((cursor, start))
            cursor = max(cursor, end)
        return out

    def overlaps(self) -> list[tuple[str, str]]:
        out: list[tuple[str, str]] = []
        for i, a in enumerate(self._scenes):
            for b in self._scenes[i + 1:]:
                if a.start < b.end and b.start < a.end:
                    out.append((a.id, b.id))
        return out

    def is_sorted(self) -> bool:
        starts = [s.start for s in self._scenes]
        return starts == sorted(starts)


__all__ = ["SceneDirectory", "InvalidTimelineError"]
