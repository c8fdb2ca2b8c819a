from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .config import EngineSettings
from .engine.directory import SceneDirectory
from .engine.visemes import VisemeResolver
from .schema import Timeline
from .timeline import TimelineError, load_timeline


@dataclass
class ValidationResult:
    ok: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    missing_files: list[str] = field(default_factory=list)


def check_timeline(timeline: Timeline, settings: Optional[EngineSettings] = None) -> list[str]:
    """Authoring problems that still leave a playable timeline."""
    warnings: list[str] = []
    directory = SceneDirectory(timeline.scenes)

    if not directory.is_sorted():
        warnings.append("scenes are not sorted by start frame")
    for start, end in directory.gaps():
        warnings.append(f"frames {start}-{end - 1} are not covered by any scene and render blank")
    for a, b in directory.overlaps():
        warnings.append(f"scenes {a} and {b} overlap; {b} wins where both apply")

    settings = settings or EngineSettings()
    resolver = VisemeResolver(
        timeline.audio,
        fps=timeline.fps,
        buffer_frames=round(settings.audio_buffer_seconds * timeline.fps),
    )
    warnings.extend(resolver.warnings)

    placed = {c.id for s in timeline.scenes for c in s.characters}
    for seg in timeline.audio:
        if seg.character_id not in placed:
            warnings.append(f"audio for '{seg.character_id}' but no scene places that character")
        if not seg.phonemes:
            warnings.append(f"audio for '{seg.character_id}' at frame {seg.start_frame} has no phonemes")

    for scene in timeline.scenes:
        track = scene.camera.track_character_id
        if track and scene.character(track) is None:
            warnings.append(f"{scene.id}: camera tracks '{track}' which is not in the scene")
        for ov in scene.overlays:
            if ov.end_frame <= scene.start or ov.start_frame >= scene.end:
                warnings.append(
                    f"{scene.id}: {ov.kind} overlay [{ov.start_frame}, {ov.end_frame}) never overlaps its scene"
                )
    return warnings


def missing_assets(timeline: Timeline, assets_dir: Path) -> list[str]:
    missing: list[str] = []
    for scene in timeline.scenes:
        bg_file = assets_dir / "bg" / f"{scene.background_id}.png"
        if not bg_file.exists():
            missing.append(str(bg_file))
        for c in scene.characters:
            cutouts = assets_dir / "cutouts"
            if not (cutouts / f"{c.id}_{c.emotion}.png").exists() and not (cutouts / f"{c.id}.png").exists():
                missing.append(str(cutouts / f"{c.id}_{c.emotion}.png"))
    return sorted(set(missing))


def validate_timeline(
    timeline_path: Path,
    assets_dir: Optional[Path] = None,
    allow_missing_assets: bool = True,
    settings: Optional[EngineSettings] = None,
) -> ValidationResult:
    try:
        timeline = load_timeline(timeline_path)
    except TimelineError as e:
        return ValidationResult(False, [str(e)])

    warnings = check_timeline(timeline, settings)
    missing = missing_assets(timeline, assets_dir) if assets_dir is not None else []

    ok = allow_missing_assets or not missing
    return ValidationResult(ok, [], warnings, missing)
