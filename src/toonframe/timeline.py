from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import TypeAdapter, ValidationError

from .io import load_model, read_structured, write_json
from .schema import AudioSegment, InvalidTimelineError, Timeline

logger = logging.getLogger(__name__)

_AUDIO_LIST = TypeAdapter(list[AudioSegment])


class TimelineError(Exception):
    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


def load_timeline(path: Path) -> Timeline:
    """Load and validate a timeline. Any problem rejects the whole file."""
    try:
        timeline = load_model(Timeline, path)
    except ValidationError as e:
        raise TimelineError(f"Invalid timeline: {e}", path=path) from e
    except InvalidTimelineError as e:
        raise TimelineError(str(e), path=path) from e
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise TimelineError(f"Failed reading timeline: {e}", path=path) from e

    logger.debug(f"Loaded {len(timeline.scenes)} scenes from {path}")
    return timeline


def load_audio_segments(path: Path) -> list[AudioSegment]:
    """Audio segments from a standalone file: a list, or a mapping with ``segments``."""
    try:
        data = read_structured(path)
        if isinstance(data, dict):
            data = data.get("segments", [])
        return _AUDIO_LIST.validate_python(data or [])
    except ValidationError as e:
        raise TimelineError(f"Invalid audio segments: {e}", path=path) from e
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise TimelineError(f"Failed reading audio segments: {e}", path=path) from e


def with_audio(timeline: Timeline, segments: list[AudioSegment]) -> Timeline:
    if not segments:
        return timeline
    return timeline.model_copy(update={"audio": [*timeline.audio, *segments]})


def write_timeline(timeline: Timeline, out_path: Path) -> Path:
    return write_json(out_path, timeline.model_dump(mode="json"))


def export_timeline_jsonschema(out_path: Path) -> Path:
    return write_json(out_path, Timeline.model_json_schema())
