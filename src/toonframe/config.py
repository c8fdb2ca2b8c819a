from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

CONFIG_FILENAME = "toonframe.toml"


class EngineSettings(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    entry_window_frames: int = Field(default=28, ge=0)
    emotion_window_frames: int = Field(default=10, ge=0)
    tracking_damping: float = Field(default=0.3, ge=0.0, le=1.0)
    audio_buffer_seconds: float = Field(default=1.0, ge=0.0)
    caption_margin_frames: int = Field(default=5, ge=0)
    caption_fade_frames: int = Field(default=8, ge=0)


class RenderConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    assets_dir: Path = Path("assets")
    background_color: tuple[int, int, int] = (26, 26, 26)


class ToonframeConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    engine: EngineSettings = EngineSettings()
    render: RenderConfig = RenderConfig()


class ConfigError(Exception):
    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


def load_config(config_path: Path) -> ToonframeConfig:
    if not config_path.exists():
        raise ConfigError("Config file not found", path=config_path)

    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore

    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except Exception as e:
        raise ConfigError(f"Failed to parse TOML: {e}", path=config_path) from e

    try:
        config = ToonframeConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration: {e}", path=config_path) from e

    if not config.render.assets_dir.is_absolute():
        config.render.assets_dir = config_path.parent / config.render.assets_dir
    return config


def find_config(start_dir: Optional[Path] = None) -> Optional[Path]:
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.exists():
            return candidate
        if current == current.parent:
            return None
        current = current.parent


def resolve_config(config_path: Optional[Path] = None) -> ToonframeConfig:
    """Explicit path must exist; otherwise search upward and fall back to defaults."""
    if config_path is not None:
        return load_config(config_path)
    found = find_config()
    if found is None:
        return ToonframeConfig()
    return load_config(found)
