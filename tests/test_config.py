from __future__ import annotations

from pathlib import Path

import pytest

from toonframe.config import ConfigError, EngineSettings, find_config, load_config, resolve_config


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    def test_engine_and_render_tables(self, tmp_path: Path) -> None:
        cfg_path = _write(
            tmp_path / "toonframe.toml",
            '[engine]\nentry_window_frames = 12\ntracking_damping = 0.5\n\n[render]\nassets_dir = "art"\n',
        )
        config = load_config(cfg_path)
        assert config.engine.entry_window_frames == 12
        assert config.engine.tracking_damping == 0.5
        assert config.engine.emotion_window_frames == 10
        assert config.render.assets_dir == tmp_path / "art"

    def test_unknown_key_rejected(self, tmp_path: Path) -> None:
        cfg_path = _write(tmp_path / "toonframe.toml", "[engine]\nentry_windw = 3\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(cfg_path)

    def test_bad_toml(self, tmp_path: Path) -> None:
        cfg_path = _write(tmp_path / "toonframe.toml", "[engine\n")
        with pytest.raises(ConfigError, match="Failed to parse TOML"):
            load_config(cfg_path)

    def test_missing_explicit_path(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            resolve_config(tmp_path / "nope.toml")


class TestFindConfig:
    def test_walks_up(self, tmp_path: Path) -> None:
        cfg_path = _write(tmp_path / "toonframe.toml", "")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == cfg_path.resolve()

    def test_defaults_when_absent(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        if find_config() is None:
            assert resolve_config().engine == EngineSettings()
