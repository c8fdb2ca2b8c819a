from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from toonframe.config import EngineSettings
from toonframe.schema import Timeline
from toonframe.timeline import (
    TimelineError,
    export_timeline_jsonschema,
    load_audio_segments,
    load_timeline,
    with_audio,
    write_timeline,
)
from toonframe.validate import check_timeline, missing_assets, validate_timeline

TIMELINE = {
    "title": "demo",
    "fps": 30,
    "scenes": [
        {
            "id": "intro",
            "start": 0,
            "end": 60,
            "background_id": "classroom",
            "camera": {"preset": "slow-zoom-in"},
            "characters": [{"id": "ana", "emotion": "happy"}],
        },
        {
            "id": "lab",
            "start": 60,
            "end": 120,
            "background_id": "lab",
            "transition": {"kind": "iris", "duration_frames": 12},
            "characters": [{"id": "ana", "talking": True}],
        },
    ],
}


def _write_yaml(path: Path, data) -> Path:
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestLoadTimeline:
    def test_yaml(self, tmp_path: Path):
        tl = load_timeline(_write_yaml(tmp_path / "timeline.yaml", TIMELINE))
        assert [s.id for s in tl.scenes] == ["intro", "lab"]
        assert tl.total_frames == 120

    def test_json(self, tmp_path: Path):
        path = tmp_path / "timeline.json"
        path.write_text(json.dumps(TIMELINE), encoding="utf-8")
        assert load_timeline(path).title == "demo"

    def test_rejects_bad_interval(self, tmp_path: Path):
        data = json.loads(json.dumps(TIMELINE))
        data["scenes"][1]["end"] = 60
        with pytest.raises(TimelineError):
            load_timeline(_write_yaml(tmp_path / "timeline.yaml", data))

    def test_rejects_unknown_fields(self, tmp_path: Path):
        data = json.loads(json.dumps(TIMELINE))
        data["scenes"][0]["colour"] = "red"
        with pytest.raises(TimelineError):
            load_timeline(_write_yaml(tmp_path / "timeline.yaml", data))

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(TimelineError, match="Failed reading"):
            load_timeline(tmp_path / "missing.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "timeline.yaml"
        path.write_text("scenes: [\n  - id: a\n", encoding="utf-8")
        with pytest.raises(TimelineError, match="Failed reading"):
            load_timeline(path)

    def test_write_round_trip(self, tmp_path: Path):
        tl = load_timeline(_write_yaml(tmp_path / "timeline.yaml", TIMELINE))
        out = write_timeline(tl, tmp_path / "out" / "timeline.json")
        assert load_timeline(out) == tl

    def test_export_jsonschema(self, tmp_path: Path):
        out = export_timeline_jsonschema(tmp_path / "timeline.schema.json")
        schema = json.loads(out.read_text(encoding="utf-8"))
        assert "scenes" in schema["properties"]


class TestAudioSegments:
    SEGMENT = {"character_id": "ana", "start_frame": 60, "phonemes": [{"time_seconds": 0, "phoneme_class": "AA"}]}

    def test_list_form(self, tmp_path: Path):
        segs = load_audio_segments(_write_yaml(tmp_path / "audio.yaml", [self.SEGMENT]))
        assert segs[0].character_id == "ana"

    def test_mapping_form(self, tmp_path: Path):
        path = tmp_path / "audio.json"
        path.write_text(json.dumps({"segments": [self.SEGMENT]}), encoding="utf-8")
        assert len(load_audio_segments(path)) == 1

    def test_invalid(self, tmp_path: Path):
        with pytest.raises(TimelineError):
            load_audio_segments(_write_yaml(tmp_path / "audio.yaml", [{"start_frame": 1}]))

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "audio.yaml"
        path.write_text("- character_id: ana\n  phonemes: [\n", encoding="utf-8")
        with pytest.raises(TimelineError):
            load_audio_segments(path)

    def test_with_audio_appends(self, tmp_path: Path):
        tl = Timeline.model_validate(TIMELINE)
        segs = load_audio_segments(_write_yaml(tmp_path / "audio.yaml", [self.SEGMENT]))
        assert len(with_audio(tl, segs).audio) == 1
        assert with_audio(tl, []) is tl


class TestValidate:
    def test_clean_timeline(self, tmp_path: Path):
        res = validate_timeline(_write_yaml(tmp_path / "timeline.yaml", TIMELINE))
        assert res.ok is True
        assert res.errors == []
        assert res.warnings == []

    def test_invalid_timeline_reports_error(self, tmp_path: Path):
        data = json.loads(json.dumps(TIMELINE))
        data["scenes"][0]["end"] = -1
        res = validate_timeline(_write_yaml(tmp_path / "timeline.yaml", data))
        assert res.ok is False
        assert len(res.errors) == 1

    def test_malformed_yaml_reports_error(self, tmp_path):
        path = tmp_path / "timeline.yaml"
        path.write_text("scenes: [\n  - id: a\n", encoding="utf-8")
        res = validate_timeline(path)
        assert res.ok is False
        assert "Failed reading timeline" in res.errors[0]

    def test_warnings(self):
        data = json.loads(json.dumps(TIMELINE))
        data["scenes"][1]["start"] = 80
        data["scenes"][1]["camera"] = {"track_character_id": "bo"}
        data["audio"] = [{"character_id": "bo", "start_frame": 0, "phonemes": []}]
        warnings = check_timeline(Timeline.model_validate(data))
        joined = "\n".join(warnings)
        assert "frames 60-79" in joined
        assert "no scene places that character" in joined
        assert "no phonemes" in joined
        assert "camera tracks 'bo'" in joined

    def test_missing_assets(self, tmp_path: Path):
        assets = tmp_path / "assets"
        (assets / "bg").mkdir(parents=True)
        (assets / "bg" / "classroom.png").write_bytes(b"")
        (assets / "cutouts").mkdir()
        (assets / "cutouts" / "ana.png").write_bytes(b"")
        missing = missing_assets(Timeline.model_validate(TIMELINE), assets)
        assert missing == [str(assets / "bg" / "lab.png")]

    def test_strict_assets(self, tmp_path: Path):
        path = _write_yaml(tmp_path / "timeline.yaml", TIMELINE)
        res = validate_timeline(path, assets_dir=tmp_path / "assets", allow_missing_assets=False)
        assert res.ok is False
        assert res.errors == []
        assert res.missing_files


def test_overlap_warning_follows_configured_buffer():
    data = json.loads(json.dumps(TIMELINE))
    data["audio"] = [
        {"character_id": "ana", "start_frame": 0, "phonemes": [{"time_seconds": 0.0, "phoneme_class": "AA"}, {"time_seconds": 0.5, "phoneme_class": "SIL"}]},
        {"character_id": "ana", "start_frame": 40, "phonemes": [{"time_seconds": 0.0, "phoneme_class": "EH"}]},
    ]
    timeline = Timeline.model_validate(data)
    assert any("overlap" in w for w in check_timeline(timeline))
    no_buffer = EngineSettings(audio_buffer_seconds=0.0)
    assert not any("overlap" in w for w in check_timeline(timeline, no_buffer))
