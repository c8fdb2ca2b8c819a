from __future__ import annotations

import json
from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)

JSON_SUFFIXES = {".json"}


def read_structured(path: str | Path) -> Any:
    """Parse a JSON or YAML file, chosen by suffix."""
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in JSON_SUFFIXES:
        return json.loads(text)
    return yaml.safe_load(text)


def read_mapping(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    data = read_structured(p)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Root must be a mapping: {p}")
    return data


def load_model(model_cls: type[T], path: str | Path) -> T:
    return model_cls.model_validate(read_mapping(path))


def write_json(path: Path, payload: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return path
