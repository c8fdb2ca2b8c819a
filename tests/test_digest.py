from __future__ import annotations

from toonframe.digest import hash_dict, stable_json, state_digest
from toonframe.engine.renderer import Renderer
from toonframe.schema import Scene, Timeline


def test_stable_json_sorts_keys() -> None:
    assert stable_json({"b": 1, "a": 2}) == '{"a":2,"b":1}'


def test_hash_dict_order_independent() -> None:
    assert hash_dict({"a": 1, "b": 2}) == hash_dict({"b": 2, "a": 1})
    assert len(hash_dict({}).short()) == 12


def test_state_digest_matches_across_renderers() -> None:
    tl = Timeline(scenes=[Scene(id="s", start=0, end=10, background_id="bg")])
    a = state_digest(Renderer(tl).render(4))
    b = state_digest(Renderer(tl).render(4))
    assert a == b
    assert a != state_digest(Renderer(tl).render(5))
