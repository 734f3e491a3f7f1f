from __future__ import annotations

import pytest

from listblend.blend import blend_lists, blend_sources
from listblend.core.errors import BlendError
from listblend.policy import policy_from_mapping


def _items(prefix: str, count: int) -> list[str]:
    return [f"{prefix}{index}" for index in range(count)]


def _policy(mix: dict[str, int], result_size: int):
    return policy_from_mapping(
        {
            "policy_semver": "1.0.0",
            "policy_version": "2026-10-01",
            "result_size": result_size,
            "sources": mix,
        }
    )


def test_blend_lists_alternates_even_mix() -> None:
    blended = blend_lists([_items("a", 10), _items("b", 10)], [50, 50], 10)

    assert blended == ["a0", "b0", "a1", "b1", "a2", "b2", "a3", "b3", "a4", "b4"]


def test_blend_lists_backfills_short_source() -> None:
    blended = blend_lists([_items("a", 2), _items("b", 20)], [50, 50], 10)

    assert blended == ["a0", "b0", "a1", "b1", "b2", "b3", "b4", "b5", "b6", "b7"]


def test_blend_lists_exact_supply_uses_everything() -> None:
    blended = blend_lists([_items("a", 3), _items("b", 4)], [50, 50], 100)

    assert blended == ["a0", "b0", "a1", "b1", "a2", "b2", "b3"]


def test_blend_lists_keeps_each_source_in_order() -> None:
    lists = [_items("a", 5), _items("b", 9), _items("c", 2)]

    blended = blend_lists(lists, [20, 50, 30], 12)

    assert len(blended) == 12
    for prefix, source in zip("abc", lists):
        picked = [item for item in blended if item.startswith(prefix)]
        assert picked == source[: len(picked)]


def test_blend_lists_rejects_mismatched_percentages() -> None:
    with pytest.raises(BlendError) as excinfo:
        blend_lists([_items("a", 2)], [50, 50], 2)
    assert excinfo.value.code == "E_SHAPE_MISMATCH"


def test_blend_sources_follows_policy_order_and_mix() -> None:
    policy = _policy({"articles": 50, "videos": 30, "podcasts": 20}, 10)
    sources = {
        "videos": _items("v", 2),
        "articles": _items("a", 10),
        "podcasts": _items("p", 10),
    }

    result = blend_sources(sources, policy)

    assert result.quotas == {"articles": 6, "videos": 2, "podcasts": 2}
    assert list(result.items) == ["a0", "v0", "p0", "a1", "v1", "p1", "a2", "a3", "a4", "a5"]
    assert list(result.sources) == [
        "articles",
        "videos",
        "podcasts",
        "articles",
        "videos",
        "podcasts",
        "articles",
        "articles",
        "articles",
        "articles",
    ]
    assert result.allocation.rounds == 1


def test_blend_sources_treats_missing_source_as_empty() -> None:
    policy = _policy({"articles": 50, "videos": 50}, 4)

    result = blend_sources({"articles": _items("a", 10)}, policy)

    assert result.quotas == {"articles": 4, "videos": 0}
    assert list(result.items) == ["a0", "a1", "a2", "a3"]


def test_blend_sources_rejects_unknown_source() -> None:
    policy = _policy({"articles": 100}, 4)

    with pytest.raises(BlendError) as excinfo:
        blend_sources({"articles": ["a0"], "podcasts": ["p0"]}, policy)
    assert excinfo.value.code == "E_SOURCE_UNKNOWN"


def test_blend_sources_items_match_their_provenance() -> None:
    mix = {"articles": 40, "videos": 35, "podcasts": 25}
    policy = _policy(mix, 17)
    sources = {
        "articles": _items("articles-", 3),
        "videos": _items("videos-", 30),
        "podcasts": _items("podcasts-", 8),
    }

    result = blend_sources(sources, policy)

    assert len(result.items) == len(result.sources) == 17
    for item, name in zip(result.items, result.sources):
        assert item.startswith(f"{name}-")
    assert list(result.items) == blend_lists(
        [sources[name] for name in mix], list(mix.values()), 17
    )
