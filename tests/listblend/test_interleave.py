from __future__ import annotations

import pytest

from listblend.core.errors import BlendError
from listblend.interleave import interleave, interleave_indices


def test_interleave_alternates_equal_quotas() -> None:
    merged = interleave([["a1", "a2", "a3"], ["b1", "b2", "b3"]], [3, 2])

    assert merged == ["a1", "b1", "a2", "b2", "a3"]


def test_interleave_drains_longer_quota_after_others_finish() -> None:
    merged = interleave([["a1", "a2"], ["b1", "b2", "b3", "b4"]], [1, 3])

    assert merged == ["a1", "b1", "b2", "b3"]


def test_interleave_skips_zero_quota_sources() -> None:
    merged = interleave([["a1"], ["b1", "b2"], ["c1", "c2"]], [0, 2, 1])

    assert merged == ["b1", "c1", "b2"]
    assert interleave_indices([["a1"], ["b1", "b2"], ["c1", "c2"]], [0, 2, 1]) == [1, 2, 1]


def test_interleave_preserves_source_order_and_inputs() -> None:
    first = [1, 2, 3, 4]
    second = (10, 20, 30)

    merged = interleave([first, second], [4, 2])

    assert [item for item in merged if item < 10] == [1, 2, 3, 4]
    assert [item for item in merged if item >= 10] == [10, 20]
    assert first == [1, 2, 3, 4]


def test_interleave_empty_inputs() -> None:
    assert interleave([], []) == []
    assert interleave([[], []], [0, 0]) == []


def test_interleave_rejects_quota_beyond_source() -> None:
    with pytest.raises(BlendError) as excinfo:
        interleave([["a1"], ["b1"]], [2, 1])
    assert excinfo.value.code == "E_QUOTA_EXCEEDS_SOURCE"


def test_interleave_rejects_bad_shapes() -> None:
    with pytest.raises(BlendError) as excinfo:
        interleave([["a1"], ["b1"]], [1])
    assert excinfo.value.code == "E_SHAPE_MISMATCH"

    with pytest.raises(BlendError) as excinfo:
        interleave([["a1"]], [-1])
    assert excinfo.value.code == "E_QUOTA_NEGATIVE"
