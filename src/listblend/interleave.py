"""Round-robin interleaving of sources under per-source quotas."""

from __future__ import annotations

from typing import Iterator, List, Sequence, TypeVar

from .core.errors import err

__all__ = ["interleave", "interleave_indices"]

T = TypeVar("T")


def interleave(sources: Sequence[Sequence[T]], quotas: Sequence[int]) -> List[T]:
    """Merge ``sources`` by taking one item per source per pass.

    Sources are visited in their given order; a source drops out once its
    quota is used up. The inputs are read through cursors and left intact.
    """

    cursors: List[Iterator[T]] = [iter(source) for source in sources]
    return [next(cursors[index]) for index in _schedule(sources, quotas)]


def interleave_indices(sources: Sequence[Sequence[object]], quotas: Sequence[int]) -> List[int]:
    """Return the source index behind each position of :func:`interleave`."""

    return list(_schedule(sources, quotas))


def _schedule(sources: Sequence[Sequence[object]], quotas: Sequence[int]) -> Iterator[int]:
    if len(sources) != len(quotas):
        raise err(
            "E_SHAPE_MISMATCH",
            f"{len(sources)} sources but {len(quotas)} quotas",
        )
    for index, (source, quota) in enumerate(zip(sources, quotas)):
        if quota < 0:
            raise err("E_QUOTA_NEGATIVE", f"quota {quota} for source {index} is negative")
        if quota > len(source):
            raise err(
                "E_QUOTA_EXCEEDS_SOURCE",
                f"quota {quota} for source {index} exceeds its {len(source)} items",
            )

    remaining = [int(quota) for quota in quotas]
    exhausted = [quota == 0 for quota in remaining]
    while not all(exhausted):
        for index in range(len(remaining)):
            if exhausted[index]:
                continue
            yield index
            remaining[index] -= 1
            if remaining[index] == 0:
                exhausted[index] = True
