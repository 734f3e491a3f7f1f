"""Blend sorted sources into one list of a requested length and mix."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Mapping, Sequence, TypeVar

from .allocation.kernel import allocate_quotas
from .allocation.trace import TraceCallback
from .allocation.types import AllocationResult
from .core.errors import err
from .interleave import interleave, interleave_indices
from .policy import BlendPolicy

__all__ = ["BlendResult", "blend_lists", "blend_sources"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class BlendResult:
    """Blended output for named sources."""

    items: Sequence[object]
    sources: Sequence[str]
    quotas: Mapping[str, int]
    allocation: AllocationResult


def blend_lists(
    lists: Sequence[Sequence[T]],
    percentages: Sequence[int],
    result_size: int,
    *,
    trace: TraceCallback | None = None,
) -> List[T]:
    """Blend ``lists`` so each contributes roughly its percentage of the output.

    Each list keeps its own relative order in the result.
    """

    if len(lists) != len(percentages):
        raise err(
            "E_SHAPE_MISMATCH",
            f"{len(lists)} lists but {len(percentages)} percentages",
        )
    allocation = allocate_quotas(
        [len(items) for items in lists],
        percentages,
        result_size,
        trace=trace,
    )
    return interleave(lists, allocation.quotas)


def blend_sources(
    sources: Mapping[str, Sequence[object]],
    policy: BlendPolicy,
    *,
    trace: TraceCallback | None = None,
) -> BlendResult:
    """Blend named sources using the order and percentages in ``policy``."""

    unknown = set(sources) - set(policy.source_names)
    if unknown:
        raise err(
            "E_SOURCE_UNKNOWN",
            f"sources not declared in policy: {sorted(unknown)}",
        )

    names = policy.source_names
    lists = [list(sources.get(name, ())) for name in names]
    for name, items in zip(names, lists):
        if not items:
            logger.info("source '%s' is empty", name)

    allocation = allocate_quotas(
        [len(items) for items in lists],
        policy.percentages,
        policy.result_size,
        trace=trace,
    )
    order = interleave_indices(lists, allocation.quotas)
    cursors = [iter(items) for items in lists]
    items = [next(cursors[index]) for index in order]
    quotas = {name: quota for name, quota in zip(names, allocation.quotas)}
    logger.info(
        "blended %d items from %d sources (result_size=%d, rounds=%d)",
        len(items),
        len(names),
        policy.result_size,
        allocation.rounds,
    )
    return BlendResult(
        items=tuple(items),
        sources=tuple(names[index] for index in order),
        quotas=quotas,
        allocation=allocation,
    )
