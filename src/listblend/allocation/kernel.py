"""Quota allocation across independently sorted sources."""

from __future__ import annotations

import logging
import math
from fractions import Fraction
from typing import List, Sequence

from ..core.errors import err
from .trace import TraceCallback, TraceEvent
from .types import AllocationResult, QuotaRow

__all__ = ["allocate", "allocate_quotas", "target_count"]

logger = logging.getLogger(__name__)


def allocate(
    sizes: Sequence[int],
    percentages: Sequence[int],
    result_size: int,
    *,
    trace: TraceCallback | None = None,
) -> List[int]:
    """Return how many items each source contributes, in source order."""

    return list(allocate_quotas(sizes, percentages, result_size, trace=trace).quotas)


def allocate_quotas(
    sizes: Sequence[int],
    percentages: Sequence[int],
    result_size: int,
    *,
    trace: TraceCallback | None = None,
) -> AllocationResult:
    """Allocate per-source quotas, redistributing shortfall to surplus sources.

    Each source asks for ``round_half_up(result_size * pct / 100)`` items.
    Sources that cannot meet their target hand the difference to the
    sources with spare items, in proportion to those sources' own targets,
    one redistribution round per most-deficient source. Quotas always land
    in ``[0, size]`` and sum to ``min(result_size, sum(sizes))``.
    """

    _check_inputs(sizes, percentages, result_size)
    rows = [
        QuotaRow.create(index, int(size), target_count(result_size, percentage))
        for index, (size, percentage) in enumerate(zip(sizes, percentages))
    ]
    supply = sum(row.size for row in rows)
    _emit(trace, "initial", 0, rows)

    if supply <= result_size:
        # Not enough items overall: every source gives everything it has.
        for row in rows:
            row.remaining = 0
        _emit(trace, "final", 0, rows)
        return _result(
            rows,
            result_size=result_size,
            supply=supply,
            rounds=0,
            short_circuit=True,
            settled_units=0,
        )

    rows.sort(key=_by_remaining)
    _emit(trace, "sorted", 0, rows)

    rounds = 0
    while _committed(rows) < result_size:
        rounds += 1
        added = _redistribute(rows, result_size)
        if added == 0:
            added = _redistribute(rows, result_size, include_base=True)
        if added == 0:
            logger.debug(
                "allocation stalled after %d rounds (committed=%d, result_size=%d)",
                rounds,
                _committed(rows),
                result_size,
            )
            break
        _emit(trace, "adjusted", rounds, rows)
        rows.sort(key=_by_remaining)
        _emit(trace, "sorted", rounds, rows)

    rows.sort(key=_by_id)
    settled_units = _settle(rows, min(result_size, supply))
    if settled_units:
        logger.debug("settlement moved %d units", settled_units)
        _emit(trace, "settled", rounds, rows)
    _emit(trace, "final", rounds, rows)
    return _result(
        rows,
        result_size=result_size,
        supply=supply,
        rounds=rounds,
        short_circuit=False,
        settled_units=settled_units,
    )


def target_count(result_size: int, percentage: float) -> int:
    """``result_size * percentage / 100`` rounded half up, computed exactly."""

    return math.floor(Fraction(result_size) * Fraction(percentage) / 100 + Fraction(1, 2))


def _redistribute(rows: List[QuotaRow], result_size: int, *, include_base: bool = False) -> int:
    """Run one redistribution round against ``rows[0]``; return units moved."""

    base = rows[0]
    start = 0 if include_base else 1
    remainder = sum(max(row.target, 0) for row in rows[start:] if row.remaining > 0)

    committed = _committed(rows)
    if base.remaining < 0:
        leftover = -base.remaining
    elif committed < result_size:
        leftover = result_size - committed
    else:
        leftover = 0

    added = 0
    equal_split = False
    for position in range(start, len(rows)):
        if added >= leftover:
            break
        row = rows[position]
        if row.remaining <= 0:
            continue

        weight = max(row.target, 0)
        if weight == 0 and equal_split:
            weight = 1
        elif weight == 0 and remainder == 0:
            remainder = len(rows) - position
            weight = 1
            equal_split = True

        share = weight / remainder * leftover
        if leftover > 1:
            allotment = _round_half_up(share)
        else:
            # A single outstanding slot must not round away to nothing.
            allotment = math.ceil(share + 0.5)
        allotment = max(allotment, 0)
        if allotment > row.remaining:
            allotment = row.remaining
            remainder -= weight
        allotment = min(allotment, leftover - added)

        added += allotment
        if base.remaining < 0:
            base.remaining += allotment
        row.remaining -= allotment

    return added


def _settle(rows: Sequence[QuotaRow], expected: int) -> int:
    """Clamp quotas into ``[0, size]`` and settle their sum on ``expected``.

    Excess is taken from the rows furthest above their target (ties: later
    source first); a gap goes to the rows furthest below their target that
    still have spare items (ties: earlier source first).
    """

    moved = 0
    for row in rows:
        if row.remaining < 0:
            moved += -row.remaining
            row.remaining = 0
        elif row.remaining > row.size:
            moved += row.remaining - row.size
            row.remaining = row.size

    total = sum(row.quota for row in rows)
    if total > expected:
        excess = [row.quota - row.target for row in rows]
        lowered = _level_down(
            excess,
            [-row.target for row in rows],
            total - expected,
            sorted(range(len(rows)), key=lambda index: rows[index].id, reverse=True),
        )
        for row, value in zip(rows, lowered):
            row.remaining = row.size - (row.target + value)
    elif total < expected:
        shortfall = [row.target - row.quota for row in rows]
        lowered = _level_down(
            shortfall,
            [row.target - row.size for row in rows],
            expected - total,
            sorted(range(len(rows)), key=lambda index: rows[index].id),
        )
        for row, value in zip(rows, lowered):
            row.remaining = row.size - (row.target - value)
    return moved + abs(total - expected)


def _level_down(values: Sequence[int], floors: Sequence[int], units: int, priority: Sequence[int]) -> List[int]:
    """Take ``units`` from the largest values one at a time, never below ``floors``.

    Equivalent to repeatedly decrementing the current maximum (ties broken
    by ``priority``), computed by lowering everything to a common level.
    """

    def cost(level: int) -> int:
        return sum(max(0, value - max(level, floor)) for value, floor in zip(values, floors))

    low, high = min(floors), max(values)
    while low < high:
        middle = (low + high + 1) // 2
        if cost(middle) >= units:
            low = middle
        else:
            high = middle - 1

    level = low
    lowered = [min(value, max(level + 1, floor)) for value, floor in zip(values, floors)]
    left = units - cost(level + 1)
    for index in priority:
        if left == 0:
            break
        if lowered[index] == level + 1 and floors[index] <= level:
            lowered[index] = level
            left -= 1
    return lowered


def _check_inputs(sizes: Sequence[int], percentages: Sequence[int], result_size: int) -> None:
    if len(sizes) != len(percentages):
        raise err(
            "E_SHAPE_MISMATCH",
            f"{len(sizes)} sources but {len(percentages)} percentages",
        )
    if result_size < 0:
        raise err("E_NEGATIVE_INPUT", f"result_size must be >= 0, got {result_size}")
    for index, size in enumerate(sizes):
        if size < 0:
            raise err("E_NEGATIVE_INPUT", f"source {index} has negative size {size}")


def _committed(rows: Sequence[QuotaRow]) -> int:
    return sum(row.committed for row in rows)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _by_remaining(row: QuotaRow) -> int:
    return row.remaining


def _by_id(row: QuotaRow) -> int:
    return row.id


def _emit(trace: TraceCallback | None, stage: str, round_: int, rows: Sequence[QuotaRow]) -> None:
    if trace is None:
        return
    trace(TraceEvent(stage=stage, round=round_, rows=tuple(row.snapshot() for row in rows)))


def _result(
    rows: Sequence[QuotaRow],
    *,
    result_size: int,
    supply: int,
    rounds: int,
    short_circuit: bool,
    settled_units: int,
) -> AllocationResult:
    return AllocationResult(
        quotas=tuple(row.quota for row in rows),
        rows=tuple(row.snapshot() for row in rows),
        result_size=result_size,
        supply=supply,
        rounds=rounds,
        short_circuit=short_circuit,
        settled_units=settled_units,
    )
