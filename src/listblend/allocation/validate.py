"""Validation helpers for allocation outputs."""

from __future__ import annotations

from ..core.errors import err
from .types import AllocationResult

__all__ = ["validate_allocation"]


def validate_allocation(result: AllocationResult) -> None:
    """Perform structural checks on an allocation result."""

    if len(result.quotas) != len(result.rows):
        raise err(
            "E_SHAPE_MISMATCH",
            f"{len(result.quotas)} quotas for {len(result.rows)} rows",
        )

    for position, (quota, row) in enumerate(zip(result.quotas, result.rows)):
        if row.id != position:
            raise err(
                "E_QUOTA_BOUNDS",
                f"row at position {position} belongs to source {row.id}",
            )
        if quota < 0 or quota > row.size:
            raise err(
                "E_QUOTA_BOUNDS",
                f"quota {quota} for source {row.id} outside [0, {row.size}]",
            )

    total = result.total
    if total != result.expected_total:
        raise err(
            "E_QUOTA_SUM_MISMATCH",
            f"Σ quotas {total} != min(result_size, supply) {result.expected_total}",
        )
