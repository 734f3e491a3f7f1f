"""Common data structures for quota allocation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


@dataclass
class QuotaRow:
    """Working record for one source, mutated only inside the allocator.

    ``capacity`` is the fixed signed surplus (``size - target``);
    ``remaining`` starts at ``capacity`` and moves toward zero as the row
    donates (surplus) or receives (deficit) items.
    """

    id: int
    size: int
    target: int
    capacity: int
    remaining: int

    @classmethod
    def create(cls, id: int, size: int, target: int) -> "QuotaRow":
        capacity = size - target
        return cls(id=id, size=size, target=target, capacity=capacity, remaining=capacity)

    @property
    def committed(self) -> int:
        return self.size - abs(self.remaining)

    @property
    def quota(self) -> int:
        return self.size - self.remaining

    def snapshot(self) -> "QuotaState":
        return QuotaState(
            id=self.id,
            size=self.size,
            target=self.target,
            capacity=self.capacity,
            remaining=self.remaining,
        )


@dataclass(frozen=True)
class QuotaState:
    """Immutable view of a :class:`QuotaRow` at one point in time."""

    id: int
    size: int
    target: int
    capacity: int
    remaining: int

    @property
    def quota(self) -> int:
        return self.size - self.remaining


@dataclass(frozen=True)
class AllocationResult:
    """Final allocation outcome, rows restored to source order."""

    quotas: Sequence[int]
    rows: Sequence[QuotaState]
    result_size: int
    supply: int
    rounds: int
    short_circuit: bool
    settled_units: int

    @property
    def total(self) -> int:
        return sum(self.quotas)

    @property
    def expected_total(self) -> int:
        return min(self.result_size, self.supply)

    def shortfall_ids(self) -> Sequence[int]:
        """Sources whose quota ended below their percentage target."""

        return tuple(row.id for row in self.rows if row.quota < row.target)


__all__ = ["AllocationResult", "QuotaRow", "QuotaState"]
