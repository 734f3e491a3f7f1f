"""Quota allocation package."""

from .kernel import allocate, allocate_quotas, target_count
from .trace import TraceCallback, TraceEvent, format_targets, logging_trace
from .types import AllocationResult, QuotaRow, QuotaState
from .validate import validate_allocation

__all__ = [
    "AllocationResult",
    "QuotaRow",
    "QuotaState",
    "TraceCallback",
    "TraceEvent",
    "allocate",
    "allocate_quotas",
    "format_targets",
    "logging_trace",
    "target_count",
    "validate_allocation",
]
