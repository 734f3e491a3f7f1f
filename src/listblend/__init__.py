"""Blend independently sorted sources into one list with a controlled mix."""

from .allocation import (
    AllocationResult,
    QuotaRow,
    QuotaState,
    TraceEvent,
    allocate,
    allocate_quotas,
    format_targets,
    logging_trace,
    validate_allocation,
)
from .blend import BlendResult, blend_lists, blend_sources
from .core.errors import BlendError, err
from .interleave import interleave
from .policy import BlendPolicy, PolicyLoadingError, load_policy

__all__ = [
    "AllocationResult",
    "BlendError",
    "BlendPolicy",
    "BlendResult",
    "PolicyLoadingError",
    "QuotaRow",
    "QuotaState",
    "TraceEvent",
    "allocate",
    "allocate_quotas",
    "blend_lists",
    "blend_sources",
    "err",
    "format_targets",
    "interleave",
    "load_policy",
    "logging_trace",
    "validate_allocation",
]
