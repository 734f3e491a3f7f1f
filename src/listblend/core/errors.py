"""Failure taxonomy used across the blend pipeline.

Every failure raised by the allocator, the interleaver or the file-facing
layers carries a stable ``E_*`` code. The code is mapped onto a small set of
failure categories so callers (the CLI, service wrappers) can emit a single
well-formed record without parsing messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Tuple


class FailureCategory(Enum):
    """High-level failure buckets."""

    F1_INPUT = "input_contract_violation"
    F2_ALLOCATION = "allocation_invariant_violation"
    F3_SOURCES = "source_resolution_failure"
    F4_IO = "io_read_failure"


_FAILURE_CODE_MAP: Mapping[str, Tuple[FailureCategory, str]] = {
    "E_SHAPE_MISMATCH": (FailureCategory.F1_INPUT, "input_shape_mismatch"),
    "E_NEGATIVE_INPUT": (FailureCategory.F1_INPUT, "input_negative_value"),
    "E_QUOTA_NEGATIVE": (FailureCategory.F1_INPUT, "quota_negative"),
    "E_QUOTA_EXCEEDS_SOURCE": (
        FailureCategory.F2_ALLOCATION,
        "quota_exceeds_source",
    ),
    "E_QUOTA_SUM_MISMATCH": (FailureCategory.F2_ALLOCATION, "quota_sum_mismatch"),
    "E_QUOTA_BOUNDS": (FailureCategory.F2_ALLOCATION, "quota_out_of_bounds"),
    "E_SOURCE_UNKNOWN": (FailureCategory.F3_SOURCES, "source_not_in_policy"),
    "E_DATASET_NOT_FOUND": (FailureCategory.F4_IO, "dataset_missing"),
    "E_DATASET_FORMAT": (FailureCategory.F4_IO, "dataset_format_invalid"),
    "E_DATASET_EMPTY": (FailureCategory.F4_IO, "dataset_empty"),
}


@dataclass(frozen=True)
class ErrorContext:
    """Structured payload describing a blend failure."""

    code: str
    detail: str

    def as_message(self) -> str:
        return f"{self.code}: {self.detail}"

    @property
    def failure_category(self) -> FailureCategory:
        return _FAILURE_CODE_MAP.get(
            self.code, (FailureCategory.F2_ALLOCATION, self.code)
        )[0]

    @property
    def failure_code(self) -> str:
        return _FAILURE_CODE_MAP.get(
            self.code, (FailureCategory.F2_ALLOCATION, self.code)
        )[1]


class BlendError(ValueError):
    """Contract violation raised by the blend pipeline."""

    def __init__(self, context: ErrorContext) -> None:
        super().__init__(context.as_message())
        self.context = context

    @property
    def code(self) -> str:
        return self.context.code

    def failure_record(self) -> Dict[str, str]:
        return {
            "code": self.context.code,
            "detail": self.context.detail,
            "failure_category": self.context.failure_category.value,
            "failure_code": self.context.failure_code,
        }


def err(code: str, detail: str) -> BlendError:
    """Utility to build a :class:`BlendError` with minimal ceremony."""

    return BlendError(ErrorContext(code=code, detail=detail))


__all__ = ["BlendError", "ErrorContext", "FailureCategory", "err"]
