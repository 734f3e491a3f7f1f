"""Diagnostic traces of the allocator's working rows."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from .types import QuotaState

__all__ = [
    "TraceCallback",
    "TraceEvent",
    "format_targets",
    "logging_trace",
]


@dataclass(frozen=True)
class TraceEvent:
    """Snapshot of all rows after one allocator step."""

    stage: str
    round: int
    rows: Sequence[QuotaState]


TraceCallback = Callable[[TraceEvent], None]


def format_targets(rows: Sequence[QuotaState]) -> str:
    """Render rows as the tab separated ID/SIZE/GOAL/DIFF/USE table."""

    columns = (
        ("ID:", lambda row: row.id),
        ("SIZE:", lambda row: row.size),
        ("GOAL:", lambda row: row.target),
        ("DIFF:", lambda row: row.capacity),
        ("USE:", lambda row: row.remaining),
    )
    lines = ["TARGETS:"]
    for label, getter in columns:
        cells = [label] + [str(getter(row)) for row in rows]
        lines.append("\t".join(cells) + "\t")
    return "\n".join(lines)


def logging_trace(logger: logging.Logger, level: int = logging.DEBUG) -> TraceCallback:
    """Return a trace callback that logs each event's target table."""

    def _emit(event: TraceEvent) -> None:
        if not logger.isEnabledFor(level):
            return
        logger.log(
            level,
            "allocation %s (round=%d)\n%s",
            event.stage,
            event.round,
            format_targets(event.rows),
        )

    return _emit
