"""Read named, pre-sorted sources from disk."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List

import polars as pl

from .core.errors import err

__all__ = ["load_sources", "sources_from_frame"]

_FRAME_READERS = {
    ".parquet": pl.read_parquet,
    ".csv": pl.read_csv,
    ".jsonl": pl.read_ndjson,
    ".ndjson": pl.read_ndjson,
}


def load_sources(path: Path | str) -> Dict[str, List[object]]:
    """Load sources keyed by name, each in its own ranked order.

    ``.json`` files hold an object mapping source name to a list of items.
    Tabular files (Parquet, CSV, JSONL) hold one row per item with ``source``
    and ``item`` columns; an optional ``rank`` column orders items within a
    source, otherwise file order is kept.
    """

    source_path = Path(path).expanduser().resolve()
    if not source_path.exists():
        raise err("E_DATASET_NOT_FOUND", f"sources file missing at '{source_path}'")

    suffix = source_path.suffix.lower()
    if suffix == ".json":
        return _sources_from_json(source_path)
    reader = _FRAME_READERS.get(suffix)
    if reader is None:
        raise err(
            "E_DATASET_FORMAT",
            f"unsupported sources format '{suffix}' (expected .json, .jsonl, .csv or .parquet)",
        )
    return sources_from_frame(reader(source_path))


def sources_from_frame(frame: pl.DataFrame) -> Dict[str, List[object]]:
    """Split a long ``source``/``item`` frame into per-source lists."""

    required = {"source", "item"}
    missing = required - set(frame.columns)
    if missing:
        raise err(
            "E_DATASET_FORMAT",
            f"sources frame missing columns {sorted(missing)}",
        )
    if frame.height == 0:
        raise err("E_DATASET_EMPTY", "sources frame contained no rows")

    names = frame.get_column("source").cast(pl.Utf8).unique(maintain_order=True).to_list()
    if "rank" in frame.columns:
        frame = frame.sort("rank", maintain_order=True)
    sources: Dict[str, List[object]] = {}
    for name in names:
        subset = frame.filter(pl.col("source").cast(pl.Utf8) == name)
        sources[str(name)] = subset.get_column("item").to_list()
    return sources


def _sources_from_json(path: Path) -> Dict[str, List[object]]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise err("E_DATASET_FORMAT", f"sources JSON at '{path}' is invalid: {exc}") from exc
    if not isinstance(payload, dict):
        raise err("E_DATASET_FORMAT", "sources JSON must decode to an object of lists")
    sources: Dict[str, List[object]] = {}
    for name, items in payload.items():
        if not isinstance(items, list):
            raise err("E_DATASET_FORMAT", f"source '{name}' must be a list of items")
        sources[str(name)] = list(items)
    if not sources:
        raise err("E_DATASET_EMPTY", f"sources JSON at '{path}' declared no sources")
    return sources
