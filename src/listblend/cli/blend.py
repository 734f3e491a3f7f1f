"""CLI wrapper for blending named sources under a YAML policy."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from listblend.allocation.trace import logging_trace
from listblend.core.errors import BlendError
from listblend.core.logging import configure_logging, get_logger
from listblend.policy import PolicyLoadingError
from listblend.runner import BlendRunOutputs, BlendRunner

logger = get_logger(__name__)


def _summary(outputs: BlendRunOutputs) -> dict[str, object]:
    result = outputs.result
    return {
        "policy_path": str(outputs.policy.path) if outputs.policy.path else None,
        "policy_digest": outputs.policy_digest,
        "sources_path": str(outputs.sources_path),
        "result_size": outputs.policy.result_size,
        "quotas": dict(result.quotas),
        "items": [
            {"source": source, "item": item}
            for source, item in zip(result.sources, result.items)
        ],
        "metrics": dict(outputs.metrics),
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Blend pre-sorted sources into one list following a percentage mix policy.",
    )
    parser.add_argument("--policy", required=True, type=Path, help="Path to the blend policy YAML.")
    parser.add_argument(
        "--sources",
        required=True,
        type=Path,
        help="Sources file (.json object of lists, or .jsonl/.csv/.parquet with source/item[/rank] columns).",
    )
    parser.add_argument("--result-size", type=int, help="Output length (overrides the policy).")
    parser.add_argument("--result-json", dest="result_json", type=Path, help="Optional JSON file to persist the blend summary.")
    parser.add_argument("--trace", action="store_true", help="Log allocator target tables at DEBUG level.")

    args = parser.parse_args(argv)
    configure_logging(level=logging.DEBUG if args.trace else logging.INFO)

    if args.result_size is not None and args.result_size < 0:
        parser.error("--result-size must be >= 0")

    trace = logging_trace(logging.getLogger("listblend.allocation")) if args.trace else None
    runner = BlendRunner()
    try:
        outputs = runner.run(
            policy_path=args.policy,
            sources_path=args.sources,
            result_size=args.result_size,
            trace=trace,
        )
    except (BlendError, PolicyLoadingError) as exc:
        print(f"[listblend] failed: {exc}", file=sys.stderr)
        return 1

    summary = _summary(outputs)
    payload = json.dumps(summary, indent=2, sort_keys=True, default=str)
    if args.result_json:
        target = args.result_json.expanduser().resolve()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(payload, encoding="utf-8")
        logger.info("blend summary written to %s", target)
    print(payload)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())
