"""Runner that loads a policy and sources from disk and blends them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping

from .allocation.trace import TraceCallback, logging_trace
from .allocation.validate import validate_allocation
from .blend import BlendResult, blend_sources
from .core.logging import get_logger
from .loader import load_sources
from .policy import BlendPolicy, load_policy

__all__ = ["BlendRunOutputs", "BlendRunner"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlendRunOutputs:
    """Materialised outputs of one blend run."""

    policy: BlendPolicy
    policy_digest: str | None
    sources_path: Path
    result: BlendResult
    metrics: Mapping[str, object]


class BlendRunner:
    """Execute a policy-driven blend over sources read from disk."""

    def run(
        self,
        *,
        policy_path: Path,
        sources_path: Path,
        result_size: int | None = None,
        trace: TraceCallback | None = None,
    ) -> BlendRunOutputs:
        policy_path = Path(policy_path).expanduser().resolve()
        sources_path = Path(sources_path).expanduser().resolve()
        policy = load_policy(policy_path)
        if result_size is not None:
            policy = policy.with_result_size(result_size)
        if trace is None and policy.trace:
            trace = logging_trace(get_logger("listblend.allocation", logging.DEBUG))

        sources = load_sources(sources_path)
        logger.info(
            "blending %d sources from %s (policy %s, result_size=%d)",
            len(sources),
            sources_path,
            policy.policy_version,
            policy.result_size,
        )
        result = blend_sources(sources, policy, trace=trace)
        validate_allocation(result.allocation)

        return BlendRunOutputs(
            policy=policy,
            policy_digest=policy.digest,
            sources_path=sources_path,
            result=result,
            metrics=self._build_metrics(policy=policy, result=result),
        )

    def _build_metrics(self, *, policy: BlendPolicy, result: BlendResult) -> Dict[str, object]:
        allocation = result.allocation
        names = policy.source_names
        shortfall = [names[index] for index in allocation.shortfall_ids()]
        return {
            "blend.sources": len(names),
            "blend.result_size": policy.result_size,
            "blend.supply": allocation.supply,
            "blend.output_size": len(result.items),
            "blend.rounds": allocation.rounds,
            "blend.short_circuit": allocation.short_circuit,
            "blend.settled_units": allocation.settled_units,
            "blend.shortfall_sources": shortfall,
            "blend.quota": dict(result.quotas),
        }
