"""Policy loading and validation for named-source blends."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Mapping, Sequence

import yaml

__all__ = [
    "BlendPolicy",
    "PolicyLoadingError",
    "load_policy",
    "policy_from_mapping",
]


class PolicyLoadingError(ValueError):
    """Raised when a blend policy fails validation."""


@dataclass(frozen=True)
class BlendPolicy:
    """Source mix and output length for a blend."""

    policy_semver: str
    policy_version: str
    result_size: int
    mix: Mapping[str, int]
    trace: bool = False
    path: Path | None = None

    @property
    def source_names(self) -> Sequence[str]:
        return tuple(self.mix)

    @property
    def percentages(self) -> Sequence[int]:
        return tuple(self.mix.values())

    @property
    def digest(self) -> str | None:
        """SHA-256 of the policy file this policy was loaded from."""

        if self.path is None:
            return None
        return _sha256_file(self.path)

    def with_result_size(self, result_size: int) -> "BlendPolicy":
        if isinstance(result_size, bool) or not isinstance(result_size, int) or result_size < 0:
            raise PolicyLoadingError(f"result_size must be a non-negative integer, got {result_size!r}")
        return replace(self, result_size=result_size)


def load_policy(path: Path | str) -> BlendPolicy:
    """Load and validate a blend policy YAML file."""

    policy_path = Path(path).expanduser().resolve()
    try:
        payload = yaml.safe_load(policy_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise PolicyLoadingError(f"policy file not found: {policy_path}") from exc
    except yaml.YAMLError as exc:
        raise PolicyLoadingError(f"failed to parse policy YAML: {exc}") from exc

    return policy_from_mapping(payload, path=policy_path)


def policy_from_mapping(payload: object, *, path: Path | None = None) -> BlendPolicy:
    """Validate an already-decoded policy payload."""

    if payload is None:
        raise PolicyLoadingError("policy must not be empty")
    mapping = _expect_mapping(payload, "policy")
    allowed_keys = {
        "policy_semver",
        "policy_version",
        "notes",
        "result_size",
        "trace",
        "sources",
    }
    unknown = set(mapping) - allowed_keys
    if unknown:
        raise PolicyLoadingError(f"unknown top-level keys: {sorted(unknown)}")

    policy_semver = _expect_string(mapping.get("policy_semver"), "policy_semver")
    policy_version = _expect_string(
        str(mapping["policy_version"]) if "policy_version" in mapping else None,
        "policy_version",
    )
    result_size = _expect_non_negative_int(mapping.get("result_size"), "result_size")
    trace = _expect_bool(mapping.get("trace", False), "trace")

    sources = _expect_mapping(mapping.get("sources"), "sources")
    if not sources:
        raise PolicyLoadingError("sources must declare at least one source")
    mix: Dict[str, int] = {}
    for name, percentage in sources.items():
        label = _expect_string(name, "sources key")
        mix[label] = _expect_non_negative_int(percentage, f"sources[{label}]")

    return BlendPolicy(
        policy_semver=policy_semver,
        policy_version=policy_version,
        result_size=result_size,
        mix=mix,
        trace=trace,
        path=path,
    )


# ---------------------------------------------------------------------------#
# Helper utilities


def _expect_mapping(obj: object, label: str) -> Dict[str, object]:
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise PolicyLoadingError(f"{label} must be a mapping")
    return dict(obj)


def _expect_string(obj: object, label: str) -> str:
    if not isinstance(obj, str) or not obj:
        raise PolicyLoadingError(f"{label} must be a non-empty string")
    return obj


def _expect_non_negative_int(obj: object, label: str) -> int:
    if isinstance(obj, bool) or not isinstance(obj, int):
        raise PolicyLoadingError(f"{label} must be an integer")
    if obj < 0:
        raise PolicyLoadingError(f"{label} must be ≥ 0, got {obj!r}")
    return int(obj)


def _expect_bool(obj: object, label: str) -> bool:
    if not isinstance(obj, bool):
        raise PolicyLoadingError(f"{label} must be a boolean")
    return bool(obj)


def _sha256_file(path: Path) -> str:
    data = path.read_bytes()
    return hashlib.sha256(data).hexdigest()
