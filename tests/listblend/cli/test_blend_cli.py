from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

from listblend.cli.blend import main as run_blend_cli


def _write_inputs(tmp_path: Path) -> tuple[Path, Path]:
    policy_path = tmp_path / "blend_policy.yaml"
    policy_path.write_text(
        (
            "policy_semver: '1.0.0'\n"
            "policy_version: '2026-10-01'\n"
            "result_size: 4\n"
            "sources:\n"
            "  a: 50\n"
            "  b: 50\n"
        ),
        encoding="utf-8",
    )
    sources_path = tmp_path / "sources.csv"
    sources_path.write_text(
        "source,item\n"
        "a,a0\n"
        "a,a1\n"
        "a,a2\n"
        "b,b0\n"
        "b,b1\n"
        "b,b2\n",
        encoding="utf-8",
    )
    return policy_path, sources_path


def test_blend_cli_writes_summary(tmp_path: Path, capsys) -> None:
    policy_path, sources_path = _write_inputs(tmp_path)
    result_json = tmp_path / "out" / "blend.json"

    code = run_blend_cli(
        [
            "--policy",
            str(policy_path),
            "--sources",
            str(sources_path),
            "--result-json",
            str(result_json),
        ]
    )

    assert code == 0
    summary = json.loads(result_json.read_text(encoding="utf-8"))
    assert summary["quotas"] == {"a": 2, "b": 2}
    assert summary["items"] == [
        {"source": "a", "item": "a0"},
        {"source": "b", "item": "b0"},
        {"source": "a", "item": "a1"},
        {"source": "b", "item": "b1"},
    ]
    assert summary["metrics"]["blend.output_size"] == 4
    printed = json.loads(capsys.readouterr().out)
    assert printed == summary


def test_blend_cli_result_size_override(tmp_path: Path, capsys) -> None:
    policy_path, sources_path = _write_inputs(tmp_path)

    code = run_blend_cli(
        ["--policy", str(policy_path), "--sources", str(sources_path), "--result-size", "5"]
    )

    assert code == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["result_size"] == 5
    assert sum(summary["quotas"].values()) == 5


def test_blend_cli_reports_failures(tmp_path: Path, capsys) -> None:
    policy_path, _ = _write_inputs(tmp_path)

    code = run_blend_cli(
        ["--policy", str(policy_path), "--sources", str(tmp_path / "missing.json")]
    )

    assert code == 1
    assert "[listblend] failed: E_DATASET_NOT_FOUND" in capsys.readouterr().err


def test_blend_cli_traces_when_policy_asks(tmp_path: Path, capsys, caplog) -> None:
    policy_path, sources_path = _write_inputs(tmp_path)
    policy_path.write_text(
        policy_path.read_text(encoding="utf-8") + "trace: true\n",
        encoding="utf-8",
    )

    code = run_blend_cli(["--policy", str(policy_path), "--sources", str(sources_path)])

    assert code == 0
    assert "TARGETS:" in caplog.text
    assert json.loads(capsys.readouterr().out)["quotas"] == {"a": 2, "b": 2}


def test_blend_cli_runs_as_module_without_runpy_warning() -> None:
    src_root = Path(__file__).resolve().parents[3] / "src"
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(src_root), env.get("PYTHONPATH")]))

    completed = subprocess.run(
        [sys.executable, "-W", "error::RuntimeWarning", "-m", "listblend.cli.blend", "--help"],
        capture_output=True,
        text=True,
        env=env,
        check=False,
    )

    assert completed.returncode == 0, completed.stderr
    assert "--policy" in completed.stdout
    assert "RuntimeWarning" not in completed.stderr
