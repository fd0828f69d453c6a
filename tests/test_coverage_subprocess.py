import os
import subprocess
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parent.parent
SCRIPT = (REPO_ROOT / "scripts" / "setup-tool.py").resolve()


def _run_bad_config(tmp_path: Path, env: dict[str, str]) -> subprocess.CompletedProcess:
    config = tmp_path / "tool.yml"
    config.write_text("tool:\n  name: firebase-tools\n  bin_layout: unknown\n", encoding="utf-8")
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO_ROOT), env.get("PYTHONPATH", "")]))
    return subprocess.run(
        [sys.executable, str(SCRIPT), "--version", "9.1.0", "--tool-config", str(config)],
        capture_output=True,
        text=True,
        env=env,
    )


def test_script_runs_as_subprocess(tmp_path: Path) -> None:
    result = _run_bad_config(tmp_path, os.environ.copy())
    assert result.returncode == 2
    assert "unknown bin layout" in result.stderr


def test_subprocess_script_contributes_coverage(tmp_path: Path) -> None:
    """Smoke test: coverage must capture Python subprocesses started from scripts/."""
    config_file = os.environ.get("COVERAGE_PROCESS_START")
    if not config_file:
        pytest.skip("requires COVERAGE_PROCESS_START (run tests with coverage enabled)")
    coverage = pytest.importorskip("coverage")

    env = os.environ.copy()
    cov_base = tmp_path / ".coverage"
    env["COVERAGE_FILE"] = str(cov_base)

    result = _run_bad_config(tmp_path, env)
    assert result.returncode == 2, result.stderr

    cov = coverage.Coverage(data_file=str(cov_base), config_file=config_file)
    cov.combine(data_paths=[str(tmp_path)], strict=True, keep=True)
    data = cov.get_data()

    measured = {str(Path(p).resolve()) for p in data.measured_files()}
    assert str(SCRIPT) in measured
