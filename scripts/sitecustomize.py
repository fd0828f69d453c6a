"""Start coverage in `python scripts/setup-tool.py` subprocesses.

Python imports sitecustomize at startup, and scripts/ is sys.path[0] when a
script here runs, so test subprocesses pick this up without PYTHONPATH
changes. It does nothing unless COVERAGE_PROCESS_START points at a coverage
config.
"""

import os


def _start_subprocess_coverage() -> None:
    if not os.environ.get("COVERAGE_PROCESS_START"):
        return
    try:
        import coverage
    except ImportError:
        return
    coverage.process_startup()


_start_subprocess_coverage()
