#!/usr/bin/env python3
# =============================================================================
# SPINCHECK v1.0.0 -- CI CHECKS RUNNER
# File:   scripts/run_ci_checks.py
# =============================================================================
#
# PURPOSE
# -------
# Runs the CI gate in two sequential stages:
#   Stage 1: pytest (all tests + coverage report)
#   Stage 2: end-to-end harness runs over the sample logs in tests/data/.
#            Each case runs `python -m spincheck.verification.run_check` as
#            a subprocess and must exit with its expected code. Failing
#            cases are included so a harness that always exits 0 is caught.
#
# Exit codes:
#   0 -- All stages passed.
#   1 -- Stage 1 (pytest) failed.
#   2 -- Stage 2 (harness) failed.
#
# Usage:
#   python scripts/run_ci_checks.py
# =============================================================================

from __future__ import annotations

import pathlib
import subprocess
import sys
from typing import List, Tuple

_REPO_ROOT = pathlib.Path(__file__).parent.parent
_DATA_DIR  = _REPO_ROOT / "tests" / "data"
_PYTHON    = sys.executable

# (log file, harness arguments, expected exit code)
HARNESS_CASES: Tuple[Tuple[str, Tuple[str, ...], int], ...] = (
    ("c2_nop_3_hex.log",           ("--inst", "nop", "--value", "3"),       0),
    ("c2_nop_3_hex.log",           ("--inst", "nop", "--value", "2"),       1),
    ("c2_nop_3_hex.log",           ("--inst", "counter", "--value", "14"),  1),
    ("c2_counter_14_mnemonic.log", ("--inst", "counter", "--value", "14"),  0),
    ("c2_counter_14_mnemonic.log", ("--inst", "counter", "--value", "7"),   1),
    ("c2_counter_14_mnemonic.log", ("--inst", "yield", "--holder", "x.Y"),  2),
)


def _banner(title: str) -> None:
    print("=" * 72)
    print(title)
    print("=" * 72)
    sys.stdout.flush()


def _stage_pytest() -> int:
    # pyproject.toml supplies --cov=spincheck --cov-report=term-missing.
    cmd = [_PYTHON, "-m", "pytest"]
    _banner("CI STAGE: pytest  CMD: " + " ".join(cmd))
    return subprocess.run(cmd, cwd=str(_REPO_ROOT)).returncode


def _stage_harness() -> List[str]:
    """Run every HARNESS_CASES entry; return one line per mismatching case."""
    _banner("CI STAGE: harness ({} cases)".format(len(HARNESS_CASES)))
    failures: List[str] = []
    for log_name, args, expected in HARNESS_CASES:
        cmd = [
            _PYTHON, "-m", "spincheck.verification.run_check",
            "--log-path", str(_DATA_DIR / log_name),
        ] + list(args)
        proc = subprocess.run(cmd, cwd=str(_REPO_ROOT), capture_output=True, text=True)
        label = "{} {}".format(log_name, " ".join(args))
        verdict = "ok" if proc.returncode == expected else "MISMATCH"
        print("  {:<8} exit={} expected={}  {}".format(verdict, proc.returncode, expected, label))
        if proc.returncode != expected:
            failures.append(label)
            print(proc.stdout + proc.stderr)
    sys.stdout.flush()
    return failures


def main() -> int:
    pytest_rc = _stage_pytest()
    if pytest_rc != 0:
        _banner("CI RESULT: FAIL  [stage=pytest  exit_code={}]".format(pytest_rc))
        return 1

    failures = _stage_harness()
    if failures:
        _banner("CI RESULT: FAIL  [stage=harness  cases={}]".format(len(failures)))
        return 2

    _banner("CI RESULT: PASS  [stages=pytest,harness]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
