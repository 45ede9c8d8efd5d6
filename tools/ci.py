#!/usr/bin/env python3
# Copyright 2026 ProtoDiagram Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the local CI checks: format, lint, type check, tests, and build."""

import argparse
import subprocess
import sys
import time
from pathlib import Path

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: dict[str, list[str]] = {
    "format": ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"],
    "lint": ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"],
    "types": ["uv", "run", "ty", "check", "src/"],
    "tests": ["uv", "run", "pytest", "--cov=protodiagram", "--cov-report=term-missing"],
    "build": ["uv", "build"],
}


def main() -> int:
    """Run the selected CI steps and print a summary."""
    parser = argparse.ArgumentParser(description="Run the protodiagram CI checks locally.")
    parser.add_argument(
        "--only",
        nargs="+",
        choices=list(STEPS),
        default=None,
        help="Run only the named steps",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop after the first failing step",
    )
    args = parser.parse_args()

    selected = args.only or list(STEPS)
    results: list[tuple[str, bool, float]] = []
    for name in selected:
        _banner(name)
        start = time.monotonic()
        proc = subprocess.run(STEPS[name], cwd=_REPO_ROOT)
        passed = proc.returncode == 0
        results.append((name, passed, time.monotonic() - start))
        if not passed and args.fail_fast:
            break

    _banner("summary")
    for name, passed, elapsed in results:
        status = "PASS" if passed else "FAIL"
        color = chalk.green if passed else chalk.red
        print(color(f"  {status}  {name} ({elapsed:.1f}s)"))
    print()

    return 0 if all(passed for _, passed, _ in results) and len(results) == len(selected) else 1


# ################
# Implementation
# ################

_REPO_ROOT = Path(__file__).resolve().parent.parent


def _banner(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}")
    print(chalk.blue(f"  {title}"))
    print(sep)


if __name__ == "__main__":
    sys.exit(main())
