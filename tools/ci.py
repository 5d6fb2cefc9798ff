#!/usr/bin/env python3
# Copyright 2026 GraphCompose Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the CI checks locally: formatting, lint, tests with coverage, and the package build.

Pass step names to run a subset, e.g. ``tools/ci.py lint tests``.
"""

import pathlib
import subprocess
import sys
import time
from dataclasses import dataclass

from yachalk import chalk

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class Step:
    key: str
    title: str
    command: list[str]


STEPS: list[Step] = [
    Step("format", "Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
    Step("lint", "Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
    Step("tests", "Tests", ["uv", "run", "pytest", "--cov=graphcompose", "--cov-report=term-missing"]),
    Step("build", "Build", ["uv", "build"]),
]


def main(argv: list[str]) -> int:
    """Run the selected CI steps (all by default) and print a summary."""
    unknown = [key for key in argv if key not in {step.key for step in STEPS}]
    if unknown:
        print(chalk.red(f"Unknown step(s): {', '.join(unknown)}"), file=sys.stderr)
        return 2
    selected = [step for step in STEPS if not argv or step.key in argv]

    results: list[tuple[Step, int, float]] = []
    for step in selected:
        _banner(step.title)
        start = time.monotonic()
        proc = subprocess.run(step.command, cwd=_repo_root())
        results.append((step, proc.returncode, time.monotonic() - start))

    _banner("Summary")
    for step, returncode, elapsed in results:
        if returncode == 0:
            print(chalk.green(f"  PASS  {step.title} ({elapsed:.1f}s)"))
        else:
            print(chalk.red(f"  FAIL  {step.title} ({elapsed:.1f}s, exit {returncode})"))
    print()
    return 0 if all(returncode == 0 for _, returncode, _ in results) else 1


# ################
# Implementation
# ################


def _banner(title: str) -> None:
    rule = chalk.blue("=" * 60)
    print(f"\n{rule}\n{chalk.blue(title)}\n{rule}")


def _repo_root() -> pathlib.Path:
    return pathlib.Path(__file__).resolve().parent.parent


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
