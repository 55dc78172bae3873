"""Run lint, format, type and test checks; print one JSON report.

Usage:
    python scripts/quality_gate.py              # everything
    python scripts/quality_gate.py --skip-tests # static checks only
    python scripts/quality_gate.py --fix        # let ruff fix what it can first
"""

from __future__ import annotations

import argparse
import json
import re
import subprocess
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent

TYPED_PACKAGES = ["conversation_cli/"]


def _run(cmd: list[str]) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", *cmd],
        capture_output=True,
        text=True,
        cwd=str(ROOT),
        timeout=300,
    )


def _count(pattern: str, text: str) -> int:
    return sum(1 for line in text.splitlines() if re.search(pattern, line))


def _check(cmd: list[str], issue_key: str, issue_pattern: str, use_stderr: bool = False) -> dict:
    """Run one tool and summarize it as a status dict."""
    t0 = time.monotonic()
    r = _run(cmd)
    text = r.stderr + r.stdout if use_stderr else r.stdout
    result: dict = {
        "status": "pass" if r.returncode == 0 else "fail",
        issue_key: _count(issue_pattern, text) if r.returncode else 0,
        "duration_s": round(time.monotonic() - t0, 1),
    }
    if r.returncode:
        result["output"] = text.strip()[-2000:]
    return result


def check_pytest() -> dict:
    t0 = time.monotonic()
    r = _run(["pytest", "tests/", "-q", "--no-header", "--tb=short"])
    counts = {"passed": 0, "failed": 0}
    # Summary line looks like "3 failed, 120 passed in 1.2s"
    for line in reversed(r.stdout.strip().splitlines()):
        found = {key: re.search(rf"(\d+)\s+{key}", line) for key in counts}
        if any(found.values()):
            for key, match in found.items():
                if match:
                    counts[key] = int(match.group(1))
            break
    result: dict = {
        "status": "pass" if r.returncode == 0 else "fail",
        **counts,
        "duration_s": round(time.monotonic() - t0, 1),
    }
    if r.returncode:
        result["output"] = r.stdout.strip()[-2000:]
    return result


def main() -> None:
    parser = argparse.ArgumentParser(description="Run all quality checks")
    parser.add_argument("--skip-tests", action="store_true", help="Skip pytest")
    parser.add_argument("--fix", action="store_true", help="Apply ruff fixes before checking")
    args = parser.parse_args()

    t0 = time.monotonic()
    if args.fix:
        _run(["ruff", "check", "--fix", "."])

    checks: dict[str, dict] = {}
    print("ruff check...", file=sys.stderr)
    checks["ruff_lint"] = _check(["ruff", "check", "."], "errors", r"^\S+:\d+:\d+:")
    print("ruff format...", file=sys.stderr)
    checks["ruff_format"] = _check(
        ["ruff", "format", "--check", "."], "files_to_reformat", r"^Would reformat", True
    )
    print("mypy...", file=sys.stderr)
    checks["mypy"] = _check(["mypy", *TYPED_PACKAGES], "errors", r": error:")
    if args.skip_tests:
        checks["pytest"] = {"status": "skip", "reason": "--skip-tests"}
    else:
        print("pytest...", file=sys.stderr)
        checks["pytest"] = check_pytest()

    overall = "pass" if all(c["status"] in ("pass", "skip") for c in checks.values()) else "fail"
    print(
        json.dumps(
            {
                "overall": overall,
                "checks": checks,
                "total_duration_s": round(time.monotonic() - t0, 1),
            },
            indent=2,
        )
    )


if __name__ == "__main__":
    main()
