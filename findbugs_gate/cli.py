#!/usr/bin/env python3
"""Command-line entry point: run the FindBugs gate for one build unit.

Exit codes: 0 passed (or warned, or skipped), 1 analysis failed,
2 configuration or classpath problem.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from findbugs_gate.core.errors import AnalysisFailed, FindBugsGateError
from findbugs_gate.core.logging import setup_logging
from findbugs_gate.domain.schemas import TaskConfig, read_filter
from findbugs_gate.services.findbugs_task import FindBugsTask

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="findbugs-gate")
    ap.add_argument("--config", required=True, help="JSON task configuration")
    ap.add_argument("--working-dir", default=".", help="directory the worker runs in")
    ap.add_argument("--ignore-failures", action="store_true", help="report rule violations as warnings")
    ap.add_argument("--include-filter", type=Path)
    ap.add_argument("--exclude-filter", type=Path)
    ap.add_argument("--exclude-bugs-filter", type=Path)
    ap.add_argument("--debug", action="store_true", help="log worker output")
    return ap


def load_config(args: argparse.Namespace) -> TaskConfig:
    config = TaskConfig.from_json_file(Path(args.config))
    updates = {}
    if args.ignore_failures:
        updates["ignore_failures"] = True
    for key in ("include_filter", "exclude_filter", "exclude_bugs_filter"):
        path = getattr(args, key)
        if path is not None:
            updates[key] = read_filter(path)
    return config.model_copy(update=updates) if updates else config


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.debug else None)

    try:
        config = load_config(args)
    except (OSError, ValidationError) as e:
        logger.error("Invalid task configuration: %s", e)
        return 2

    try:
        outcome = FindBugsTask(config).run(Path(args.working_dir))
    except AnalysisFailed as e:
        logger.error("%s", e)
        return 1
    except (FindBugsGateError, ValueError) as e:
        logger.error("%s", e)
        return 2

    print(f"[findbugs] {outcome.status.upper()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
