from __future__ import annotations

import re
from dataclasses import dataclass

# bits of the tool's -exitcode status
BUGS_FOUND_FLAG = 1
MISSING_CLASS_FLAG = 2
ERROR_FLAG = 4

_SUMMARY = {
    "bug_count": re.compile(r"^Warnings generated:\s*(\d+)"),
    "missing_class_count": re.compile(r"^Missing classes:\s*(\d+)"),
    "error_count": re.compile(r"^Analysis errors:\s*(\d+)"),
}


@dataclass
class ToolCounts:
    bug_count: int = 0
    error_count: int = 0
    missing_class_count: int = 0


class SummaryParser:
    """Collects the counts FindBugs prints at the end of a run."""

    def __init__(self):
        self._seen: dict[str, int] = {}

    def feed(self, line: str) -> None:
        line = line.strip()
        for key, pattern in _SUMMARY.items():
            m = pattern.match(line)
            if m:
                self._seen[key] = int(m.group(1))
                return

    def counts(self, exit_code: int) -> ToolCounts:
        """Combine printed counts with the exit flags.

        FindBugs always prints the summary line for a flag it sets. A flag
        without its summary line (a JVM crash exits with 1 too) or an exit
        status outside the flag range means the run did not complete, which
        is reported as a tool error.
        """
        counts = ToolCounts(
            bug_count=self._seen.get("bug_count", 0),
            error_count=self._seen.get("error_count", 0),
            missing_class_count=self._seen.get("missing_class_count", 0),
        )
        if exit_code < 0 or exit_code > (BUGS_FOUND_FLAG | MISSING_CLASS_FLAG | ERROR_FLAG):
            counts.error_count = max(counts.error_count, 1)
            return counts

        for key, flag in (
            ("bug_count", BUGS_FOUND_FLAG),
            ("missing_class_count", MISSING_CLASS_FLAG),
            ("error_count", ERROR_FLAG),
        ):
            if exit_code & flag and key not in self._seen:
                counts.error_count = max(counts.error_count, 1)
        return counts
