from __future__ import annotations

import logging
from pathlib import Path

from findbugs_gate.domain.models import AnalysisResult, Outcome, Reports

logger = logging.getLogger(__name__)

TOOL_ERROR_MESSAGE = "FindBugs encountered an error. Run with --debug to get more information."
VIOLATIONS_MESSAGE = "FindBugs rule violations were found."


def clickable_file_url(destination: Path) -> str:
    return Path(destination).resolve().as_uri()


class ResultEvaluator:
    """Applies the failure policy to one AnalysisResult.

    Spawn failures and tool errors always fail. Only findings honour
    ``ignore_failures``, which downgrades them to a warning.
    """

    def evaluate(self, result: AnalysisResult, ignore_failures: bool, reports: Reports) -> Outcome:
        if result.exception is not None:
            return Outcome("fail", TOOL_ERROR_MESSAGE, cause=result.exception)

        if result.error_count > 0:
            return Outcome("fail", TOOL_ERROR_MESSAGE)

        if result.bug_count > 0:
            message = VIOLATIONS_MESSAGE
            report = reports.first_enabled()
            if report is not None:
                message += f" See the report at: {clickable_file_url(report.destination)}"

            if ignore_failures:
                logger.warning("%s", message)
                return Outcome("warn", message)
            return Outcome("fail", message)

        return Outcome("pass")
