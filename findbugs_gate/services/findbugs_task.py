from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from findbugs_gate.core.config import settings
from findbugs_gate.core.util import resolve_files
from findbugs_gate.domain.models import InvocationSpec, Outcome, Reports
from findbugs_gate.domain.schemas import TaskConfig
from findbugs_gate.findbugs.classpath_validator import (
    ClasspathValidator,
    detect_java_version,
    parse_java_version,
)
from findbugs_gate.findbugs.result_evaluator import ResultEvaluator
from findbugs_gate.findbugs.spec_builder import InvocationSpecBuilder
from findbugs_gate.findbugs.worker_manager import ProcessFactory, WorkerManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceProvider:
    classes: tuple[Path, ...]
    source: tuple[Path, ...]

    def candidate_class_files(self) -> list[Path]:
        # a set of empty class directories counts as empty
        return resolve_files(self.classes)


@dataclass(frozen=True)
class FailurePolicy:
    ignore_failures: bool = False


class FindBugsTask:
    """
    Orchestrates: validate tool classpath → build invocation spec → run worker → evaluate.
    """

    def __init__(
        self,
        config: TaskConfig,
        worker_manager: WorkerManager | None = None,
        process_factory: ProcessFactory = subprocess.Popen,
        evaluator: ResultEvaluator | None = None,
        java_version: int | None = None,
    ):
        self.config = config
        self.sources = SourceProvider(tuple(config.classes), tuple(config.source))
        self.policy = FailurePolicy(config.ignore_failures)
        self.reports: Reports = config.report_container()
        self.worker_manager = worker_manager or WorkerManager()
        self.process_factory = process_factory
        self.evaluator = evaluator or ResultEvaluator()
        self._java_version = java_version

    def java_version(self) -> int:
        if self._java_version is None:
            if settings.JAVA_VERSION:
                self._java_version = parse_java_version(settings.JAVA_VERSION)
            else:
                self._java_version = detect_java_version(settings.JAVA_EXECUTABLE)
        return self._java_version

    def generate_spec(self) -> InvocationSpec:
        c = self.config
        return (
            InvocationSpecBuilder(self.sources.classes)
            .with_plugins_list(c.plugin_classpath)
            .with_sources(self.sources.source)
            .with_classpath(c.classpath)
            .with_debugging(logging.getLogger("findbugs_gate").isEnabledFor(logging.DEBUG))
            .with_effort(c.effort)
            .with_report_level(c.report_level)
            .with_max_heap_size(c.max_heap_size)
            .with_visitors(c.visitors)
            .with_omit_visitors(c.omit_visitors)
            .with_exclude_filter(c.exclude_filter)
            .with_include_filter(c.include_filter)
            .with_exclude_bugs_filter(c.exclude_bugs_filter)
            .with_extra_args(c.extra_args)
            .with_jvm_args(c.jvm_args)
            .with_show_progress(c.show_progress)
            .configure_reports(self.reports)
            .build()
        )

    def run(self, working_dir: Path) -> Outcome:
        unit = {"build_unit": self.config.build_unit}

        if not self.sources.candidate_class_files():
            logger.info("No class files to analyze, skipping FindBugs", extra=unit)
            return Outcome("skipped")

        ClasspathValidator(self.java_version()).validate(p.name for p in self.config.findbugs_classpath)

        spec = self.generate_spec()
        result = self.worker_manager.run(working_dir, self.process_factory, self.config.findbugs_classpath, spec)

        outcome = self.evaluator.evaluate(result, self.policy.ignore_failures, self.reports)
        if outcome.failed:
            logger.error("%s", outcome.message, extra=unit)
        else:
            logger.info("FindBugs outcome: %s", outcome.status, extra=unit)
        outcome.raise_for_failure()
        return outcome
