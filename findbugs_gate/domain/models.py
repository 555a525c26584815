from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Literal

from findbugs_gate.core.errors import AnalysisFailed

ReportFormat = Literal["xml", "html", "text", "emacs"]
OutcomeStatus = Literal["pass", "warn", "fail", "skipped"]


@dataclass(frozen=True)
class ReportDescriptor:
    format: ReportFormat
    enabled: bool
    destination: Path
    # xml only
    with_messages: bool = False
    # html only
    stylesheet: Path | None = None


class Reports:
    """Ordered report descriptors. The declared order decides which report is "first"."""

    def __init__(self, descriptors: Iterable[ReportDescriptor] = ()):
        self._descriptors = tuple(descriptors)

    def __iter__(self) -> Iterator[ReportDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Reports):
            return NotImplemented
        return self._descriptors == other._descriptors

    def __hash__(self) -> int:
        return hash(self._descriptors)

    def __repr__(self) -> str:
        return f"Reports({list(self._descriptors)!r})"

    def enabled(self) -> list[ReportDescriptor]:
        return [d for d in self._descriptors if d.enabled]

    def first_enabled(self) -> ReportDescriptor | None:
        for d in self._descriptors:
            if d.enabled:
                return d
        return None


@dataclass(frozen=True)
class InvocationSpec:
    """Complete operating parameters for one worker run. Built once, never mutated."""

    classes: tuple[Path, ...]
    sources: tuple[Path, ...] = ()
    classpath: tuple[Path, ...] = ()
    plugin_classpath: tuple[Path, ...] = ()
    effort: str | None = None
    report_level: str | None = None
    max_heap_size: str | None = None
    visitors: tuple[str, ...] = ()
    omit_visitors: tuple[str, ...] = ()
    include_filter: str | None = None
    exclude_filter: str | None = None
    exclude_bugs_filter: str | None = None
    extra_args: tuple[str, ...] = ()
    jvm_args: tuple[str, ...] = ()
    debug: bool = False
    show_progress: bool = False
    reports: Reports = field(default_factory=Reports)


@dataclass(frozen=True)
class AnalysisResult:
    exception: BaseException | None = None
    error_count: int = 0
    bug_count: int = 0
    missing_class_count: int = 0


@dataclass(frozen=True)
class Outcome:
    status: OutcomeStatus
    message: str | None = None
    cause: BaseException | None = None

    @property
    def failed(self) -> bool:
        return self.status == "fail"

    def raise_for_failure(self) -> None:
        if not self.failed:
            return
        if self.cause is not None:
            raise AnalysisFailed(self.message) from self.cause
        raise AnalysisFailed(self.message)
