"""Translate an InvocationSpec into the FindBugs text UI command line."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from findbugs_gate.core.errors import InvalidInvocation
from findbugs_gate.core.util import as_path
from findbugs_gate.domain.models import InvocationSpec, ReportDescriptor

VALID_EFFORTS = ("min", "default", "max")
VALID_REPORT_LEVELS = ("experimental", "low", "medium", "high")

INCLUDE_FILTER_NAME = "includeFilter.xml"
EXCLUDE_FILTER_NAME = "excludeFilter.xml"
EXCLUDE_BUGS_FILTER_NAME = "excludeBugsFilter.xml"


@dataclass(frozen=True)
class FilterFiles:
    include: Path | None = None
    exclude: Path | None = None
    exclude_bugs: Path | None = None


def write_filters(spec: InvocationSpec, scratch_dir: Path) -> FilterFiles:
    """Materialise the filter texts as files the tool can read."""

    def _write(text: str | None, name: str) -> Path | None:
        if text is None:
            return None
        p = scratch_dir / name
        p.write_text(text, encoding="utf-8")
        return p

    return FilterFiles(
        include=_write(spec.include_filter, INCLUDE_FILTER_NAME),
        exclude=_write(spec.exclude_filter, EXCLUDE_FILTER_NAME),
        exclude_bugs=_write(spec.exclude_bugs_filter, EXCLUDE_BUGS_FILTER_NAME),
    )


def _absolute(paths) -> list[Path]:
    # the worker runs in its own working directory
    return [Path(p).resolve() for p in paths]


def _report_option(report: ReportDescriptor) -> str:
    option = f"-{report.format}"
    if report.format == "xml" and report.with_messages:
        option += ":withMessages"
    elif report.format == "html" and report.stylesheet is not None:
        option += f":{Path(report.stylesheet).resolve()}"
    return option


def tool_args(spec: InvocationSpec, filters: FilterFiles = FilterFiles()) -> list[str]:
    if spec.effort is not None and spec.effort not in VALID_EFFORTS:
        raise InvalidInvocation(
            f"FindBugs encountered an invalid effort value '{spec.effort}'. Valid values are: {', '.join(VALID_EFFORTS)}"
        )
    if spec.report_level is not None and spec.report_level not in VALID_REPORT_LEVELS:
        raise InvalidInvocation(
            f"FindBugs encountered an invalid report level '{spec.report_level}'. "
            f"Valid values are: {', '.join(VALID_REPORT_LEVELS)}"
        )

    args = ["-pluginList", as_path(_absolute(spec.plugin_classpath)), "-sortByClass", "-timestampNow", "-exitcode"]

    if spec.show_progress:
        args.append("-progress")

    enabled = spec.reports.enabled()
    if len(enabled) > 1:
        raise InvalidInvocation(
            "FindBugs tasks can only have one report enabled, however more than one report was enabled. "
            "You need to disable all but one of them."
        )
    if enabled:
        report = enabled[0]
        args += [_report_option(report), "-outputFile", str(Path(report.destination).resolve())]

    if spec.sources:
        args += ["-sourcepath", as_path(_absolute(spec.sources))]

    # the tool aborts on missing aux classpath entries
    aux = [p for p in _absolute(spec.classpath) if p.exists()]
    if aux:
        args += ["-auxclasspath", as_path(aux)]

    if spec.effort:
        args.append(f"-effort:{spec.effort}")
    if spec.report_level:
        args.append(f"-{spec.report_level}")

    if spec.visitors:
        args += ["-visitors", ",".join(spec.visitors)]
    if spec.omit_visitors:
        args += ["-omitVisitors", ",".join(spec.omit_visitors)]

    if filters.exclude:
        args += ["-exclude", str(filters.exclude)]
    if filters.include:
        args += ["-include", str(filters.include)]
    if filters.exclude_bugs:
        args += ["-excludeBugs", str(filters.exclude_bugs)]

    args += list(spec.extra_args)
    args += [str(c) for c in _absolute(spec.classes)]
    return args


def jvm_args(spec: InvocationSpec) -> list[str]:
    args = []
    if spec.max_heap_size:
        args.append(f"-Xmx{spec.max_heap_size}")
    if spec.debug:
        args.append("-Dfindbugs.debug=true")
    args += list(spec.jvm_args)
    return args


def worker_command(
    java_executable: str,
    main_class: str,
    classpath: list[Path],
    spec: InvocationSpec,
    filters: FilterFiles = FilterFiles(),
) -> list[str]:
    return [java_executable, *jvm_args(spec), "-cp", as_path(_absolute(classpath)), main_class, *tool_args(spec, filters)]
