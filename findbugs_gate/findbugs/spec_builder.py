from __future__ import annotations

from pathlib import Path
from typing import Iterable

from findbugs_gate.domain.models import InvocationSpec, Reports


class InvocationSpecBuilder:
    """Collects task inputs in any order and produces one immutable InvocationSpec.

    Nothing is validated here; the worker decides what the tool accepts.
    """

    def __init__(self, classes: Iterable[Path]):
        self._classes = tuple(Path(c) for c in classes)
        self._sources: tuple[Path, ...] = ()
        self._classpath: tuple[Path, ...] = ()
        self._plugin_classpath: tuple[Path, ...] = ()
        self._effort: str | None = None
        self._report_level: str | None = None
        self._max_heap_size: str | None = None
        self._visitors: tuple[str, ...] = ()
        self._omit_visitors: tuple[str, ...] = ()
        self._include_filter: str | None = None
        self._exclude_filter: str | None = None
        self._exclude_bugs_filter: str | None = None
        self._extra_args: tuple[str, ...] = ()
        self._jvm_args: tuple[str, ...] = ()
        self._debug = False
        self._show_progress = False
        self._reports = Reports()

    def with_sources(self, sources: Iterable[Path]) -> InvocationSpecBuilder:
        self._sources = tuple(Path(s) for s in sources)
        return self

    def with_classpath(self, classpath: Iterable[Path]) -> InvocationSpecBuilder:
        self._classpath = tuple(Path(p) for p in classpath)
        return self

    def with_plugins_list(self, plugin_classpath: Iterable[Path]) -> InvocationSpecBuilder:
        self._plugin_classpath = tuple(Path(p) for p in plugin_classpath)
        return self

    def with_effort(self, effort: str | None) -> InvocationSpecBuilder:
        self._effort = effort
        return self

    def with_report_level(self, report_level: str | None) -> InvocationSpecBuilder:
        self._report_level = report_level
        return self

    def with_max_heap_size(self, max_heap_size: str | None) -> InvocationSpecBuilder:
        self._max_heap_size = max_heap_size
        return self

    def with_visitors(self, visitors: Iterable[str]) -> InvocationSpecBuilder:
        self._visitors = tuple(visitors)
        return self

    def with_omit_visitors(self, omit_visitors: Iterable[str]) -> InvocationSpecBuilder:
        self._omit_visitors = tuple(omit_visitors)
        return self

    def with_include_filter(self, text: str | None) -> InvocationSpecBuilder:
        self._include_filter = text
        return self

    def with_exclude_filter(self, text: str | None) -> InvocationSpecBuilder:
        self._exclude_filter = text
        return self

    def with_exclude_bugs_filter(self, text: str | None) -> InvocationSpecBuilder:
        self._exclude_bugs_filter = text
        return self

    def with_extra_args(self, args: Iterable[str]) -> InvocationSpecBuilder:
        self._extra_args = tuple(args)
        return self

    def with_jvm_args(self, args: Iterable[str]) -> InvocationSpecBuilder:
        self._jvm_args = tuple(args)
        return self

    def with_debugging(self, debug: bool) -> InvocationSpecBuilder:
        self._debug = debug
        return self

    def with_show_progress(self, show_progress: bool) -> InvocationSpecBuilder:
        self._show_progress = show_progress
        return self

    def configure_reports(self, reports: Reports) -> InvocationSpecBuilder:
        self._reports = reports
        return self

    def build(self) -> InvocationSpec:
        return InvocationSpec(
            classes=self._classes,
            sources=self._sources,
            classpath=self._classpath,
            plugin_classpath=self._plugin_classpath,
            effort=self._effort,
            report_level=self._report_level,
            max_heap_size=self._max_heap_size,
            visitors=self._visitors,
            omit_visitors=self._omit_visitors,
            include_filter=self._include_filter,
            exclude_filter=self._exclude_filter,
            exclude_bugs_filter=self._exclude_bugs_filter,
            extra_args=self._extra_args,
            jvm_args=self._jvm_args,
            debug=self._debug,
            show_progress=self._show_progress,
            reports=self._reports,
        )
