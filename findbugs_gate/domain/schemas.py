from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict

from findbugs_gate.domain.models import ReportDescriptor, Reports


class ReportConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    format: Literal["xml", "html", "text", "emacs"]
    enabled: bool = False
    destination: Path
    with_messages: bool = False
    stylesheet: Path | None = None

    def to_descriptor(self) -> ReportDescriptor:
        return ReportDescriptor(
            format=self.format,
            enabled=self.enabled,
            destination=self.destination,
            with_messages=self.with_messages,
            stylesheet=self.stylesheet,
        )


class TaskConfig(BaseModel):
    """Resolved task options. Values are passed to the tool as given."""

    model_config = ConfigDict(frozen=True)

    build_unit: str = "main"

    classes: list[Path] = []
    source: list[Path] = []
    classpath: list[Path] = []
    findbugs_classpath: list[Path] = []
    plugin_classpath: list[Path] = []

    ignore_failures: bool = False

    effort: str | None = None
    report_level: str | None = None
    max_heap_size: str | None = None

    visitors: list[str] = []
    omit_visitors: list[str] = []

    # raw filter-language content
    include_filter: str | None = None
    exclude_filter: str | None = None
    exclude_bugs_filter: str | None = None

    extra_args: list[str] = []
    jvm_args: list[str] = []

    show_progress: bool = False

    reports: list[ReportConfig] = []

    def report_container(self) -> Reports:
        return Reports(r.to_descriptor() for r in self.reports)

    @classmethod
    def from_json_file(cls, path: Path) -> "TaskConfig":
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))


def read_filter(path: Path | None) -> str | None:
    if path is None:
        return None
    return Path(path).read_text(encoding="utf-8")
