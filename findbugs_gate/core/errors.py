from __future__ import annotations


class FindBugsGateError(Exception):
    """Base class for every error raised by findbugs_gate."""


class ClasspathIncompatibility(FindBugsGateError):
    def __init__(self, file_name: str, required: str, actual: str, message: str):
        super().__init__(message)
        self.file_name = file_name
        self.required = required
        self.actual = actual


class ToolVersionUnknown(FindBugsGateError):
    pass


class InvalidInvocation(FindBugsGateError):
    pass


class WorkerSpawnFailure(FindBugsGateError):
    pass


class WorkerCancelled(FindBugsGateError):
    pass


class AnalysisFailed(FindBugsGateError):
    """The build-facing failure for a failed analysis outcome."""
