"""Runs FindBugs in its own JVM and turns the process outcome into an AnalysisResult.

Every way the run can go wrong before the tool reports (no JVM, bad
arguments, cancellation, timeout) is captured into
``AnalysisResult.exception`` so the evaluator has a single input to judge.
"""

from __future__ import annotations

import logging
import subprocess
import tempfile
import threading
import time
from pathlib import Path
from typing import IO, Callable, Sequence

from findbugs_gate.core.config import settings
from findbugs_gate.core.errors import (
    FindBugsGateError,
    WorkerCancelled,
    WorkerSpawnFailure,
)
from findbugs_gate.domain.models import AnalysisResult, InvocationSpec
from findbugs_gate.findbugs.command_line import worker_command, write_filters
from findbugs_gate.findbugs.output_parser import SummaryParser

logger = logging.getLogger(__name__)
worker_output = logging.getLogger("findbugs_gate.worker")

ProcessFactory = Callable[..., "subprocess.Popen[str]"]

_POLL_INTERVAL_SEC = 0.2


class WorkerManager:
    def __init__(
        self,
        java_executable: str | None = None,
        main_class: str | None = None,
        timeout_sec: int | None = None,
        kill_grace_sec: int | None = None,
        cancel_event: threading.Event | None = None,
    ):
        self.java_executable = java_executable or settings.JAVA_EXECUTABLE
        self.main_class = main_class or settings.FINDBUGS_MAIN_CLASS
        self.timeout_sec = settings.WORKER_TIMEOUT_SEC if timeout_sec is None else timeout_sec
        self.kill_grace_sec = settings.WORKER_KILL_GRACE_SEC if kill_grace_sec is None else kill_grace_sec
        self.cancel_event = cancel_event or threading.Event()

    def run(
        self,
        working_dir: Path,
        process_factory: ProcessFactory,
        tool_classpath: Sequence[Path],
        spec: InvocationSpec,
    ) -> AnalysisResult:
        classpath = [Path(p) for p in tool_classpath] + list(spec.plugin_classpath)
        try:
            with tempfile.TemporaryDirectory(prefix="findbugs-") as scratch:
                filters = write_filters(spec, Path(scratch))
                cmd = worker_command(self.java_executable, self.main_class, classpath, spec, filters)
                return self._execute(cmd, Path(working_dir), process_factory)
        except FindBugsGateError as e:
            logger.debug("FindBugs worker did not complete: %s", e)
            return AnalysisResult(exception=e)
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            logger.debug("FindBugs worker failed", exc_info=True)
            failure = WorkerSpawnFailure(f"Failed to run FindBugs worker process: {e}")
            failure.__cause__ = e
            return AnalysisResult(exception=failure)

    def _execute(self, cmd: list[str], working_dir: Path, process_factory: ProcessFactory) -> AnalysisResult:
        logger.info("Starting FindBugs worker in %s", working_dir)
        logger.debug("Worker command: %s", " ".join(cmd))

        try:
            proc = process_factory(
                cmd,
                cwd=str(working_dir),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
            )
        except OSError as e:
            raise WorkerSpawnFailure(f"Could not start {cmd[0]}: {e}") from e

        parser = SummaryParser()
        lock = threading.Lock()
        reader_errors: list[tuple[str, Exception]] = []
        readers = [
            threading.Thread(target=_pump, args=(proc.stdout, "stdout", parser, lock, reader_errors), daemon=True),
            threading.Thread(target=_pump, args=(proc.stderr, "stderr", parser, lock, reader_errors), daemon=True),
        ]
        for t in readers:
            t.start()

        try:
            exit_code = self._wait(proc)
        except KeyboardInterrupt:
            raise WorkerCancelled("FindBugs worker was interrupted") from None
        finally:
            if proc.poll() is None:
                self._terminate(proc)
            for t in readers:
                t.join(timeout=self.kill_grace_sec or None)

        if reader_errors:
            # the summary lines may be lost, so the counts cannot be trusted
            name, err = reader_errors[0]
            raise WorkerSpawnFailure(f"Lost FindBugs worker {name}: {err}") from err

        counts = parser.counts(exit_code)
        logger.info(
            "FindBugs worker finished (exit %d): %d bugs, %d errors, %d missing classes",
            exit_code,
            counts.bug_count,
            counts.error_count,
            counts.missing_class_count,
        )
        return AnalysisResult(
            error_count=counts.error_count,
            bug_count=counts.bug_count,
            missing_class_count=counts.missing_class_count,
        )

    def _wait(self, proc) -> int:
        deadline = time.monotonic() + self.timeout_sec if self.timeout_sec > 0 else None
        while True:
            if self.cancel_event.is_set():
                raise WorkerCancelled("FindBugs worker was cancelled")
            if deadline is not None and time.monotonic() >= deadline:
                raise WorkerCancelled(f"FindBugs worker timed out after {self.timeout_sec}s")
            try:
                return proc.wait(timeout=_POLL_INTERVAL_SEC)
            except subprocess.TimeoutExpired:
                continue

    def _terminate(self, proc) -> None:
        logger.warning("Terminating FindBugs worker (pid %s)", getattr(proc, "pid", "?"))
        proc.terminate()
        try:
            proc.wait(timeout=self.kill_grace_sec)
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.wait()


def _pump(
    stream: IO[str] | None,
    name: str,
    parser: SummaryParser,
    lock: threading.Lock,
    errors: list[tuple[str, Exception]],
) -> None:
    if stream is None:
        return
    try:
        for line in stream:
            line = line.rstrip("\r\n")
            worker_output.debug(line, extra={"stream": name})
            with lock:
                parser.feed(line)
    except (OSError, ValueError) as e:
        with lock:
            errors.append((name, e))
    finally:
        stream.close()
