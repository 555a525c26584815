import logging
import os
import subprocess
import sys
import threading
from pathlib import Path

from findbugs_gate.core.errors import InvalidInvocation, WorkerCancelled, WorkerSpawnFailure
from findbugs_gate.domain.models import Reports
from findbugs_gate.findbugs.result_evaluator import ResultEvaluator
from findbugs_gate.findbugs.spec_builder import InvocationSpecBuilder
from findbugs_gate.findbugs.worker_manager import WorkerManager


def _manager(**kwargs):
    kwargs.setdefault("kill_grace_sec", 1)
    return WorkerManager(java_executable="java", main_class="edu.umd.cs.findbugs.FindBugs2", timeout_sec=0, **kwargs)


def test_counts_from_worker_output(tmp_path, class_dir, fake_process, fake_process_factory):
    factory = fake_process_factory(
        fake_process(stdout="Scanning archives\n", stderr="Warnings generated: 2\n", exit_code=1)
    )
    spec = InvocationSpecBuilder([class_dir]).with_plugins_list([Path("plugin.jar")]).build()

    result = _manager().run(tmp_path, factory, [Path("findbugs-3.0.1.jar")], spec)

    assert result.exception is None
    assert result.bug_count == 2
    assert result.error_count == 0

    cmd, kwargs = factory.calls[0]
    assert kwargs["cwd"] == str(tmp_path)
    cp = cmd[cmd.index("-cp") + 1]
    assert cp == os.pathsep.join([str(Path("findbugs-3.0.1.jar").resolve()), str(Path("plugin.jar").resolve())])


def test_worker_output_is_logged_at_debug(tmp_path, class_dir, fake_process, fake_process_factory, caplog):
    factory = fake_process_factory(fake_process(stdout="Scanning archives (1 / 1)\n", stderr="100% done\n"))
    spec = InvocationSpecBuilder([class_dir]).build()

    with caplog.at_level(logging.DEBUG, logger="findbugs_gate.worker"):
        _manager().run(tmp_path, factory, [Path("findbugs-3.0.1.jar")], spec)

    worker_records = [r for r in caplog.records if r.name == "findbugs_gate.worker"]
    assert {r.getMessage() for r in worker_records} == {"Scanning archives (1 / 1)", "100% done"}
    assert all(r.levelno == logging.DEBUG for r in worker_records)
    assert {r.stream for r in worker_records} == {"stdout", "stderr"}


def test_spawn_failure_is_captured(tmp_path, class_dir, fake_process_factory):
    factory = fake_process_factory(error=FileNotFoundError(2, "No such file or directory", "java"))
    spec = InvocationSpecBuilder([class_dir]).build()

    result = _manager().run(tmp_path, factory, [Path("findbugs-3.0.1.jar")], spec)

    assert isinstance(result.exception, WorkerSpawnFailure)
    assert isinstance(result.exception.__cause__, FileNotFoundError)
    assert result.bug_count == 0


def test_invalid_invocation_is_captured_before_spawn(tmp_path, class_dir, fake_process_factory):
    factory = fake_process_factory()
    spec = InvocationSpecBuilder([class_dir]).with_effort("extreme").build()

    result = _manager().run(tmp_path, factory, [Path("findbugs-3.0.1.jar")], spec)

    assert isinstance(result.exception, InvalidInvocation)
    assert factory.calls == []


def test_filters_exist_while_worker_runs(tmp_path, class_dir, fake_process_factory):
    seen = {}

    def on_spawn(cmd, kwargs):
        include = Path(cmd[cmd.index("-include") + 1])
        seen["path"] = include
        seen["text"] = include.read_text(encoding="utf-8")

    factory = fake_process_factory(on_spawn=on_spawn)
    spec = InvocationSpecBuilder([class_dir]).with_include_filter("<FindBugsFilter/>").build()

    _manager().run(tmp_path, factory, [Path("findbugs-3.0.1.jar")], spec)

    assert seen["text"] == "<FindBugsFilter/>"
    assert not seen["path"].exists()


def test_cancellation_terminates_worker(tmp_path, class_dir, fake_process, fake_process_factory):
    proc = fake_process(hang=True)
    factory = fake_process_factory(proc)
    cancel = threading.Event()
    cancel.set()
    spec = InvocationSpecBuilder([class_dir]).build()

    result = _manager(cancel_event=cancel).run(tmp_path, factory, [Path("findbugs-3.0.1.jar")], spec)

    assert isinstance(result.exception, WorkerCancelled)
    assert proc.terminated


def test_timeout_terminates_worker(tmp_path, class_dir, fake_process, fake_process_factory):
    proc = fake_process(hang=True)
    factory = fake_process_factory(proc)
    spec = InvocationSpecBuilder([class_dir]).build()
    manager = WorkerManager(java_executable="java", main_class="Main", timeout_sec=1, kill_grace_sec=1)

    result = manager.run(tmp_path, factory, [Path("findbugs-3.0.1.jar")], spec)

    assert isinstance(result.exception, WorkerCancelled)
    assert "timed out" in str(result.exception)
    assert proc.terminated


def test_interrupt_terminates_worker(tmp_path, class_dir, fake_process, fake_process_factory):
    proc = fake_process(interrupt=True)
    factory = fake_process_factory(proc)
    spec = InvocationSpecBuilder([class_dir]).build()

    result = _manager().run(tmp_path, factory, [Path("findbugs-3.0.1.jar")], spec)

    assert isinstance(result.exception, WorkerCancelled)
    assert "interrupted" in str(result.exception)
    assert proc.terminated


# Latin-1 file name followed by the summary line, as a JVM prints it under a non-UTF-8 locale
_LATIN1_WORKER = (
    "import sys\n"
    "sys.stderr.buffer.write(b'Bug in Caf\\xe9.java\\nWarnings generated: 1\\n')\n"
    "sys.stderr.flush()\n"
    "sys.exit(1)\n"
)


def test_undecodable_output_keeps_findings_suppressible(tmp_path, class_dir, caplog):
    def python_worker(cmd, **kwargs):
        return subprocess.Popen([sys.executable, "-c", _LATIN1_WORKER], **kwargs)

    spec = InvocationSpecBuilder([class_dir]).build()

    with caplog.at_level(logging.DEBUG, logger="findbugs_gate.worker"):
        result = _manager().run(tmp_path, python_worker, [Path("findbugs-3.0.1.jar")], spec)

    assert result.exception is None
    assert result.bug_count == 1
    assert result.error_count == 0
    assert "Bug in Caf\ufffd.java" in [r.getMessage() for r in caplog.records if r.name == "findbugs_gate.worker"]
    assert ResultEvaluator().evaluate(result, True, Reports()).status == "warn"


class _BrokenStream:
    def __iter__(self):
        raise UnicodeDecodeError("utf-8", b"\xe9", 0, 1, "invalid continuation byte")

    def close(self):
        pass


def test_failed_reader_is_not_mistaken_for_a_tool_error(tmp_path, class_dir, fake_process, fake_process_factory):
    proc = fake_process(stdout="Scanning archives\n", exit_code=1)
    proc.stderr = _BrokenStream()
    factory = fake_process_factory(proc)
    spec = InvocationSpecBuilder([class_dir]).build()

    result = _manager().run(tmp_path, factory, [Path("findbugs-3.0.1.jar")], spec)

    assert isinstance(result.exception, WorkerSpawnFailure)
    assert "stderr" in str(result.exception)
    assert isinstance(result.exception.__cause__, UnicodeDecodeError)
