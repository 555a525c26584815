import io
import logging
import subprocess
import time
from pathlib import Path

import pytest

from findbugs_gate.domain.models import ReportDescriptor, Reports


class FakeProcess:
    """Stands in for subprocess.Popen: canned output, exit code, and termination tracking."""

    def __init__(self, stdout="", stderr="", exit_code=0, hang=False, interrupt=False):
        self.stdout = io.StringIO(stdout)
        self.stderr = io.StringIO(stderr)
        self.pid = 4242
        self._exit_code = exit_code
        self._hang = hang
        self._interrupt = interrupt
        self.terminated = False
        self.killed = False

    def poll(self):
        if (self._hang or self._interrupt) and not self.terminated:
            return None
        return self.returncode

    @property
    def returncode(self):
        return -15 if self.terminated else self._exit_code

    def wait(self, timeout=None):
        if self._interrupt and not self.terminated:
            raise KeyboardInterrupt
        if self._hang and not self.terminated:
            time.sleep(timeout or 0)
            raise subprocess.TimeoutExpired("java", timeout)
        return self.returncode

    def terminate(self):
        self.terminated = True

    def kill(self):
        self.killed = True


class FakeProcessFactory:
    def __init__(self, process=None, error=None, on_spawn=None):
        self.process = process or FakeProcess()
        self.error = error
        self.on_spawn = on_spawn
        self.calls = []

    def __call__(self, cmd, **kwargs):
        self.calls.append((cmd, kwargs))
        if self.on_spawn:
            self.on_spawn(cmd, kwargs)
        if self.error:
            raise self.error
        return self.process


@pytest.fixture
def fake_process_factory():
    return FakeProcessFactory


@pytest.fixture
def fake_process():
    return FakeProcess


@pytest.fixture
def class_dir(tmp_path) -> Path:
    """A class-file root holding one compiled class."""
    d = tmp_path / "classes"
    (d / "com" / "acme").mkdir(parents=True)
    (d / "com" / "acme" / "Main.class").write_bytes(b"\xca\xfe\xba\xbe")
    return d


@pytest.fixture
def reports(tmp_path) -> Reports:
    return Reports(
        [
            ReportDescriptor("xml", False, tmp_path / "reports" / "findbugs.xml"),
            ReportDescriptor("html", True, tmp_path / "reports" / "findbugs.html"),
            ReportDescriptor("text", True, tmp_path / "reports" / "findbugs.txt"),
        ]
    )


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """setup_logging() replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
