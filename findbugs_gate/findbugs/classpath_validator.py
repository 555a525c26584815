"""Fail-fast check that the FindBugs jar on the tool classpath can run on the current JVM.

FindBugs 3.x needs Java 7 or newer, and FindBugs 2.x and older cannot
read class files produced by Java 8 or newer. Spawning a worker with a
mismatched pair ends in an obscure crash, so the pair is checked first.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

from findbugs_gate.core.errors import ClasspathIncompatibility, ToolVersionUnknown
from findbugs_gate.core.util import run_cmd

logger = logging.getLogger(__name__)

_TOOL_JAR = re.compile(r"findbugs-(\d[^/]*)\.jar")
_JAVA_VERSION = re.compile(r'version "([^"]+)"')


def parse_java_version(version: str) -> int:
    """Return the platform major version: "1.8.0_292" -> 8, "11.0.2" -> 11, "17" -> 17."""
    parts = re.split(r"[._+-]", version.strip())
    try:
        major = int(parts[0])
        if major == 1 and len(parts) > 1:
            major = int(parts[1])
    except ValueError:
        raise ValueError(f"Unrecognised Java version: {version!r}") from None
    return major


def detect_java_version(java_executable: str = "java") -> int:
    # `java -version` prints to stderr
    r = run_cmd([java_executable, "-version"], timeout_sec=30)
    m = _JAVA_VERSION.search(r.stderr) or _JAVA_VERSION.search(r.stdout)
    if r.exit_code != 0 or m is None:
        raise ValueError(f"Could not determine Java version from {java_executable!r}: {r.stderr.strip()}")
    return parse_java_version(m.group(1))


def tool_version(file_names: Iterable[str]) -> tuple[str, str]:
    """Return ``(file_name, version)`` for the first FindBugs jar on the classpath."""
    names = list(file_names)
    for name in names:
        m = _TOOL_JAR.fullmatch(name)
        if m:
            return name, m.group(1)
    raise ToolVersionUnknown(
        f"Unable to infer the version of FindBugs from currently specified FindBugs classpath: {names}"
    )


def _major(version: str) -> int:
    m = re.match(r"\d+", version)
    return int(m.group(0)) if m else 0


class ClasspathValidator:
    def __init__(self, java_version: int):
        self.java_version = java_version

    def validate(self, file_names: Iterable[str]) -> None:
        file_name, version = tool_version(file_names)
        tool_major = _major(version)
        logger.debug("Found FindBugs %s (%s) on Java %d", version, file_name, self.java_version)

        if tool_major >= 3 and self.java_version < 7:
            raise ClasspathIncompatibility(
                file_name,
                required="Java 7",
                actual=f"Java {self.java_version}",
                message=(
                    f"The version of FindBugs ({version}) inferred from {file_name} is too high to work "
                    f"with the current Java version ({self.java_version}). It requires Java 7 or newer. "
                    "Please use a lower version of FindBugs or a newer version of Java."
                ),
            )

        if tool_major < 3 and self.java_version >= 8:
            raise ClasspathIncompatibility(
                file_name,
                required="FindBugs 3.0",
                actual=f"FindBugs {version}",
                message=(
                    f"The version of FindBugs ({version}) inferred from {file_name} is too low to work "
                    f"with the current Java version ({self.java_version}). "
                    "Please use FindBugs 3.0 or newer."
                ),
            )
