import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence


@dataclass
class CmdResult:
    exit_code: int
    stdout: str
    stderr: str


def run_cmd(cmd: Sequence[str], cwd: Path | None = None, timeout_sec: int = 60) -> CmdResult:
    p = subprocess.run(
        list(cmd),
        cwd=str(cwd) if cwd else None,
        capture_output=True,
        text=True,
        timeout=timeout_sec
    )
    return CmdResult(p.returncode, p.stdout or "", p.stderr or "")


def as_path(paths: Iterable[Path]) -> str:
    """Join paths with the platform separator, like a JVM classpath."""
    return os.pathsep.join(str(p) for p in paths)


def resolve_files(roots: Iterable[Path]) -> list[Path]:
    """Expand roots into the files beneath them. Empty directories contribute nothing."""
    files: list[Path] = []
    for root in roots:
        root = Path(root)
        if root.is_file():
            files.append(root)
        elif root.is_dir():
            files.extend(sorted(p for p in root.rglob("*") if p.is_file()))
    return files
