from __future__ import annotations

import os
import subprocess
import threading
from pathlib import Path
from typing import Iterator

from .models import CommitEvent


class CommitSourceError(RuntimeError):
    pass


def discover_git_roots(root: Path, exclude_dirnames: set[str]) -> list[Path]:
    """
    Walk `root` and return every directory holding a `.git` marker.

    The walk does not descend below a repository root, skips any directory
    named in `exclude_dirnames` and ignores directories it cannot read.
    """
    roots: list[Path] = []

    def onerror(err: OSError) -> None:
        _ = err

    for dirpath, dirnames, filenames in os.walk(root, onerror=onerror):
        if ".git" in dirnames or ".git" in filenames:
            roots.append(Path(dirpath))
            dirnames[:] = []
            continue
        dirnames[:] = sorted(d for d in dirnames if d not in exclude_dirnames and d != ".git")
    return roots


def read_commit_events(repo: str | Path) -> Iterator[CommitEvent]:
    """Stream author email + author date for every commit reachable from HEAD."""
    cmd = ["git", "log", "--format=%ae%x09%aI"]
    try:
        proc = subprocess.Popen(
            cmd,
            cwd=str(repo),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
    except OSError as e:
        raise CommitSourceError(f"failed to start git log: {e}") from e

    stderr_chunks: list[str] = []

    def drain_stderr() -> None:
        if proc.stderr is None:
            return
        while True:
            chunk = proc.stderr.read(8192)
            if not chunk:
                return
            stderr_chunks.append(chunk)

    stderr_thread = threading.Thread(target=drain_stderr, daemon=True)
    stderr_thread.start()

    assert proc.stdout is not None
    try:
        for raw_line in proc.stdout:
            line = raw_line.rstrip("\n")
            if not line:
                continue
            parts = line.split("\t", 1)
            if len(parts) != 2:
                continue
            event = CommitEvent.from_record({"author_email": parts[0], "date": parts[1]})
            if event is not None:
                yield event
    finally:
        proc.stdout.close()
        code = proc.wait()
        stderr_thread.join(timeout=5)

    if code != 0:
        msg = "".join(stderr_chunks).strip().splitlines()
        raise CommitSourceError(msg[-1] if msg else f"git log exited with {code}")
