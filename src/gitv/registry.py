from __future__ import annotations

from pathlib import Path

from .git import discover_git_roots

DOTFILE = ".gogitlocalstats"
DEFAULT_EXCLUDE_DIRNAMES = frozenset({".git", "node_modules", "vendor"})


def default_registry_path() -> Path:
    return Path.home() / DOTFILE


def load_repos(path: Path) -> list[str]:
    if not path.exists():
        return []
    return [line for line in path.read_text(encoding="utf-8").split("\n") if line]


def merge_repos(new: list[str], existing: list[str]) -> list[str]:
    return sorted({*new, *existing})


def save_repos(path: Path, repos: list[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(repos), encoding="utf-8")


def add_repos(path: Path, new: list[str]) -> list[str]:
    repos = merge_repos(new, load_repos(path))
    save_repos(path, repos)
    return repos


def scan(folder: Path, *, registry_path: Path, exclude_dirnames: set[str] | frozenset[str] = DEFAULT_EXCLUDE_DIRNAMES) -> list[str]:
    """Find repositories under `folder` and record them in the registry file."""
    if not folder.exists():
        raise ValueError(f"Directory does not exist: {folder}")
    if not folder.is_dir():
        raise ValueError(f"Path is not a directory: {folder}")
    found = [str(p) for p in discover_git_roots(folder.resolve(), set(exclude_dirnames) | {".git"})]
    add_repos(registry_path, found)
    return found
