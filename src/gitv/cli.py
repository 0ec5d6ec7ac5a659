from __future__ import annotations

import argparse
import sys
import threading
from pathlib import Path
from typing import Callable

import colorama

from .aggregate import repo_display_name
from .config import COLOR_MODES, color_enabled, default_config_path, exclude_dirnames_from, load_config, registry_path_from
from .git import read_commit_events
from .models import Aggregation
from .registry import load_repos, scan
from .stats import generate


def _print_usage() -> None:
    print("usage: gitv <command> [options]")
    print("")
    print("commands:")
    print("  add <folder>    Add a new folder to scan for Git repositories.")
    print("  stats <email>   Generate a contribution graph for the specified email.")
    print("")
    print("examples:")
    print("  gitv add ~/projects")
    print("  gitv stats john@example.com")
    print("")
    print("Run `gitv <command> --help` for command-specific options.")


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", type=Path, default=None, help="Path to the JSON config file (default: ~/.gitv.json or $GITV_CONFIG).")
    p.add_argument("--registry", type=Path, default=None, help="Path to the repository list (default: ~/.gogitlocalstats).")


def _load(args: argparse.Namespace) -> tuple[dict, Path] | None:
    config_path = args.config if args.config is not None else default_config_path()
    try:
        config = load_config(config_path)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return None
    registry_path = args.registry if args.registry is not None else registry_path_from(config)
    return config, registry_path


def _cmd_add(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="gitv add", description="Add a new folder to scan for Git repositories.")
    p.add_argument("folder", type=Path, help="The folder path to scan for repositories.")
    _add_common_args(p)
    args = p.parse_args(argv)

    loaded = _load(args)
    if loaded is None:
        return 1
    config, registry_path = loaded

    try:
        found = scan(args.folder.expanduser(), registry_path=registry_path, exclude_dirnames=exclude_dirnames_from(config))
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1

    print("Found folders:\n")
    for repo in found:
        print(repo)
    print("\n\nSuccessfully added\n\n")
    return 0


def _cmd_stats(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="gitv stats", description="Generate a contribution graph for the specified email.")
    p.add_argument("email", type=str, help="The email address to analyze commits for.")
    p.add_argument("--color", choices=list(COLOR_MODES), default=None, help="Colorize the graph (default: config `color`, else auto).")
    _add_common_args(p)
    args = p.parse_args(argv)

    email = str(args.email or "").strip()
    if not email:
        print("Email address is required", file=sys.stderr)
        return 1

    loaded = _load(args)
    if loaded is None:
        return 1
    config, registry_path = loaded

    color = color_enabled(args.color or str(config.get("color", "auto") or "auto"), isatty=sys.stdout.isatty())
    if color:
        colorama.just_fix_windows_console()

    stop = threading.Event()

    def progress(i: int, total: int, repo: str) -> None:
        print(f"Processing repository {i}/{total}: {repo_display_name(repo)}", file=sys.stderr)

    try:
        result = _run_generate(email, registry_path=registry_path, color=color, stop=stop, progress=progress)
    except KeyboardInterrupt:
        return 130
    if result is None:
        return 2 if not load_repos(registry_path) else 0

    for err in result.errors:
        print(f"Skipped {err}", file=sys.stderr)
    if result.stopped:
        print(f"Interrupted: processed {result.repos_processed} repositories.", file=sys.stderr)
    return 0


def _run_generate(
    email: str,
    *,
    registry_path: Path,
    color: bool,
    stop: threading.Event,
    progress: Callable[[int, int, str], None],
) -> Aggregation | None:
    # Ctrl-C only takes effect between repositories; the graph is still rendered.
    result_box: list[Aggregation | None] = []
    error_box: list[BaseException] = []

    def work() -> None:
        try:
            result_box.append(
                generate(
                    email,
                    out=sys.stdout,
                    list_repos=lambda: load_repos(registry_path),
                    source=read_commit_events,
                    color=color,
                    should_stop=stop.is_set,
                    progress=progress,
                )
            )
        except BaseException as e:
            error_box.append(e)

    t = threading.Thread(target=work, daemon=True)
    t.start()
    while t.is_alive():
        try:
            t.join(timeout=0.2)
        except KeyboardInterrupt:
            if stop.is_set():
                raise
            stop.set()
            print("\nStopping after the current repository (press Ctrl-C again to abort)...", file=sys.stderr)
    if error_box:
        raise error_box[0]
    return result_box[0] if result_box else None


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    if not argv or argv[0] in ("-h", "--help"):
        _print_usage()
        return 0
    if argv[0] == "add":
        return _cmd_add(argv[1:])
    if argv[0] == "stats":
        return _cmd_stats(argv[1:])
    print(f"gitv: unknown command: {argv[0]!r}", file=sys.stderr)
    _print_usage()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
