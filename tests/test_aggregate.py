from __future__ import annotations

import datetime as dt
import os
import subprocess
from pathlib import Path
from typing import Iterator

from gitv.aggregate import aggregate_contributions, empty_commit_map, fill_commits
from gitv.git import read_commit_events
from gitv.models import CommitEvent

TODAY = dt.date(2025, 1, 15)  # Wednesday, week offset 4
ME = "me@example.com"


def _ev(days_ago: int, email: str = ME, hour: int = 12) -> CommitEvent:
    d = TODAY - dt.timedelta(days=days_ago)
    return CommitEvent(author_email=email, timestamp=dt.datetime(d.year, d.month, d.day, hour))


def _run(cmd: list[str], *, cwd: Path, env: dict[str, str] | None = None) -> str:
    proc = subprocess.run(cmd, cwd=str(cwd), env=env, check=True, capture_output=True, text=True)
    return proc.stdout


def _commit(*, repo: Path, filename: str, author_email: str, author_date: str) -> None:
    (repo / filename).write_text(filename + "\n", encoding="utf-8")
    _run(["git", "add", filename], cwd=repo)
    env = os.environ.copy()
    env["GIT_AUTHOR_EMAIL"] = author_email
    env["GIT_AUTHOR_DATE"] = author_date
    env["GIT_COMMITTER_DATE"] = author_date
    _run(["git", "commit", "-m", f"add {filename}"], cwd=repo, env=env)


def test_empty_commit_map_covers_window() -> None:
    commits = empty_commit_map()
    assert sorted(commits) == list(range(1, 184))
    assert set(commits.values()) == {0}


def test_commit_today_lands_on_week_offset() -> None:
    r = aggregate_contributions(ME, ["a"], lambda repo: [_ev(0)], today=TODAY)
    assert r.commits[4] == 1
    assert r.total == 1
    assert r.errors == []
    assert r.repos_processed == 1


def test_window_boundary() -> None:
    r = aggregate_contributions(ME, ["a"], lambda repo: [_ev(183), _ev(184), _ev(400)], today=TODAY)
    assert r.commits[183 + 4] == 1
    assert r.total == 1
    assert 184 + 4 not in r.commits


def test_other_emails_never_counted() -> None:
    events = [_ev(1, "someone@example.com"), _ev(2, "ME@example.com"), _ev(3, " me@example.com")]
    r = aggregate_contributions(ME, ["a"], lambda repo: events, today=TODAY)
    assert r.total == 0
    assert r.commits == empty_commit_map()


def test_counts_accumulate_across_repos() -> None:
    sources = {"a": [_ev(1), _ev(1, hour=18)], "b": [_ev(1), _ev(10)]}
    r = aggregate_contributions(ME, ["a", "b"], lambda repo: sources[repo], today=TODAY)
    assert r.commits[1 + 4] == 3
    assert r.commits[10 + 4] == 1
    assert r.total == 4
    assert all(v >= 0 for v in r.commits.values())


def test_failing_repository_is_skipped() -> None:
    seen: list[str] = []

    def source(repo: str) -> list[CommitEvent]:
        seen.append(repo)
        if repo == "bad":
            raise RuntimeError("boom")
        return [_ev(2)]

    r = aggregate_contributions(ME, ["a", "bad", "c"], source, today=TODAY)
    assert seen == ["a", "bad", "c"]
    assert r.errors == ["bad: boom"]
    assert r.commits[2 + 4] == 2
    assert r.repos_processed == 3


def test_repository_failing_partway_contributes_nothing() -> None:
    def source(repo: str) -> Iterator[CommitEvent]:
        if repo == "bad":
            yield _ev(1)
            yield _ev(2)
            raise RuntimeError("corrupt pack")
        yield _ev(5)

    r = aggregate_contributions(ME, ["bad", "good"], source, today=TODAY)
    assert r.errors == ["bad: corrupt pack"]
    assert r.commits[1 + 4] == 0
    assert r.commits[2 + 4] == 0
    assert r.commits[5 + 4] == 1
    assert r.total == 1
    assert r.repos_processed == 2


def test_progress_callback_in_input_order() -> None:
    calls: list[tuple[int, int, str]] = []
    aggregate_contributions(ME, ["z", "a", "m"], lambda repo: [], today=TODAY, on_repo=lambda i, n, repo: calls.append((i, n, repo)))
    assert calls == [(1, 3, "z"), (2, 3, "a"), (3, 3, "m")]


def test_stop_only_between_repositories() -> None:
    started: list[str] = []
    stop = {"flag": False}

    def source(repo: str) -> Iterator[CommitEvent]:
        started.append(repo)
        yield _ev(1)
        stop["flag"] = True
        yield _ev(1)

    r = aggregate_contributions(ME, ["a", "b"], source, today=TODAY, should_stop=lambda: stop["flag"])
    assert started == ["a"]
    assert r.commits[1 + 4] == 2
    assert r.stopped is True
    assert r.repos_processed == 1


def test_fill_commits_returns_counted() -> None:
    commits: dict[int, int] = {}
    n = fill_commits(ME, [_ev(0), _ev(300), _ev(1, "x@example.com")], commits, today=TODAY)
    assert n == 1
    assert commits == {4: 1}


def test_aggregate_over_real_git_repositories(tmp_path: Path) -> None:
    repo = tmp_path / "r"
    repo.mkdir()
    _run(["git", "init"], cwd=repo)
    _run(["git", "config", "user.name", "Test User"], cwd=repo)
    _run(["git", "config", "user.email", ME], cwd=repo)
    _commit(repo=repo, filename="a.txt", author_email=ME, author_date="2025-01-14T12:00:00")
    _commit(repo=repo, filename="b.txt", author_email=ME, author_date="2025-01-14T15:00:00")
    _commit(repo=repo, filename="c.txt", author_email="other@example.com", author_date="2025-01-14T16:00:00")
    _commit(repo=repo, filename="d.txt", author_email=ME, author_date="2024-01-01T12:00:00")

    not_a_repo = tmp_path / "plain"
    not_a_repo.mkdir()

    r = aggregate_contributions(ME, [str(not_a_repo), str(repo), str(tmp_path / "missing")], read_commit_events, today=TODAY)
    assert r.commits[1 + 4] == 2
    assert r.total == 2
    assert len(r.errors) == 2
    assert r.errors[0].startswith(str(not_a_repo) + ": ")
    assert r.errors[1].startswith(str(tmp_path / "missing") + ": ")
