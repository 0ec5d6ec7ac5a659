from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Callable, Iterable

from .models import Aggregation, CommitEvent
from .timebuckets import DAYS_IN_LAST_SIX_MONTHS, OUT_OF_RANGE, days_since, week_offset

CommitSource = Callable[[str], Iterable[CommitEvent]]


def empty_commit_map() -> dict[int, int]:
    return {day: 0 for day in range(DAYS_IN_LAST_SIX_MONTHS, 0, -1)}


def fill_commits(
    email: str,
    events: Iterable[CommitEvent],
    commits: dict[int, int],
    *,
    today: dt.date,
) -> int:
    """Add `email`'s events to `commits` in place; returns how many were counted."""
    offset = week_offset(today=today)
    counted = 0
    for event in events:
        if event.author_email != email:
            continue
        days_ago = days_since(event.timestamp, today=today)
        if days_ago == OUT_OF_RANGE:
            continue
        day = days_ago + offset
        commits[day] = commits.get(day, 0) + 1
        counted += 1
    return counted


def aggregate_contributions(
    email: str,
    repos: list[str],
    source: CommitSource,
    *,
    today: dt.date | None = None,
    should_stop: Callable[[], bool] | None = None,
    on_repo: Callable[[int, int, str], None] | None = None,
) -> Aggregation:
    """
    Count `email`'s commits per day index across `repos`, one repository at a time.

    A repository is counted into its own map and merged only once its source
    is exhausted, so one that raises partway contributes nothing and is
    reported in `Aggregation.errors`. `should_stop` is only checked before a
    repository is started.
    """
    if today is None:
        today = dt.date.today()

    result = Aggregation(commits=empty_commit_map())
    for i, repo in enumerate(repos, start=1):
        if should_stop is not None and should_stop():
            result.stopped = True
            break
        if on_repo is not None:
            on_repo(i, len(repos), repo)
        repo_commits: dict[int, int] = {}
        try:
            fill_commits(email, source(repo), repo_commits, today=today)
        except Exception as e:
            result.errors.append(f"{repo}: {str(e) or type(e).__name__}")
        else:
            for day, n in repo_commits.items():
                result.commits[day] = result.commits.get(day, 0) + n
        result.repos_processed += 1
    return result


def repo_display_name(repo: str) -> str:
    return Path(repo).name or repo
