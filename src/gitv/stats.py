from __future__ import annotations

import datetime as dt
from typing import Callable, TextIO

from .aggregate import CommitSource, aggregate_contributions
from .models import Aggregation
from .render import write_contribution_graph

NO_REPOSITORIES_MESSAGE = 'No repositories found. Run "gitv add <folder>" first to scan for repositories.'
NO_CONTRIBUTIONS_MESSAGE = "No contributions found."


def generate(
    email: str,
    *,
    out: TextIO,
    list_repos: Callable[[], list[str]],
    source: CommitSource,
    today: dt.date | None = None,
    color: bool = False,
    should_stop: Callable[[], bool] | None = None,
    progress: Callable[[int, int, str], None] | None = None,
) -> Aggregation | None:
    """
    Aggregate `email`'s commits over the listed repositories and write the
    contribution graph to `out`.

    Returns None when there is nothing to render (no repositories, or an
    empty map); otherwise the aggregation, so callers can report skipped
    repositories.
    """
    if today is None:
        today = dt.date.today()

    repos = list(list_repos())
    if not repos:
        print(NO_REPOSITORIES_MESSAGE, file=out)
        return None

    print(f"Analyzing contributions for: {email}", file=out)
    result = aggregate_contributions(
        email,
        repos,
        source,
        today=today,
        should_stop=should_stop,
        on_repo=progress,
    )
    if not result.commits:
        print(NO_CONTRIBUTIONS_MESSAGE, file=out)
        return None

    write_contribution_graph(out, dict(result.commits), today=today, color=color)
    return result
