from __future__ import annotations

from .timebuckets import DAYS_PER_WEEK


def sort_keys(commits: dict[int, int]) -> list[int]:
    return sorted(commits)


def build_columns(keys: list[int], commits: dict[int, int]) -> dict[int, list[int]]:
    """
    Group day indexes into week columns (week = key // 7).

    A column is only kept once its traversal reaches day-in-week 6; weeks the
    key range enters or leaves mid-way are dropped, not padded. The buffer is
    not reset until a day-in-week 0 key is seen, so a first week entered after
    its day 0 is kept with fewer than seven entries. Each committed column is
    its own list.
    """
    cols: dict[int, list[int]] = {}
    col: list[int] = []
    for k in keys:
        week, day_in_week = divmod(k, DAYS_PER_WEEK)
        if day_in_week == 0:
            col = []
        col.append(commits.get(k, 0))
        if day_in_week == DAYS_PER_WEEK - 1:
            cols[week] = list(col)
    return cols
