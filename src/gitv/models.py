from __future__ import annotations

import dataclasses
import datetime as dt
from typing import Mapping


def parse_timestamp(value: object) -> dt.datetime | None:
    if isinstance(value, dt.datetime):
        return value
    if isinstance(value, dt.date):
        return dt.datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None
    s = value.strip()
    if not s:
        return None
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return dt.datetime.fromisoformat(s)
    except ValueError:
        return None


@dataclasses.dataclass(frozen=True)
class CommitEvent:
    author_email: str
    timestamp: dt.datetime

    @classmethod
    def from_record(cls, record: Mapping[str, object]) -> CommitEvent | None:
        """
        Build an event from a loosely-shaped log record.

        Accepts `author_email` or `email` for the author and `date` or
        `timestamp` for the author time (ISO-8601 string, date or datetime).
        Returns None when either field is missing or unusable.
        """
        email = record.get("author_email", record.get("email"))
        if not isinstance(email, str):
            return None
        raw_date = record.get("date", record.get("timestamp"))
        ts = parse_timestamp(raw_date)
        if ts is None:
            return None
        return cls(author_email=email, timestamp=ts)


@dataclasses.dataclass
class Aggregation:
    commits: dict[int, int]  # day index -> commits
    errors: list[str] = dataclasses.field(default_factory=list)
    repos_processed: int = 0
    stopped: bool = False

    @property
    def total(self) -> int:
        return sum(self.commits.values())
