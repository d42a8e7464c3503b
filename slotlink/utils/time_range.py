from __future__ import annotations

from datetime import time
from typing import NamedTuple


def check_time_of_day(value: time) -> time:
    """Accept only naive times on a whole minute, the precision of the ``HH:MM`` key."""

    if value.tzinfo is not None:
        raise ValueError(f"time of day must not carry a timezone: {value}")
    if value.second or value.microsecond:
        raise ValueError(f"time of day must be a whole minute: {value}")
    return value


class TimeRange(NamedTuple):
    """
    A start and end time of day.

    Equality is structural and ordering follows the start time, so a ``TimeRange`` can be used
    directly as the key that identifies a slot or booking on a given date.
    The string form is ``HH:MM-HH:MM`` and ``parse`` reads it back unchanged.
    """

    start: time
    end: time

    def __str__(self) -> str:
        return f"{self.start:%H:%M}-{self.end:%H:%M}"

    @property
    def valid(self) -> bool:
        return self.end > self.start

    @classmethod
    def parse(cls, value: str) -> TimeRange:
        start, sep, end = value.strip().partition("-")
        if not sep:
            raise ValueError(f"invalid time range: {value!r}")

        time_range = cls(
            check_time_of_day(time.fromisoformat(start.strip())), check_time_of_day(time.fromisoformat(end.strip()))
        )
        if not time_range.valid:
            raise ValueError(f"end time must be after start time: {value!r}")
        return time_range
