"""Date-keyed interval helpers.

Most range maps in portfolio code are keyed by calendar day (e.g. which fee
schedule applies on a given date). These helpers accept ``date``, ``datetime``
or ISO-8601 strings and normalize them to ``date``, backed by python-dateutil's
ISO parser.
"""

from collections.abc import Iterable, Sequence
from datetime import date, datetime
from typing import Any, TypeAlias, TypeVar

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from rangemap.core import NonContiguousRangeMap
from rangemap.interval import Interval, at_least, closed

V = TypeVar("V")

DayLike: TypeAlias = date | datetime | str


def to_day(value: DayLike) -> date:
    """Normalize a date-like value to a ``date``.

    Accepts:
    - date: Passed through as-is
    - datetime: Truncated to its calendar date (in its own timezone)
    - str: Parsed as ISO-8601 ("2024-01-31", "2024-01-31T09:30:00+00:00")

    Raises:
        TypeError: If value is an unsupported type
        ValueError: If a string is not valid ISO-8601
    """
    # datetime is a subclass of date, so check it first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return isoparse(value).date()
        except ValueError as exc:
            raise ValueError(
                f"Could not parse {value!r} as an ISO-8601 date.\n"
                f"Examples: '2024-01-31', '2024-01-31T09:30:00+00:00'"
            ) from exc
    raise TypeError(
        f"Expected a date, datetime, or ISO-8601 string.\n"
        f"Got {type(value).__name__!r}: {value!r}"
    )


def day_interval(start: DayLike, end: DayLike | None = None) -> Interval[date]:
    """Closed interval [start, end] of days, or [start, +inf) when end is None."""
    if end is None:
        return at_least(to_day(start))
    return closed(to_day(start), to_day(end))


def shift(day: DayLike, **offset: Any) -> date:
    """Move a day by a relativedelta offset, e.g. ``shift(d, months=1, days=-1)``."""
    return to_day(day) + relativedelta(**offset)


def day_range_map(
    spans: Iterable[tuple[DayLike, DayLike | None]], values: Sequence[V]
) -> NonContiguousRangeMap[date, V]:
    """Build a date-keyed range map from (start, end) pairs.

    An end of None on the last pair means the final range has no end; the tail
    mode is inferred from it.

    Example:
        >>> fees = day_range_map(
        ...     [("2024-01-01", "2024-06-30"), ("2024-09-01", None)],
        ...     ["schedule A", "schedule B"],
        ... )
        >>> fees.get_optional(date(2024, 7, 15)) is None
        True
    """
    intervals = [day_interval(start, end) for start, end in spans]
    return NonContiguousRangeMap.infer(intervals, values)


def monthly_intervals(start: DayLike, count: int) -> list[Interval[date]]:
    """``count`` consecutive month-long intervals anchored on ``start``'s day.

    Interval i runs from ``start + i months`` to the day before
    ``start + (i + 1) months``, so the results tile without gaps. They line up
    with calendar months only when ``start`` is the first of a month; from
    2024-01-31 they are [Jan 31, Feb 28], [Feb 29, Mar 30], ...
    """
    if count < 1:
        raise ValueError(f"count must be >= 1, got {count}")
    first = to_day(start)
    return [
        closed(
            first + relativedelta(months=i),
            first + relativedelta(months=i + 1, days=-1),
        )
        for i in range(count)
    ]
