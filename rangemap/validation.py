"""Construction-time shape validation for non-contiguous range maps.

Every check happens here, once, before an instance exists. The lookup engine
relies on the result being ascending, disjoint, closed everywhere except
possibly the last position, and correctly shaped at the last position.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Any, NoReturn

from rangemap.errors import (
    EmptyRangeMapError,
    InvalidIntervalShapeError,
    OutOfOrderError,
    RangeMapError,
    SizeMismatchError,
)
from rangemap.interval import Closed, Interval, KeyFunc, LowerOnly, Shape, ordered
from rangemap.util import BOUNDED, INFER, UNBOUNDED, TailMode, TailRule

logger = logging.getLogger(__name__)


def _fail(error: type[RangeMapError], message: str) -> NoReturn:
    logger.debug(f"Rejected range input: {message.splitlines()[0]}")
    raise error(message)


def resolve_tail(last: Interval[Any], tail: TailRule) -> TailMode:
    """Pick the tail mode for ``infer``; pass fixed modes through."""
    if tail == INFER:
        return BOUNDED if last.upper is not None else UNBOUNDED
    if tail not in (BOUNDED, UNBOUNDED):
        raise ValueError(
            f"Unknown tail mode {tail!r}. "
            f"Valid modes: {BOUNDED!r}, {UNBOUNDED!r}, {INFER!r}"
        )
    return tail


def _closed_shape(
    interval: Interval[Any], position: int, count: int, key: KeyFunc | None
) -> Closed[Any]:
    if not interval.is_closed:
        where = "the last position" if position == count - 1 else f"position {position}"
        _fail(
            InvalidIntervalShapeError,
            f"Interval {interval} at {where} of {count} must be closed on both ends.\n"
            f"Hint: every interval except possibly the last must look like "
            f"closed(lo, hi)",
        )
    assert interval.lower is not None and interval.upper is not None
    lo, hi = interval.lower.value, interval.upper.value
    if ordered(lo, key) > ordered(hi, key):
        _fail(
            InvalidIntervalShapeError,
            f"Interval {interval} at position {position} has lower bound "
            f"{lo!r} > upper bound {hi!r} under the supplied key",
        )
    return Closed(lo, hi)


def _lower_only_shape(interval: Interval[Any], count: int) -> LowerOnly[Any]:
    if not interval.is_lower_only:
        _fail(
            InvalidIntervalShapeError,
            f"The last interval {interval} of {count} must be 'at least X': "
            f"closed on the bottom with no upper bound.\n"
            f"Hint: use at_least(lo), or build with a bounded tail if the "
            f"ranges have an end",
        )
    assert interval.lower is not None
    return LowerOnly(interval.lower.value)


def validate_intervals(
    intervals: Iterable[Interval[Any]],
    tail: TailRule,
    key: KeyFunc | None = None,
) -> tuple[tuple[Shape, ...], TailMode]:
    """Check an interval sequence and convert it to tagged shapes.

    Args:
        intervals: Candidate intervals in ascending order
        tail: "bounded", "unbounded", or "infer" (decided by the last interval)
        key: Optional ordering projection applied to bound values

    Returns:
        Tuple of (shapes, resolved tail mode)

    Raises:
        EmptyRangeMapError: If no intervals are supplied
        InvalidIntervalShapeError: If an interval has the wrong shape for its position
        OutOfOrderError: If adjacent intervals touch, overlap, or descend
    """
    candidates: Sequence[Interval[Any]] = tuple(intervals)
    count = len(candidates)
    if count == 0:
        _fail(
            EmptyRangeMapError,
            "A non-contiguous range map needs at least one interval.\n"
            "Hint: use singleton(interval, value) for a single range",
        )

    mode = resolve_tail(candidates[-1], tail)

    shapes: list[Shape] = [
        _closed_shape(interval, position, count, key)
        for position, interval in enumerate(candidates[:-1])
    ]
    if mode == BOUNDED:
        shapes.append(_closed_shape(candidates[-1], count - 1, count, key))
    else:
        shapes.append(_lower_only_shape(candidates[-1], count))

    for position in range(count - 1):
        current, following = shapes[position], shapes[position + 1]
        assert isinstance(current, Closed)
        if not ordered(current.hi, key) < ordered(following.lo, key):
            _fail(
                OutOfOrderError,
                f"Ranges must be strictly increasing, but interval "
                f"{candidates[position]} at position {position} is not entirely "
                f"below interval {candidates[position + 1]} at position "
                f"{position + 1}.\n"
                f"Hint: consecutive intervals may not overlap or share an endpoint",
            )

    return tuple(shapes), mode


def validate(
    intervals: Iterable[Interval[Any]],
    values: Iterable[Any],
    tail: TailRule,
    key: KeyFunc | None = None,
) -> tuple[tuple[Shape, ...], tuple[Any, ...], TailMode]:
    """Check intervals and values together; see ``validate_intervals``.

    Raises:
        SizeMismatchError: If the interval and value counts differ
    """
    interval_list = tuple(intervals)
    value_list = tuple(values)
    if len(interval_list) != len(value_list):
        _fail(
            SizeMismatchError,
            f"You have {len(interval_list)} ranges but {len(value_list)} values.\n"
            f"Hint: supply exactly one value per interval",
        )
    shapes, mode = validate_intervals(interval_list, tail, key)
    return shapes, value_list, mode
