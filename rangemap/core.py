import bisect
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import Any, Generic, TypeVar, overload

from typing_extensions import override

from rangemap.errors import InvalidIntervalShapeError, KeyNotFoundError
from rangemap.interval import (
    Interval,
    KeyFunc,
    LowerOnly,
    Shape,
    at_least,
    ordered,
)
from rangemap.util import BOUNDED, INFER, UNBOUNDED, TailMode, TailRule
from rangemap.validation import validate, validate_intervals

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")
D = TypeVar("D")

# Guards __init__ so instances only come from the validating entry points
_VALIDATED = object()


def _singleton_tail(interval: Interval[Any]) -> TailMode:
    if interval.is_closed:
        return BOUNDED
    if interval.is_lower_only:
        return UNBOUNDED
    raise InvalidIntervalShapeError(
        f"A singleton range needs a closed or 'at least X' interval, got {interval}.\n"
        f"Hint: use closed(lo, hi) or at_least(lo)"
    )


class _OrderedRanges(ABC, Generic[K]):
    """Validated, ascending, disjoint intervals with O(log N) point search.

    Instances are immutable after construction. Every interval except the last
    is ``Closed``; the last is ``Closed`` (bounded tail) or ``LowerOnly``
    (unbounded tail).
    """

    __slots__ = ("_shapes", "_tail", "_key")

    def __init__(
        self,
        token: object,
        shapes: tuple[Shape, ...],
        tail: TailMode,
        key: KeyFunc | None,
    ):
        if token is not _VALIDATED:
            raise TypeError(
                f"{type(self).__name__} cannot be instantiated directly.\n"
                f"Use one of: {type(self).__name__}.with_bounded_tail(...), "
                f".with_unbounded_tail(...), .infer(...), .singleton(...)"
            )
        self._shapes: tuple[Shape, ...] = shapes
        self._tail: TailMode = tail
        self._key: KeyFunc | None = key

    @property
    def tail(self) -> TailMode:
        """Either "bounded" (last interval closed) or "unbounded"."""
        return self._tail

    @property
    def has_end(self) -> bool:
        return self._tail == BOUNDED

    @property
    def shapes(self) -> tuple[Shape, ...]:
        return self._shapes

    @property
    def intervals(self) -> tuple[Interval[K], ...]:
        return tuple(shape.to_interval(self._key) for shape in self._shapes)

    def __len__(self) -> int:
        return len(self._shapes)

    def _floor_index(self, x: K) -> int | None:
        """Greatest index whose lower bound is <= x, or None if x is below all."""
        probe = ordered(x, self._key)
        index = (
            bisect.bisect_right(
                self._shapes, probe, key=lambda shape: ordered(shape.lo, self._key)
            )
            - 1
        )
        return index if index >= 0 else None

    def index_of(self, x: K) -> int | None:
        """Position of the interval containing x, or None if x is in no interval."""
        index = self._floor_index(x)
        if index is None:
            return None
        shape = self._shapes[index]
        if isinstance(shape, LowerOnly):
            return index
        return index if ordered(x, self._key) <= ordered(shape.hi, self._key) else None

    def __contains__(self, x: object) -> bool:
        return self.index_of(x) is not None  # type: ignore[arg-type]

    @abstractmethod
    def _describe(self) -> str:
        pass

    @override
    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._describe()})"


class NonContiguousRangeMap(_OrderedRanges[K], Generic[K, V]):
    """Map from disjoint, ascending intervals to values.

    Strictly speaking this is 'not necessarily contiguous': gaps between
    consecutive intervals are allowed, but the ranges may also abut with no gap
    for discrete keys, e.g. [2, 4] and [5, 7].

    Build with one of the classmethods; lookups never mutate anything, so an
    instance can be shared freely across threads.

    Example:
        >>> rates = NonContiguousRangeMap.with_unbounded_tail(
        ...     [closed(1, 5), closed(8, 9), at_least(20)], ["a", "b", "c"]
        ... )
        >>> rates.get_optional(4)
        'a'
        >>> rates.get_optional(6) is None
        True
        >>> rates.get_optional(10_000)
        'c'
    """

    __slots__ = ("_values",)

    def __init__(
        self,
        token: object,
        shapes: tuple[Shape, ...],
        values: tuple[V, ...],
        tail: TailMode,
        key: KeyFunc | None = None,
    ):
        super().__init__(token, shapes, tail, key)
        self._values: tuple[V, ...] = values

    @classmethod
    def _build(
        cls,
        intervals: Iterable[Interval[K]],
        values: Iterable[V],
        tail: TailRule,
        key: KeyFunc | None,
    ) -> "NonContiguousRangeMap[K, V]":
        shapes, frozen_values, mode = validate(intervals, values, tail, key)
        logger.debug(
            f"Built {cls.__name__} with {len(shapes)} ranges ({mode} tail)"
        )
        return cls(_VALIDATED, shapes, frozen_values, mode, key)

    @classmethod
    def with_bounded_tail(
        cls,
        intervals: Iterable[Interval[K]],
        values: Iterable[V],
        *,
        key: KeyFunc | None = None,
    ) -> "NonContiguousRangeMap[K, V]":
        """Build a map whose last interval is closed on both ends.

        Args:
            intervals: Ascending intervals; all must be closed
            values: One value per interval
            key: Ordering projection for validation and search. Intervals check
                their own bounds at creation, so a non-natural ordering must also
                be passed to each builder, e.g. ``closed(10, 8, key=key)``
        """
        return cls._build(intervals, values, BOUNDED, key)

    @classmethod
    def with_unbounded_tail(
        cls,
        intervals: Iterable[Interval[K]],
        values: Iterable[V],
        *,
        key: KeyFunc | None = None,
    ) -> "NonContiguousRangeMap[K, V]":
        """Build a map whose last interval is 'at least X' (no upper bound).

        ``key`` works as in ``with_bounded_tail``: pass it to the interval
        builders too when it differs from the natural ordering.
        """
        return cls._build(intervals, values, UNBOUNDED, key)

    @classmethod
    def infer(
        cls,
        intervals: Iterable[Interval[K]],
        values: Iterable[V],
        *,
        key: KeyFunc | None = None,
    ) -> "NonContiguousRangeMap[K, V]":
        """Build a map, choosing the tail mode from the last interval's upper bound.

        ``key`` works as in ``with_bounded_tail``.
        """
        return cls._build(intervals, values, INFER, key)

    @classmethod
    def singleton(
        cls, interval: Interval[K], value: V, *, key: KeyFunc | None = None
    ) -> "NonContiguousRangeMap[K, V]":
        if _singleton_tail(interval) == BOUNDED:
            return cls.with_bounded_tail([interval], [value], key=key)
        return cls.with_unbounded_tail([interval], [value], key=key)

    @classmethod
    def singleton_with_no_end(
        cls, start: K, value: V, *, key: KeyFunc | None = None
    ) -> "NonContiguousRangeMap[K, V]":
        return cls.singleton(at_least(start, key=key), value, key=key)

    @property
    def values(self) -> tuple[V, ...]:
        return self._values

    def items(self) -> Iterator[tuple[Interval[K], V]]:
        """Yield (interval, value) pairs in ascending order."""
        for shape, value in zip(self._shapes, self._values):
            yield shape.to_interval(self._key), value

    def __iter__(self) -> Iterator[tuple[Interval[K], V]]:
        return self.items()

    def get_optional(self, x: K) -> V | None:
        """Return the value whose interval contains x, or None if x falls in a gap."""
        index = self.index_of(x)
        return None if index is None else self._values[index]

    def get_or_throw(self, x: K) -> V:
        """Like get_optional, but raises KeyNotFoundError when x is not covered."""
        index = self.index_of(x)
        if index is None:
            raise KeyNotFoundError(
                x,
                f"Cannot find a value for key {x!r}; it is outside every range.\n"
                f"{self._nearest_below(x)}",
            )
        return self._values[index]

    def _nearest_below(self, x: K) -> str:
        index = self._floor_index(x)
        if index is None:
            first = self._shapes[0].to_interval(self._key)
            return f"The key is below the first of {len(self)} ranges, {first}"
        below = self._shapes[index].to_interval(self._key)
        return f"Nearest range below (of {len(self)}): {below}"

    def __getitem__(self, x: K) -> V:
        return self.get_or_throw(x)

    @overload
    def get(self, x: K) -> V | None: ...

    @overload
    def get(self, x: K, default: D) -> V | D: ...

    def get(self, x: K, default: Any = None) -> Any:
        index = self.index_of(x)
        return default if index is None else self._values[index]

    def get_optional_with_highest_key_below(self, x: K) -> V | None:
        """Return the value in effect at x, carrying the last range forward over gaps.

        If x is inside a range, that range's value is returned. If x falls in the
        gap after range i, range i's value is returned. Keys below the first range
        have nothing to carry forward and return None.
        """
        index = self._floor_index(x)
        return None if index is None else self._values[index]

    @override
    def _describe(self) -> str:
        return ", ".join(f"{interval}: {value!r}" for interval, value in self.items())

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NonContiguousRangeMap):
            return NotImplemented
        return (
            self._shapes == other._shapes
            and self._values == other._values
            and self._tail == other._tail
        )

    @override
    def __hash__(self) -> int:
        return hash((self._shapes, self._values, self._tail))

    @override
    def __str__(self) -> str:
        return f"[NCRM {self._describe()} NCRM]"


class NonContiguousRangeCollection(_OrderedRanges[K]):
    """Disjoint, ascending intervals with no associated values.

    All ranges except possibly the last are closed, which is intentional for
    discrete keys: integers tile as [2, 4], [5, 7] with no gap, while doubles
    would need half-open ranges and so always leave a gap here.
    """

    __slots__ = ()

    @classmethod
    def _build(
        cls, intervals: Iterable[Interval[K]], tail: TailRule, key: KeyFunc | None
    ) -> "NonContiguousRangeCollection[K]":
        shapes, mode = validate_intervals(intervals, tail, key)
        logger.debug(
            f"Built {cls.__name__} with {len(shapes)} ranges ({mode} tail)"
        )
        return cls(_VALIDATED, shapes, mode, key)

    @classmethod
    def with_bounded_tail(
        cls, intervals: Iterable[Interval[K]], *, key: KeyFunc | None = None
    ) -> "NonContiguousRangeCollection[K]":
        return cls._build(intervals, BOUNDED, key)

    @classmethod
    def with_unbounded_tail(
        cls, intervals: Iterable[Interval[K]], *, key: KeyFunc | None = None
    ) -> "NonContiguousRangeCollection[K]":
        return cls._build(intervals, UNBOUNDED, key)

    @classmethod
    def infer(
        cls, intervals: Iterable[Interval[K]], *, key: KeyFunc | None = None
    ) -> "NonContiguousRangeCollection[K]":
        return cls._build(intervals, INFER, key)

    @classmethod
    def singleton(
        cls, interval: Interval[K], *, key: KeyFunc | None = None
    ) -> "NonContiguousRangeCollection[K]":
        return cls._build([interval], _singleton_tail(interval), key)

    @classmethod
    def singleton_with_no_end(
        cls, start: K, *, key: KeyFunc | None = None
    ) -> "NonContiguousRangeCollection[K]":
        return cls.with_unbounded_tail([at_least(start, key=key)], key=key)

    def __iter__(self) -> Iterator[Interval[K]]:
        return iter(self.intervals)

    def interval_at(self, x: K) -> Interval[K] | None:
        """The interval containing x, or None."""
        index = self.index_of(x)
        return None if index is None else self._shapes[index].to_interval(self._key)

    @override
    def _describe(self) -> str:
        return ", ".join(str(interval) for interval in self.intervals)

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NonContiguousRangeCollection):
            return NotImplemented
        return self._shapes == other._shapes and self._tail == other._tail

    @override
    def __hash__(self) -> int:
        return hash((self._shapes, self._tail))

    @override
    def __str__(self) -> str:
        return f"[NCRC {self._describe()} NCRC]"


def with_bounded_tail(
    intervals: Iterable[Interval[K]],
    values: Iterable[V],
    *,
    key: KeyFunc | None = None,
) -> NonContiguousRangeMap[K, V]:
    """Build a range map whose last interval is closed (equivalent to the classmethod)."""
    return NonContiguousRangeMap.with_bounded_tail(intervals, values, key=key)


def with_unbounded_tail(
    intervals: Iterable[Interval[K]],
    values: Iterable[V],
    *,
    key: KeyFunc | None = None,
) -> NonContiguousRangeMap[K, V]:
    """Build a range map whose last interval has no upper bound."""
    return NonContiguousRangeMap.with_unbounded_tail(intervals, values, key=key)


def infer(
    intervals: Iterable[Interval[K]],
    values: Iterable[V],
    *,
    key: KeyFunc | None = None,
) -> NonContiguousRangeMap[K, V]:
    return NonContiguousRangeMap.infer(intervals, values, key=key)


def singleton(
    interval: Interval[K], value: V, *, key: KeyFunc | None = None
) -> NonContiguousRangeMap[K, V]:
    return NonContiguousRangeMap.singleton(interval, value, key=key)
