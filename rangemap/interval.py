from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeAlias, TypeVar

from rangemap.errors import InvalidIntervalShapeError
from rangemap.util import NEG_INF, POS_INF

K = TypeVar("K")

KeyFunc: TypeAlias = Callable[[Any], Any]


def ordered(value: Any, key: KeyFunc | None) -> Any:
    """Project a value onto the ordering used for comparisons."""
    return value if key is None else key(value)


@dataclass(frozen=True)
class Bound(Generic[K]):
    value: K
    inclusive: bool = True


@dataclass(frozen=True, kw_only=True)
class Interval(Generic[K]):
    """One interval over an ordered key type.

    Each bound is optional; a missing bound extends to infinity on that side.
    ``key`` is an optional projection used in place of the natural ordering of
    the bound values (see ``functools.cmp_to_key`` for comparator functions).
    """

    lower: Bound[K] | None = None
    upper: Bound[K] | None = None
    key: KeyFunc | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.lower is None or self.upper is None:
            return
        lo = ordered(self.lower.value, self.key)
        hi = ordered(self.upper.value, self.key)
        if lo > hi:
            raise InvalidIntervalShapeError(
                f"Interval lower bound ({self.lower.value!r}) must be <= "
                f"upper bound ({self.upper.value!r})"
            )
        if not lo < hi and not (self.lower.inclusive and self.upper.inclusive):
            raise InvalidIntervalShapeError(
                f"Interval {self} is empty: a single-point interval must be "
                f"inclusive on both ends.\n"
                f"Hint: use point({self.lower.value!r})"
            )

    @property
    def is_closed(self) -> bool:
        """True if both bounds are present and inclusive."""
        return (
            self.lower is not None
            and self.lower.inclusive
            and self.upper is not None
            and self.upper.inclusive
        )

    @property
    def is_lower_only(self) -> bool:
        """True if only an inclusive lower bound is present ('at least X')."""
        return self.lower is not None and self.lower.inclusive and self.upper is None

    @property
    def is_bounded(self) -> bool:
        return self.lower is not None and self.upper is not None

    def satisfies_lower(self, x: K) -> bool:
        if self.lower is None:
            return True
        lo = ordered(self.lower.value, self.key)
        probe = ordered(x, self.key)
        return lo <= probe if self.lower.inclusive else lo < probe

    def satisfies_upper(self, x: K) -> bool:
        if self.upper is None:
            return True
        hi = ordered(self.upper.value, self.key)
        probe = ordered(x, self.key)
        return probe <= hi if self.upper.inclusive else probe < hi

    def contains(self, x: K) -> bool:
        return self.satisfies_lower(x) and self.satisfies_upper(x)

    def __contains__(self, x: K) -> bool:
        return self.contains(x)

    def __str__(self) -> str:
        if self.lower is None:
            left = f"({NEG_INF}"
        else:
            left = ("[" if self.lower.inclusive else "(") + str(self.lower.value)
        if self.upper is None:
            right = f"{POS_INF})"
        else:
            right = str(self.upper.value) + ("]" if self.upper.inclusive else ")")
        return f"{left}, {right}"


@dataclass(frozen=True)
class Closed(Generic[K]):
    """Validated interval with both bounds present and inclusive."""

    lo: K
    hi: K

    def to_interval(self, key: KeyFunc | None = None) -> Interval[K]:
        return closed(self.lo, self.hi, key=key)


@dataclass(frozen=True)
class LowerOnly(Generic[K]):
    """Validated interval covering everything from ``lo`` upward."""

    lo: K

    def to_interval(self, key: KeyFunc | None = None) -> Interval[K]:
        return at_least(self.lo, key=key)


Shape: TypeAlias = Closed[Any] | LowerOnly[Any]


def closed(lo: K, hi: K, *, key: KeyFunc | None = None) -> Interval[K]:
    """[lo, hi]"""
    return Interval(lower=Bound(lo), upper=Bound(hi), key=key)


def at_least(lo: K, *, key: KeyFunc | None = None) -> Interval[K]:
    """[lo, +inf)"""
    return Interval(lower=Bound(lo), key=key)


def point(x: K, *, key: KeyFunc | None = None) -> Interval[K]:
    """[x, x]"""
    return closed(x, x, key=key)


def open_interval(lo: K, hi: K, *, key: KeyFunc | None = None) -> Interval[K]:
    """(lo, hi)"""
    return Interval(
        lower=Bound(lo, inclusive=False), upper=Bound(hi, inclusive=False), key=key
    )


def greater_than(lo: K, *, key: KeyFunc | None = None) -> Interval[K]:
    """(lo, +inf)"""
    return Interval(lower=Bound(lo, inclusive=False), key=key)


def at_most(hi: K, *, key: KeyFunc | None = None) -> Interval[K]:
    """(-inf, hi]"""
    return Interval(upper=Bound(hi), key=key)


def less_than(hi: K, *, key: KeyFunc | None = None) -> Interval[K]:
    """(-inf, hi)"""
    return Interval(upper=Bound(hi, inclusive=False), key=key)


def all_keys(*, key: KeyFunc | None = None) -> Interval[Any]:
    """(-inf, +inf)"""
    return Interval(key=key)
