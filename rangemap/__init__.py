from .core import (
    NonContiguousRangeCollection,
    NonContiguousRangeMap,
    infer,
    singleton,
    with_bounded_tail,
    with_unbounded_tail,
)
from .errors import (
    EmptyRangeMapError,
    InvalidIntervalShapeError,
    KeyNotFoundError,
    OutOfOrderError,
    RangeMapError,
    SizeMismatchError,
)
from .interval import (
    Bound,
    Closed,
    Interval,
    LowerOnly,
    all_keys,
    at_least,
    at_most,
    closed,
    greater_than,
    less_than,
    open_interval,
    point,
)
from .util import BOUNDED, INFER, UNBOUNDED

__all__ = [
    "NonContiguousRangeMap",
    "NonContiguousRangeCollection",
    "with_bounded_tail",
    "with_unbounded_tail",
    "infer",
    "singleton",
    "Interval",
    "Bound",
    "Closed",
    "LowerOnly",
    "closed",
    "at_least",
    "point",
    "open_interval",
    "greater_than",
    "at_most",
    "less_than",
    "all_keys",
    "RangeMapError",
    "SizeMismatchError",
    "EmptyRangeMapError",
    "InvalidIntervalShapeError",
    "OutOfOrderError",
    "KeyNotFoundError",
    "BOUNDED",
    "UNBOUNDED",
    "INFER",
]
