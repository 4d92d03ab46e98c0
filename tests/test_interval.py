"""Tests for Interval bounds, shape predicates, and builders."""

import pytest

from rangemap import (
    Bound,
    Interval,
    InvalidIntervalShapeError,
    all_keys,
    at_least,
    at_most,
    closed,
    greater_than,
    less_than,
    open_interval,
    point,
)


def test_closed_interval_includes_both_endpoints():
    """Both boundary values satisfy a closed interval."""
    interval = closed(1.5, 2.5)

    assert interval.contains(1.5)
    assert interval.contains(2.5)
    assert 2.0 in interval
    assert not interval.contains(1.4999)
    assert not interval.contains(2.5001)


def test_bounds_checked_independently():
    """Lower and upper checks are separate questions."""
    interval = closed(10, 20)

    assert interval.satisfies_lower(25)
    assert not interval.satisfies_upper(25)
    assert interval.satisfies_upper(5)
    assert not interval.satisfies_lower(5)


def test_exclusive_bounds():
    """Open bounds exclude their endpoint values."""
    interval = open_interval(1, 3)

    assert not interval.contains(1)
    assert interval.contains(2)
    assert not interval.contains(3)


def test_missing_bounds_are_unbounded():
    """A missing bound is satisfied by every key."""
    assert at_least(5).satisfies_upper(10**12)
    assert at_most(5).satisfies_lower(-(10**12))
    assert all_keys().contains(0)
    assert greater_than(5).contains(6)
    assert not greater_than(5).contains(5)
    assert less_than(5).contains(4)
    assert not less_than(5).contains(5)


def test_point_interval():
    """A single-point interval matches exactly one key."""
    interval = point(7)

    assert interval.contains(7)
    assert not interval.contains(6)
    assert not interval.contains(8)
    assert interval.is_closed


def test_lower_greater_than_upper_rejected():
    """Reversed bounds fail at construction."""
    with pytest.raises(InvalidIntervalShapeError, match="must be <="):
        closed(5, 1)


def test_empty_open_interval_rejected():
    """Equal endpoints with an exclusive bound describe an empty set."""
    with pytest.raises(InvalidIntervalShapeError, match="is empty"):
        Interval(lower=Bound(3, inclusive=False), upper=Bound(3))


def test_shape_predicates():
    """Only closed and 'at least' shapes are legal in a range map."""
    assert closed(1, 2).is_closed
    assert not closed(1, 2).is_lower_only
    assert at_least(1).is_lower_only
    assert not at_least(1).is_closed
    assert not greater_than(1).is_lower_only
    assert not open_interval(1, 2).is_closed
    assert not at_most(1).is_closed
    assert not all_keys().is_bounded
    assert closed(1, 2).is_bounded


def test_key_projection():
    """A key function replaces natural ordering for comparisons."""
    # Descending order: 10 comes "before" 8
    interval = closed(10, 8, key=lambda x: -x)

    assert interval.contains(9)
    assert not interval.contains(11)
    assert not interval.contains(7)


def test_string_form():
    """Intervals render in bracket notation."""
    assert str(closed(1, 5)) == "[1, 5]"
    assert str(at_least(3)) == "[3, +inf)"
    assert str(open_interval(2, 4)) == "(2, 4)"
    assert str(at_most(9)) == "(-inf, 9]"


def test_key_not_part_of_equality():
    """Intervals compare by bounds only."""
    assert closed(1, 2) == closed(1, 2, key=lambda x: x)
