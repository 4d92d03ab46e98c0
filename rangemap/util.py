"""Utility constants for rangemap.

Tail modes name the two legal shapes of the last interval in a range map,
plus the inferring mode that picks one of them from the input.
"""

from typing import Literal, TypeAlias

TailMode: TypeAlias = Literal["bounded", "unbounded"]
TailRule: TypeAlias = Literal["bounded", "unbounded", "infer"]

# Tail modes
BOUNDED: TailMode = "bounded"
UNBOUNDED: TailMode = "unbounded"
INFER: TailRule = "infer"

# Markers used when rendering intervals
NEG_INF = "-inf"
POS_INF = "+inf"
