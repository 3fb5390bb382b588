"""
Interval overlap predicate.

All busy intervals are half-open: ``[start, end)``. Every component that needs
to know whether two time ranges collide calls ``overlaps``; nothing else
re-derives the comparison.
"""

from datetime import datetime


def is_empty(start: datetime, end: datetime) -> bool:
    """An interval with ``start >= end`` covers no instant."""
    return not start < end


def overlaps(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """
    Return True if ``[a_start, a_end)`` and ``[b_start, b_end)`` intersect.

    Touching intervals (``a_end == b_start``) do not overlap. An empty
    interval (zero-length, or with its bounds reversed) never overlaps
    anything, itself included.
    """
    if is_empty(a_start, a_end) or is_empty(b_start, b_end):
        return False
    return a_start < b_end and b_start < a_end
