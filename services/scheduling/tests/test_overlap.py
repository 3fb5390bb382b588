from datetime import datetime, timedelta

import pytest

from services.scheduling.services.overlap import is_empty, overlaps

BASE = datetime(2024, 1, 15, 0, 0)


def at(minutes: int) -> datetime:
    return BASE + timedelta(minutes=minutes)


class TestOverlaps:
    @pytest.mark.parametrize(
        "a, b, expected",
        [
            ((0, 10), (5, 15), True),
            ((0, 10), (2, 8), True),
            ((0, 10), (0, 10), True),
            ((0, 10), (10, 20), False),
            ((0, 10), (20, 30), False),
            ((0, 10), (-5, 0), False),
            ((0, 30), (29, 31), True),
        ],
    )
    def test_overlap_cases(self, a, b, expected):
        assert overlaps(at(a[0]), at(a[1]), at(b[0]), at(b[1])) is expected

    @pytest.mark.parametrize(
        "a, b",
        [
            ((0, 10), (5, 15)),
            ((0, 10), (10, 20)),
            ((0, 60), (15, 30)),
            ((0, 10), (20, 30)),
            ((5, 5), (0, 10)),
        ],
    )
    def test_symmetric(self, a, b):
        assert overlaps(at(a[0]), at(a[1]), at(b[0]), at(b[1])) == overlaps(
            at(b[0]), at(b[1]), at(a[0]), at(a[1])
        )

    def test_touching_intervals_do_not_overlap(self):
        assert not overlaps(at(0), at(10), at(10), at(20))
        assert not overlaps(at(10), at(20), at(0), at(10))

    def test_interval_overlaps_itself(self):
        assert overlaps(at(0), at(10), at(0), at(10))

    def test_zero_length_interval_overlaps_nothing(self):
        assert not overlaps(at(5), at(5), at(5), at(5))
        assert not overlaps(at(5), at(5), at(0), at(10))
        assert not overlaps(at(0), at(10), at(5), at(5))

    def test_reversed_interval_is_empty(self):
        assert is_empty(at(10), at(0))
        assert not overlaps(at(10), at(0), at(0), at(10))
