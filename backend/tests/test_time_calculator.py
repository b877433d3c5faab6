"""
Time calculator tests.

Verifies:
- Net duration with and without the dinner block
- Ordering violations resolve to 0 instead of raising
- Regular/overtime split and the holiday override
- Half-up rounding used for stored figures
"""

import pytest

from quinzena.services.time_calculator import (
    compute_earnings,
    hours_breakdown,
    is_weekend,
    net_duration,
    parse_clock,
    round2,
    split_hours,
)


# =============================================================================
# CLOCK PARSING
# =============================================================================


class TestParseClock:
    def test_parses_minutes_since_midnight(self):
        assert parse_clock("00:00") == 0
        assert parse_clock("09:30") == 570
        assert parse_clock("23:59") == 23 * 60 + 59

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_is_none(self, value):
        assert parse_clock(value) is None

    @pytest.mark.parametrize("value", ["24:00", "12:60", "noon", "12", "ab:cd", "-1:00"])
    def test_malformed_raises(self, value):
        with pytest.raises(ValueError):
            parse_clock(value)


# =============================================================================
# NET DURATION
# =============================================================================


class TestNetDuration:
    def test_without_dinner(self):
        assert net_duration("09:00", "12:00", "13:00", None, None, "18:00") == 8

    def test_minutes_are_not_rounded(self):
        # 3h10 + 4h05 = 7h15
        assert net_duration("08:50", "12:00", "13:00", None, None, "17:05") == pytest.approx(7.25)
        # 20 minutes -> 1/3 hour, kept exact
        assert net_duration("09:00", "09:20", "09:20", None, None, "09:20") == pytest.approx(1 / 3)

    def test_with_dinner(self):
        total = net_duration("09:00", "12:00", "13:00", "20:00", "21:00", "22:00")
        assert total == 11

    @pytest.mark.parametrize("dinner_start,dinner_end", [("20:00", None), (None, "21:00"), ("", "21:00")])
    def test_single_dinner_time_voids_dinner_block(self, dinner_start, dinner_end):
        total = net_duration("09:00", "12:00", "13:00", dinner_start, dinner_end, "22:00")
        assert total == 12

    @pytest.mark.parametrize(
        "times",
        [
            ("09:00", "12:00", "11:00", None, None, "18:00"),    # lunch end before lunch start
            ("13:00", "12:00", "13:00", None, None, "18:00"),    # lunch before start
            ("09:00", "12:00", "13:00", None, None, "12:30"),    # end before lunch end
            ("09:00", "12:00", "13:00", "12:30", "21:00", "22:00"),  # dinner before lunch end
            ("09:00", "12:00", "13:00", "21:00", "20:00", "22:00"),  # dinner end before start
            ("09:00", "12:00", "13:00", "20:00", "21:00", "20:30"),  # end before dinner end
        ],
    )
    def test_ordering_violation_returns_zero(self, times):
        assert net_duration(*times) == 0

    @pytest.mark.parametrize("missing", [0, 1, 2, 5])
    def test_missing_required_time_returns_zero(self, missing):
        times = ["09:00", "12:00", "13:00", None, None, "18:00"]
        times[missing] = None
        assert net_duration(*times) == 0

    def test_equal_times_are_valid_ordering(self):
        assert net_duration("09:00", "09:00", "09:00", None, None, "09:00") == 0
        assert net_duration("09:00", "09:00", "09:00", None, None, "10:00") == 1

    @pytest.mark.parametrize(
        "start,lunch_start,lunch_end,end",
        [
            ("06:00", "10:15", "10:45", "19:30"),
            ("08:00", "08:00", "14:00", "14:00"),
            ("00:00", "11:59", "12:00", "23:59"),
        ],
    )
    def test_sum_of_segments_and_split_reconciles(self, start, lunch_start, lunch_end, end):
        def minutes(t):
            return parse_clock(t)

        expected = ((minutes(lunch_start) - minutes(start)) + (minutes(end) - minutes(lunch_end))) / 60
        total = net_duration(start, lunch_start, lunch_end, None, None, end)
        assert total == pytest.approx(expected, abs=1e-9)

        breakdown = hours_breakdown(total, 8)
        assert breakdown.regular_hours + breakdown.overtime_hours == pytest.approx(total, abs=1e-9)


# =============================================================================
# SPLIT
# =============================================================================


class TestSplit:
    def test_overtime_above_limit(self):
        breakdown = hours_breakdown(10, 8)
        assert breakdown.regular_hours == 8
        assert breakdown.overtime_hours == 2

    def test_no_overtime_below_limit(self):
        breakdown = hours_breakdown(6, 8)
        assert breakdown.regular_hours == 6
        assert breakdown.overtime_hours == 0

    @pytest.mark.parametrize("total", [0, 4, 8, 12.5])
    @pytest.mark.parametrize("limit", [4, 8, 10])
    def test_holiday_is_all_overtime(self, total, limit):
        breakdown = split_hours(total, limit, is_holiday=True)
        assert breakdown.regular_hours == 0
        assert breakdown.overtime_hours == total

    def test_non_holiday_uses_limit(self):
        breakdown = split_hours(9, 6, is_holiday=False)
        assert (breakdown.regular_hours, breakdown.overtime_hours) == (6, 3)

    def test_earnings(self):
        assert compute_earnings(8, 2, 10, 15) == 110


class TestHelpers:
    def test_round2_is_half_up(self):
        assert round2(2.675) == 2.68
        assert round2(0.125) == 0.13
        assert round2(-1.005) == -1.01
        assert round2(7.333333) == 7.33

    def test_weekend(self):
        assert is_weekend("2025-01-04")  # Saturday
        assert is_weekend("2025-01-05")  # Sunday
        assert not is_weekend("2025-01-06")  # Monday
