"""
Module: test_timefmt.py
Description: Unit tests for timestamp formatting.
"""

import time
from datetime import datetime, timedelta, timezone

import pytest

from sparkle_relay.utils.timefmt import format_timestamp, now_millis


def millis(*args, tz=timezone.utc) -> int:
    return int(datetime(*args, tzinfo=tz).timestamp() * 1000)


class TestFormatTimestamp:

    @pytest.mark.parametrize("moment,expected", [
        ((2024, 1, 15, 15, 4, 5), "1/15/24 3:04:05 PM"),
        ((2024, 1, 15, 0, 0, 0), "1/15/24 12:00:00 AM"),
        ((2024, 12, 31, 12, 30, 9), "12/31/24 12:30:09 PM"),
        ((2009, 7, 4, 9, 5, 59), "7/4/09 9:05:59 AM"),
    ])
    def test_short_date_medium_time(self, moment, expected):
        assert format_timestamp(millis(*moment), timezone.utc) == expected

    def test_renders_in_given_zone(self):
        eastern = timezone(timedelta(hours=-5))
        assert format_timestamp(millis(2024, 1, 15, 15, 4, 5), eastern) == "1/15/24 10:04:05 AM"

    def test_sub_second_precision_is_dropped(self):
        assert format_timestamp(millis(2024, 1, 15, 15, 4, 5) + 999, timezone.utc) == "1/15/24 3:04:05 PM"


class TestNowMillis:

    def test_close_to_wall_clock(self):
        assert abs(now_millis() - int(time.time() * 1000)) < 1_000
