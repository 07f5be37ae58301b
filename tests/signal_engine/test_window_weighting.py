"""
Tests for window arithmetic, decay, date parsing and source weighting.
"""

from datetime import datetime, timedelta, timezone

import pytest

from signal_engine.weighting import SOURCE_WEIGHTS, resolve_source, weight_for_source
from signal_engine.window import (
    TimeWindow,
    compute_start_of_day,
    compute_window_minutes,
    decay_weight,
    linear_time_decay,
    parse_published,
    round_half_up,
    within_window,
)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


# =============================================================
# WINDOW
# =============================================================

class TestStartOfDay:
    """Test offset-aware local midnight."""

    def test_utc(self):
        now = utc(2024, 1, 1, 5, 30)

        start = compute_start_of_day(now, 0)

        assert start == utc(2024, 1, 1, 0, 0)
        assert compute_window_minutes(now, start) == 330

    def test_positive_offset_crosses_date(self):
        # 20:00Z is already 05:00 the next day at +09:00
        now = utc(2024, 1, 1, 20, 0)

        start = compute_start_of_day(now, 540)

        assert start == utc(2024, 1, 1, 15, 0)
        assert compute_window_minutes(now, start) == 300

    def test_negative_offset(self):
        now = utc(2024, 1, 1, 3, 0)

        start = compute_start_of_day(now, -300)

        assert start == utc(2023, 12, 31, 5, 0)
        assert compute_window_minutes(now, start) == 1320

    def test_window_at_least_one_minute(self):
        now = utc(2024, 1, 1, 0, 0, 10)
        assert compute_window_minutes(now, compute_start_of_day(now, 0)) == 1

    def test_non_finite_offset_is_zero(self):
        now = utc(2024, 1, 1, 5, 30)
        assert compute_start_of_day(now, float("nan")) == utc(2024, 1, 1)

    def test_time_window(self):
        window = TimeWindow.for_now(utc(2024, 1, 1, 5, 30), 0)

        assert window.minutes == 330
        assert window.contains(utc(2024, 1, 1, 0, 0))
        assert not window.contains(utc(2023, 12, 31, 23, 59))
        assert not window.contains(utc(2024, 1, 1, 5, 31))
        assert not window.contains(None)


class TestRoundHalfUp:

    @pytest.mark.parametrize("value,expected", [
        (330.5, 331),
        (12.5, 13),
        (0.49, 0),
        (66.666, 67),
    ])
    def test_round(self, value, expected):
        assert round_half_up(value) == expected


# =============================================================
# DECAY
# =============================================================

class TestDecay:
    """Test linear time decay."""

    def test_fresh_item_full_weight(self):
        assert linear_time_decay(0, 330) == 1.0

    def test_window_edge_keeps_floor(self):
        assert linear_time_decay(330, 330) == pytest.approx(0.7)

    def test_midpoint(self):
        assert linear_time_decay(165, 330) == pytest.approx(0.85)

    def test_clamped_beyond_window(self):
        assert linear_time_decay(1000, 330) == pytest.approx(0.7)
        assert linear_time_decay(-5, 330) == 1.0

    def test_zero_window_treated_as_one_minute(self):
        assert linear_time_decay(0.5, 0) == pytest.approx(0.85)

    def test_monotonic_within_bounds(self):
        values = [linear_time_decay(m, 330) for m in range(0, 331, 10)]

        assert all(0.7 <= v <= 1.0 for v in values)
        assert values == sorted(values, reverse=True)

    def test_zero_outside_window(self):
        now = utc(2024, 1, 1, 5, 30)

        assert decay_weight(now + timedelta(minutes=1), now, 330) == 0.0
        assert decay_weight(now - timedelta(minutes=331), now, 330) == 0.0
        assert decay_weight(now - timedelta(minutes=30), now, 330) == pytest.approx(
            1 - 0.3 * 30 / 330
        )

    def test_within_window_bounds_inclusive(self):
        now = utc(2024, 1, 1, 5, 30)

        assert within_window(now, now, 330)
        assert within_window(now - timedelta(minutes=330), now, 330)


# =============================================================
# DATE PARSING
# =============================================================

class TestParsePublished:

    @pytest.mark.parametrize("raw", [
        "Mon, 01 Jan 2024 05:00:00 GMT",
        "Mon, 01 Jan 2024 05:00:00 +0000",
        "2024-01-01T05:00:00Z",
        "2024-01-01T05:00:00.000Z",
        "2024-01-01T14:00:00+09:00",
    ])
    def test_formats(self, raw):
        assert parse_published(raw) == utc(2024, 1, 1, 5, 0)

    def test_naive_is_utc(self):
        assert parse_published(datetime(2024, 1, 1, 5, 0)) == utc(2024, 1, 1, 5, 0)

    @pytest.mark.parametrize("raw", [None, "", "garbage", "32/13/2024", 12345])
    def test_invalid(self, raw):
        assert parse_published(raw) is None


# =============================================================
# WEIGHTING
# =============================================================

class TestResolveSource:
    """Test publisher name priority."""

    def test_creator_first(self):
        assert resolve_source("  Jane Doe ", "CoinDesk", "https://x.com/a") == "Jane Doe"

    def test_source_string(self):
        assert resolve_source("", "CoinDesk", "https://x.com/a") == "CoinDesk"

    def test_source_mapping_title(self):
        source = {"title": "Reuters", "href": "https://www.reuters.com"}
        assert resolve_source(None, source, "https://x.com/a") == "Reuters"

    def test_hostname_fallback(self):
        assert resolve_source(None, None, "https://www.example.com/a") == "example.com"

    def test_unknown(self):
        assert resolve_source(None, {}, "not a url") == "Unknown"


class TestWeightForSource:

    def test_listed(self):
        assert weight_for_source("Reuters") == 1.3
        assert weight_for_source(" CoinDesk ") == 1.15

    def test_unlisted_default(self):
        assert weight_for_source("example.com") == 1.0
        assert weight_for_source("reuters") == 1.0

    def test_table_contents(self):
        assert SOURCE_WEIGHTS["WSJ"] == SOURCE_WEIGHTS["The Wall Street Journal"] == 1.2
        assert SOURCE_WEIGHTS["The Block"] == 1.1

    def test_custom_table(self):
        assert weight_for_source("Blog", {"Blog": 0.5}) == 0.5
