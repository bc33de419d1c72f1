"""
Tests pour la fenetre de recalcul (calendrier civil, backfill permissif).
"""
from datetime import date, datetime, timezone

import pytest

from teamfuel.domain.services.recalc_window import (
    coerce_backfill_days,
    local_today,
    resolve_window,
)


class TestLocalToday:
    def test_tokyo_is_ahead_of_utc(self):
        """16:00 UTC = 01:00 le lendemain a Tokyo."""
        now = datetime(2026, 3, 10, 16, 0, tzinfo=timezone.utc)
        assert local_today("Asia/Tokyo", now) == date(2026, 3, 11)

    def test_naive_datetime_is_utc(self):
        now = datetime(2026, 3, 10, 14, 59)
        assert local_today("Asia/Tokyo", now) == date(2026, 3, 10)


class TestResolveWindow:
    def test_ends_yesterday(self):
        now = datetime(2026, 3, 15, 3, 0, tzinfo=timezone.utc)
        window = resolve_window(1, "Asia/Tokyo", now)
        assert window.end_date == date(2026, 3, 14)
        assert window.start_date == date(2026, 3, 14)
        assert window.dates() == [date(2026, 3, 14)]

    def test_backfill_30_days(self):
        now = datetime(2026, 3, 15, 3, 0, tzinfo=timezone.utc)
        window = resolve_window(30, "Asia/Tokyo", now)
        assert window.start_date == date(2026, 2, 13)
        assert window.days == 30
        assert window.dates()[0] == window.start_date
        assert window.dates()[-1] == window.end_date

    def test_load_start_covers_14_day_window(self):
        now = datetime(2026, 3, 15, 3, 0, tzinfo=timezone.utc)
        window = resolve_window(3, "Asia/Tokyo", now)
        assert window.start_date == date(2026, 3, 12)
        assert window.load_start == date(2026, 2, 27)

    def test_crosses_month_and_leap_day(self):
        now = datetime(2028, 3, 1, 12, 0, tzinfo=timezone.utc)
        window = resolve_window(2, "Asia/Tokyo", now)
        assert window.end_date == date(2028, 2, 29)
        assert window.start_date == date(2028, 2, 28)

    def test_dst_timezone_uses_calendar_days(self):
        """Passage a l'heure d'ete : 14 dates distinctes, pas de decalage."""
        now = datetime(2026, 3, 9, 12, 0, tzinfo=timezone.utc)
        window = resolve_window(14, "America/New_York", now)
        dates = window.dates()
        assert len(set(dates)) == 14
        assert dates[-1] == date(2026, 3, 8)


class TestCoerceBackfillDays:
    @pytest.mark.parametrize("value, expected", [
        (None, 30),
        (7, 7),
        ("14", 14),
        (2.9, 2),
        (0, 1),
        (-5, 30),
        ("abc", 30),
        (float("nan"), 30),
        (float("inf"), 30),
        (True, 30),
        ([], 30),
        (10 ** 400, 30),
        ("1e400", 30),
    ])
    def test_coercion(self, value, expected):
        assert coerce_backfill_days(value) == expected

    def test_custom_default(self):
        assert coerce_backfill_days(None, default=10) == 10

    def test_maximum_clamps(self):
        assert coerce_backfill_days(1000, maximum=366) == 366
