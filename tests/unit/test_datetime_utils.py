"""Unit tests for date and age helpers."""

from datetime import date, datetime, timedelta, timezone

import pytest
from libs.common.datetime_utils import as_utc, calculate_age, is_minor, latest, utc_now


@pytest.mark.unit
class TestAges:
    def test_birthday_not_yet_reached(self):
        assert calculate_age(date(2010, 6, 2), today=date(2025, 6, 1)) == 14

    def test_on_birthday(self):
        assert calculate_age(date(2010, 6, 1), today=date(2025, 6, 1)) == 15

    def test_minor_boundary(self):
        today = date(2025, 6, 1)
        assert is_minor(date(2007, 6, 2), today) is True
        assert is_minor(date(2007, 6, 1), today) is False
        assert is_minor(None, today) is False


@pytest.mark.unit
class TestTimestamps:
    def test_utc_now_is_aware(self):
        assert utc_now().tzinfo is not None

    def test_naive_values_are_treated_as_utc(self):
        naive = datetime(2025, 1, 1, 12, 0)
        assert as_utc(naive) == datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_latest_ignores_none_and_mixes_naive(self):
        aware = datetime(2025, 1, 2, tzinfo=timezone.utc)
        naive = datetime(2025, 1, 1)
        assert latest(None, naive, aware) == aware
        assert latest(None, None) is None

    def test_latest_converts_offsets(self):
        plus_two = timezone(timedelta(hours=2))
        later = datetime(2025, 1, 1, 13, 0, tzinfo=plus_two)  # 11:00 UTC
        earlier = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert latest(later, earlier) == earlier
