from datetime import date

from schedule import (
    DAILY_SCHEDULE, find_schedule_slot, format_slot_time, is_weekday,
    list_slots_for_date, next_weekdays, week_days,
)


def test_catalog_has_eight_windows_in_order():
    assert [s.id for s in DAILY_SCHEDULE] == list(range(1, 9))
    assert DAILY_SCHEDULE[0].start_time == "08:15"
    assert DAILY_SCHEDULE[-1].end_time == "20:05"
    starts = [s.start_time for s in DAILY_SCHEDULE]
    assert starts == sorted(starts)


def test_weekday_returns_full_catalog():
    assert len(list_slots_for_date("2024-01-08")) == 8  # Monday
    assert len(list_slots_for_date("2024-01-12")) == 8  # Friday


def test_weekend_returns_nothing():
    assert list_slots_for_date("2024-01-06") == []  # Saturday
    assert list_slots_for_date("2024-01-07") == []  # Sunday


def test_invalid_dates_fail_closed():
    assert list_slots_for_date("not-a-date") == []
    assert list_slots_for_date("2024-02-30") == []
    assert is_weekday("") is False


def test_lookup_and_format():
    slot = find_schedule_slot("14:40", "15:50")
    assert slot.label == "9-10"
    assert format_slot_time(slot) == "14:40 - 15:50"
    assert find_schedule_slot("14:40", "15:00") is None


def test_week_days_from_sunday_uses_previous_week():
    assert week_days("2024-01-07") == [
        "2024-01-01", "2024-01-02", "2024-01-03", "2024-01-04", "2024-01-05",
    ]
    assert week_days("2024-01-10")[0] == "2024-01-08"


def test_next_weekdays_skips_weekend():
    days = next_weekdays(date(2024, 1, 5), 3)  # Friday
    assert days == ["2024-01-05", "2024-01-08", "2024-01-09"]
