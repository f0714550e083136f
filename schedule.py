from datetime import datetime, timedelta, date
from typing import List, Optional

from schemas import ScheduleSlot

# Fixed gym schedule, Monday to Friday.
# 70-minute classes with 15-minute breaks, one hour for lunch after slot 4.
DAILY_SCHEDULE: List[ScheduleSlot] = [
    ScheduleSlot(id=1, start_time="08:15", end_time="09:25", label="1-2"),
    ScheduleSlot(id=2, start_time="09:40", end_time="10:50", label="3-4"),
    ScheduleSlot(id=3, start_time="11:05", end_time="12:15", label="5-6"),
    ScheduleSlot(id=4, start_time="12:30", end_time="13:40", label="7-8"),
    ScheduleSlot(id=5, start_time="14:40", end_time="15:50", label="9-10"),
    ScheduleSlot(id=6, start_time="16:05", end_time="17:15", label="11-12"),
    ScheduleSlot(id=7, start_time="17:30", end_time="18:40", label="13-14"),
    ScheduleSlot(id=8, start_time="18:55", end_time="20:05", label="15-16"),
]


def parse_date(date_str: str) -> Optional[date]:
    """YYYY-MM-DD -> date, None when it does not parse."""
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        return None


def to_local_dt(date_str: str, time_str: str) -> datetime:
    # date: YYYY-MM-DD, time HH:MM
    y, m, d = [int(x) for x in date_str.split("-")]
    hh, mm = [int(x) for x in time_str.split(":")]
    return datetime(y, m, d, hh, mm)


def is_weekday(date_str: str) -> bool:
    d = parse_date(date_str)
    if d is None:
        return False
    return d.weekday() < 5  # Monday = 0, Friday = 4


def list_slots_for_date(date_str: str) -> List[ScheduleSlot]:
    if not is_weekday(date_str):
        return []
    return list(DAILY_SCHEDULE)


def get_schedule_slot(slot_id: int) -> Optional[ScheduleSlot]:
    return next((s for s in DAILY_SCHEDULE if s.id == slot_id), None)


def find_schedule_slot(start_time: str, end_time: str) -> Optional[ScheduleSlot]:
    return next(
        (s for s in DAILY_SCHEDULE if s.start_time == start_time and s.end_time == end_time),
        None,
    )


def format_slot_time(slot) -> str:
    return f"{slot.start_time} - {slot.end_time}"


def week_days(date_str: str) -> List[str]:
    """Monday..Friday of the week holding ``date_str`` (Sunday belongs to the week before)."""
    d = parse_date(date_str)
    if d is None:
        return []
    monday = d - timedelta(days=d.weekday())
    return [(monday + timedelta(days=i)).isoformat() for i in range(5)]


def next_weekdays(start: date, count: int = 7) -> List[str]:
    days: List[str] = []
    current = start
    while len(days) < count:
        if current.weekday() < 5:
            days.append(current.isoformat())
        current += timedelta(days=1)
    return days
