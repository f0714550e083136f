from datetime import datetime
from typing import Any, Dict, List, Optional

from bookings import BookingManager
from database import Store
from schedule import DAILY_SCHEDULE, to_local_dt, week_days
from slots import SlotManager


def weekly_grid(
    store: Store,
    week_of: str,
    now: Optional[datetime] = None,
    teacher_id: Optional[str] = None,
    student_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Monday..Friday x daily schedule grid for the week holding ``week_of``.

    Teachers see their own slots (open or closed); everyone else sees the
    open slots of all teachers. A window with several teachers shows the
    first one by creation order.
    """
    now = now or datetime.now()
    days = week_days(week_of)
    slot_manager = SlotManager(store)
    booking_manager = BookingManager(store)

    by_day = {
        day: slot_manager.list_slots(date=day, teacher_id=teacher_id, available_only=teacher_id is None)
        for day in days
    }

    rows: List[Dict[str, Any]] = []
    for schedule_slot in DAILY_SCHEDULE:
        cells = []
        for day in days:
            candidates = [
                s for s in by_day[day]
                if s.start_time == schedule_slot.start_time and s.end_time == schedule_slot.end_time
            ]
            candidates.sort(key=lambda s: s.created_at)
            slot = candidates[0] if candidates else None
            cell: Dict[str, Any] = {
                "date": day,
                "past": to_local_dt(day, schedule_slot.end_time) < now,
                "slot": slot,
                "booked": 0,
                "full": False,
                "booked_by_student": False,
            }
            if slot is not None:
                booked = booking_manager.active_count(slot.id)
                cell["booked"] = booked
                cell["full"] = booked >= slot.capacity
                if student_id:
                    cell["booked_by_student"] = booking_manager.find_active(student_id, slot.id) is not None
            cells.append(cell)
        rows.append({"schedule_slot": schedule_slot, "cells": cells})

    return {"week": days, "rows": rows}
