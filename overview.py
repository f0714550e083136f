"""
Usage aggregates for the admin dashboard and the teacher booking overview.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from bookings import BookingManager
from database import Store, BOOKINGS
from schemas import Booking
from slots import SlotManager, partition_slots, slot_start
from users import list_users, users_by_role


def system_overview(store: Store, now: Optional[datetime] = None, recent: int = 10) -> Dict[str, Any]:
    now = now or datetime.now()
    slots = {s.id: s for s in SlotManager(store).list_slots()}
    bookings = [Booking(**d) for d in store.get_documents(BOOKINGS)]
    grouped = users_by_role(store)

    upcoming, _ = partition_slots(list(slots.values()), now)
    upcoming_ids = {s.id for s in upcoming}
    active = [b for b in bookings if b.status == "active"]
    total_capacity = sum(s.capacity for s in upcoming)
    booked_spots = sum(1 for b in active if b.time_slot_id in upcoming_ids)
    utilization_rate = round(booked_spots / total_capacity * 100) if total_capacity > 0 else 0

    # bookings whose slot was removed are skipped
    recent_rows = []
    for b in sorted(bookings, key=lambda b: b.created_at, reverse=True)[:recent]:
        slot = slots.get(b.time_slot_id)
        if slot is None:
            continue
        recent_rows.append({"booking": b, "slot": slot})

    return {
        "users": {role: len(rows) for role, rows in grouped.items()},
        "total_slots": len(slots),
        "upcoming_slots": len(upcoming),
        "active_bookings": len(active),
        "total_capacity": total_capacity,
        "booked_spots": booked_spots,
        "utilization_rate": utilization_rate,
        "recent_bookings": recent_rows,
    }


def teacher_overview(store: Store, teacher_id: str, now: Optional[datetime] = None, limit: int = 10) -> Dict[str, Any]:
    now = now or datetime.now()
    slot_manager = SlotManager(store)
    booking_manager = BookingManager(store)
    names = {u.id: u.name for u in list_users(store)}

    upcoming, _ = partition_slots(slot_manager.list_teacher_slots(teacher_id), now)
    total_active = 0
    rows = []
    for i, slot in enumerate(upcoming):
        slot_bookings = booking_manager.active_bookings_for_slot(slot.id)
        total_active += len(slot_bookings)
        if i >= limit:
            continue
        rows.append({
            "slot": slot,
            "booked": len(slot_bookings),
            "students": [names.get(b.student_id, "Unknown Student") for b in slot_bookings],
        })

    return {
        "upcoming_slots": len(upcoming),
        "total_active_bookings": total_active,
        "next_slot": slot_start(upcoming[0]).isoformat() if upcoming else None,
        "slots": rows,
    }
