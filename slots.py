from datetime import datetime
from typing import List, Optional, Tuple

from database import Store, TIMESLOTS, BOOKINGS
from errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from schedule import parse_date, to_local_dt
from schemas import ScheduleSlot, TimeSlot, utcnow


def slot_start(slot: TimeSlot) -> datetime:
    return to_local_dt(slot.date, slot.start_time)


def partition_slots(slots: List[TimeSlot], now: Optional[datetime] = None) -> Tuple[List[TimeSlot], List[TimeSlot]]:
    """Split into (upcoming, past); upcoming soonest first, past most recent first."""
    now = now or datetime.now()
    upcoming = sorted((s for s in slots if slot_start(s) > now), key=slot_start)
    past = sorted((s for s in slots if slot_start(s) <= now), key=slot_start, reverse=True)
    return upcoming, past


class SlotManager:
    """Date-bound, teacher-owned instances of the daily schedule."""

    def __init__(self, store: Store):
        self.store = store

    def get_slot(self, slot_id: str) -> TimeSlot:
        doc = self.store.get_document(TIMESLOTS, slot_id)
        if not doc:
            raise NotFoundError("Time slot not found")
        return TimeSlot(**doc)

    def list_slots(
        self,
        date: Optional[str] = None,
        teacher_id: Optional[str] = None,
        available_only: bool = False,
    ) -> List[TimeSlot]:
        filt = {}
        if date:
            day = parse_date(date)
            filt["date"] = day.isoformat() if day else date
        if teacher_id:
            filt["teacher_id"] = teacher_id
        if available_only:
            filt["is_available"] = True
        docs = self.store.get_documents(TIMESLOTS, filt, sort=[("date", 1), ("start_time", 1)])
        return [TimeSlot(**d) for d in docs]

    def list_teacher_slots(self, teacher_id: str) -> List[TimeSlot]:
        return self.list_slots(teacher_id=teacher_id)

    def booked_count(self, slot_id: str) -> int:
        return self.store.count_documents(BOOKINGS, {"time_slot_id": slot_id, "status": "active"})

    def _owned_slot(self, slot_id: str, teacher_id: Optional[str]) -> TimeSlot:
        slot = self.get_slot(slot_id)
        if teacher_id is not None and slot.teacher_id != teacher_id:
            raise ForbiddenError("Time slot belongs to another teacher")
        return slot

    def create_or_update_slot(
        self,
        teacher_id: str,
        date: str,
        schedule_slot: ScheduleSlot,
        capacity: int,
        slot_id: Optional[str] = None,
    ) -> TimeSlot:
        day = parse_date(date)
        if day is None or day.weekday() > 4:
            raise ValidationError("Gym slots are only available Monday through Friday")
        # "2030-1-7" and "2030-01-07" are the same day
        date = day.isoformat()

        editing = self._owned_slot(slot_id, teacher_id) if slot_id else None

        existing = self.store.find_document(TIMESLOTS, {
            "teacher_id": teacher_id,
            "date": date,
            "start_time": schedule_slot.start_time,
            "end_time": schedule_slot.end_time,
        })
        if existing and (editing is None or existing["id"] != editing.id):
            raise ConflictError("A time slot already exists for this date and time")

        if editing is not None:
            booked = self.booked_count(editing.id)
            moved = (editing.date, editing.start_time, editing.end_time) != (
                date, schedule_slot.start_time, schedule_slot.end_time)
            if moved and booked:
                raise ConflictError("A time slot with active bookings cannot be moved")
            if capacity < booked:
                raise ConflictError(f"Capacity cannot drop below the {booked} active bookings")

        slot = TimeSlot(
            id=editing.id if editing else self.store.new_id(),
            date=date,
            start_time=schedule_slot.start_time,
            end_time=schedule_slot.end_time,
            capacity=capacity,
            is_available=editing.is_available if editing else True,
            teacher_id=teacher_id,
            created_at=editing.created_at if editing else utcnow(),
        )
        self.store.save_document(TIMESLOTS, slot)
        print(f"[SLOT] {'Updated' if editing else 'Created'} {slot.id} {date} {schedule_slot.start_time}-{schedule_slot.end_time} cap={capacity}")
        return slot

    def set_availability(self, slot_id: str, available: bool, teacher_id: Optional[str] = None) -> TimeSlot:
        slot = self._owned_slot(slot_id, teacher_id)
        slot = slot.model_copy(update={"is_available": available})
        self.store.save_document(TIMESLOTS, slot)
        print(f"[SLOT] {'Opened' if available else 'Closed'} {slot.id}")
        return slot

    def delete_slot(self, slot_id: str, teacher_id: Optional[str] = None) -> None:
        slot = self._owned_slot(slot_id, teacher_id)
        if self.booked_count(slot.id) > 0:
            raise ConflictError("This time slot has active bookings and cannot be deleted")
        self.store.delete_document(TIMESLOTS, slot.id)
        print(f"[SLOT] Deleted {slot.id}")
