from datetime import datetime
from typing import List, Optional, Tuple

from database import Store, BOOKINGS
from errors import (
    AlreadyBookedError, AlreadyCancelledError, CapacityError, ConflictError,
    ForbiddenError, NotFoundError, ValidationError,
)
from schedule import to_local_dt
from schemas import Booking, TimeSlot, utcnow


class BookingManager:
    """Seat reservations on slot instances. Bookings are cancelled, never deleted."""

    def __init__(self, store: Store):
        self.store = store

    def get_booking(self, booking_id: str) -> Booking:
        doc = self.store.get_document(BOOKINGS, booking_id)
        if not doc:
            raise NotFoundError("Booking not found")
        return Booking(**doc)

    def active_bookings_for_slot(self, slot_id: str) -> List[Booking]:
        docs = self.store.get_documents(
            BOOKINGS, {"time_slot_id": slot_id, "status": "active"}, sort=[("created_at", 1)])
        return [Booking(**d) for d in docs]

    def active_count(self, slot_id: str) -> int:
        return self.store.count_documents(BOOKINGS, {"time_slot_id": slot_id, "status": "active"})

    def is_full(self, slot: TimeSlot) -> bool:
        return self.active_count(slot.id) >= slot.capacity

    def find_active(self, student_id: str, slot_id: str) -> Optional[Booking]:
        doc = self.store.find_document(
            BOOKINGS, {"student_id": student_id, "time_slot_id": slot_id, "status": "active"})
        return Booking(**doc) if doc else None

    def bookings_for_student(self, student_id: str) -> Tuple[List[Booking], List[Booking]]:
        """(active, cancelled) bookings of a student, newest first."""
        docs = self.store.get_documents(BOOKINGS, {"student_id": student_id}, sort=[("created_at", -1)])
        rows = [Booking(**d) for d in docs]
        active = [b for b in rows if b.status == "active"]
        cancelled = [b for b in rows if b.status == "cancelled"]
        return active, cancelled

    def book(self, student_id: str, time_slot: TimeSlot, now: Optional[datetime] = None) -> Booking:
        now = now or datetime.now()
        if to_local_dt(time_slot.date, time_slot.end_time) < now:
            raise ValidationError("This time slot has already ended")
        if not time_slot.is_available:
            raise ConflictError("This time slot is closed for booking")
        if self.is_full(time_slot):
            raise CapacityError("This time slot is full")
        if self.find_active(student_id, time_slot.id):
            raise AlreadyBookedError("You already booked this time slot")

        booking = Booking(
            id=self.store.new_id(),
            student_id=student_id,
            time_slot_id=time_slot.id,
            status="active",
            created_at=utcnow(),
        )
        self.store.save_document(BOOKINGS, booking)
        print(f"[BOOKING] {student_id} booked {time_slot.date} {time_slot.start_time}-{time_slot.end_time}")
        return booking

    def cancel(self, booking: Booking, student_id: Optional[str] = None) -> Booking:
        if student_id is not None and booking.student_id != student_id:
            raise ForbiddenError("Booking belongs to another student")
        if booking.status != "active":
            raise AlreadyCancelledError("Booking is already cancelled")

        booking = booking.model_copy(update={"status": "cancelled", "cancelled_at": utcnow()})
        self.store.save_document(BOOKINGS, booking)
        print(f"[BOOKING] Cancelled {booking.id}")
        return booking
