from datetime import datetime

import pytest

from bookings import BookingManager
from database import BOOKINGS
from errors import (
    AlreadyBookedError, AlreadyCancelledError, CapacityError, ConflictError,
    ForbiddenError, NotFoundError, ValidationError,
)
from schedule import get_schedule_slot
from slots import SlotManager

from conftest import MONDAY


@pytest.fixture
def slot(store, teacher, first_window):
    return SlotManager(store).create_or_update_slot(teacher.id, MONDAY, first_window, 2)


def test_book_creates_active_booking(store, students, slot):
    booking = BookingManager(store).book(students[0].id, slot)
    assert booking.status == "active"
    assert booking.cancelled_at is None
    assert booking.time_slot_id == slot.id
    assert BookingManager(store).get_booking(booking.id) == booking


def test_full_slot_raises_capacity_error_without_new_record(store, students, slot):
    manager = BookingManager(store)
    manager.book(students[0].id, slot)
    manager.book(students[1].id, slot)
    assert manager.is_full(slot)

    with pytest.raises(CapacityError):
        manager.book(students[2].id, slot)
    assert store.count_documents(BOOKINGS) == 2
    assert manager.active_count(slot.id) <= slot.capacity


def test_no_double_active_booking(store, students, slot):
    manager = BookingManager(store)
    manager.book(students[0].id, slot)
    with pytest.raises(AlreadyBookedError):
        manager.book(students[0].id, slot)
    assert manager.active_count(slot.id) == 1


def test_capacity_one_book_cancel_rebook(store, teacher, students):
    slot = SlotManager(store).create_or_update_slot(teacher.id, MONDAY, get_schedule_slot(4), 1)
    manager = BookingManager(store)
    a, b = students[0], students[1]

    first = manager.book(a.id, slot)
    assert first.status == "active"

    with pytest.raises(CapacityError):
        manager.book(b.id, slot)

    cancelled = manager.cancel(first, a.id)
    assert cancelled.status == "cancelled"
    assert cancelled.cancelled_at is not None

    second = manager.book(b.id, slot)
    assert second.status == "active"
    assert manager.active_count(slot.id) == 1


def test_student_can_rebook_after_cancelling(store, students, slot):
    manager = BookingManager(store)
    manager.cancel(manager.book(students[0].id, slot))
    again = manager.book(students[0].id, slot)
    active, cancelled = manager.bookings_for_student(students[0].id)
    assert [x.id for x in active] == [again.id]
    assert len(cancelled) == 1


def test_cancel_twice_is_refused(store, students, slot):
    manager = BookingManager(store)
    cancelled = manager.cancel(manager.book(students[0].id, slot))
    with pytest.raises(AlreadyCancelledError):
        manager.cancel(cancelled)
    assert manager.get_booking(cancelled.id).cancelled_at == cancelled.cancelled_at


def test_cancel_by_other_student_is_forbidden(store, students, slot):
    manager = BookingManager(store)
    booking = manager.book(students[0].id, slot)
    with pytest.raises(ForbiddenError):
        manager.cancel(booking, students[1].id)
    assert manager.get_booking(booking.id).status == "active"


def test_closed_slot_cannot_be_booked(store, teacher, students, slot):
    closed = SlotManager(store).set_availability(slot.id, False, teacher.id)
    with pytest.raises(ConflictError):
        BookingManager(store).book(students[0].id, closed)


def test_cancelled_bookings_are_kept(store, students, slot):
    manager = BookingManager(store)
    manager.cancel(manager.book(students[0].id, slot))
    assert store.count_documents(BOOKINGS) == 1
    assert manager.active_bookings_for_slot(slot.id) == []


def test_unknown_booking(store):
    with pytest.raises(NotFoundError):
        BookingManager(store).get_booking("missing")


def test_ended_slot_cannot_be_booked(store, teacher, students, first_window):
    slot = SlotManager(store).create_or_update_slot(teacher.id, "2024-01-08", first_window, 5)
    with pytest.raises(ValidationError):
        BookingManager(store).book(students[0].id, slot)
    assert store.count_documents(BOOKINGS) == 0


def test_slot_bookable_until_it_ends(store, students, slot):
    during_class = datetime(2030, 1, 7, 9, 0)
    after_class = datetime(2030, 1, 7, 9, 30)
    manager = BookingManager(store)
    assert manager.book(students[0].id, slot, now=during_class).status == "active"
    with pytest.raises(ValidationError):
        manager.book(students[1].id, slot, now=after_class)
