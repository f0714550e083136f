"""
Database Schemas for the Gym Class Booking system

Each Pydantic model represents a collection in MongoDB. The collection
name is the lowercase of the class name. The record ``id`` is stored as
the document ``_id``.
"""
from pydantic import BaseModel, Field, EmailStr
from typing import Optional, Literal
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


HHMM = r"^([01]\d|2[0-3]):[0-5]\d$"

Role = Literal["student", "teacher", "admin"]


class ScheduleSlot(BaseModel):
    """
    Fixed daily window of the gym schedule (not persisted)
    """
    id: int = Field(..., ge=1, le=8)
    start_time: str = Field(..., description="HH:MM 24h")
    end_time: str = Field(..., description="HH:MM 24h")
    label: str


class User(BaseModel):
    """
    Users collection schema
    Collection name: "user"
    """
    id: str
    email: EmailStr = Field(..., description="Email address (unique)")
    name: str = Field(..., description="Full name")
    role: Role = "student"
    created_at: datetime = Field(default_factory=utcnow)


class TimeSlot(BaseModel):
    """
    Time slot instances collection schema
    Collection name: "timeslot"
    """
    id: str
    date: str = Field(..., description="ISO date YYYY-MM-DD")
    start_time: str = Field(..., description="HH:MM 24h")
    end_time: str = Field(..., description="HH:MM 24h")
    capacity: int
    is_available: bool = True
    teacher_id: str = Field(..., description="Id of the owning teacher")
    created_at: datetime = Field(default_factory=utcnow)


class Booking(BaseModel):
    """
    Bookings collection schema
    Collection name: "booking"
    """
    id: str
    student_id: str
    time_slot_id: str
    status: Literal["active", "cancelled"] = "active"
    created_at: datetime = Field(default_factory=utcnow)
    cancelled_at: Optional[datetime] = None


class GymSettings(BaseModel):
    """
    Global settings, single document
    Collection name: "gymsettings"
    """
    slot_duration: int = Field(60, description="Minutes")
    max_slots_per_day: int = 8
    opening_time: str = Field("08:00", pattern=HHMM, description="HH:MM 24h")
    closing_time: str = Field("20:00", pattern=HHMM, description="HH:MM 24h")
    days_in_advance: int = Field(7, description="How many days ahead students may book")

