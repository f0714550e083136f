import os
from contextlib import asynccontextmanager
from datetime import date
from typing import List, Optional, Dict, Any

from fastapi import FastAPI, HTTPException, Depends, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, EmailStr, Field

from bookings import BookingManager
from database import Store, USERS, get_store
from errors import ForbiddenError, GymError, ValidationError
from gym_settings import get_gym_settings, save_gym_settings
from overview import system_overview, teacher_overview
from schedule import DAILY_SCHEDULE, find_schedule_slot, get_schedule_slot, list_slots_for_date, next_weekdays
from schemas import GymSettings, Role, ScheduleSlot, TimeSlot, Booking, User
from slots import SlotManager, partition_slots
from users import create_user, current_user, get_user, list_users, login, logout, seed_defaults
from weekly import weekly_grid

SEED_ON_STARTUP = os.getenv("SEED_ON_STARTUP", "true").lower() in ("1", "true", "yes", "on")


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = get_store()
    if store is not None:
        store.init()
        if SEED_ON_STARTUP:
            seed_defaults(store)
    yield
    if store is not None:
        store.close()


app = FastAPI(title="Gym Class Booking API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GymError)
async def gym_error_handler(request: Request, exc: GymError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# -------------------------------
# Utilities
# -------------------------------

def store_dep() -> Store:
    store = get_store()
    if store is None:
        raise HTTPException(status_code=500, detail="Database not configured")
    return store


def require_role(store: Store, user_id: str, role: str) -> User:
    user = get_user(store, user_id)
    if user.role != role:
        raise ForbiddenError(f"Only a {role} can do this")
    return user


def resolve_schedule_slot(schedule_slot_id: int) -> ScheduleSlot:
    schedule_slot = get_schedule_slot(schedule_slot_id)
    if schedule_slot is None:
        raise ValidationError("Unknown schedule slot")
    return schedule_slot


# -------------------------------
# Data seeding
# -------------------------------

@app.post("/api/seed")
def seed(store: Store = Depends(store_dep)):
    inserted = seed_defaults(store)
    if not inserted:
        return {"message": "Users already seeded", "count": store.count_documents(USERS)}
    return {"message": "Users seeded", "count": inserted}


@app.get("/")
def root():
    return {"message": "Gym Class Booking API"}


@app.get("/test")
def test_database():
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_url": "✅ Set" if os.getenv("DATABASE_URL") else "❌ Not Set",
        "database_name": "✅ Set" if os.getenv("DATABASE_NAME") else "❌ Not Set",
        "connection_status": "Not Connected",
        "collections": []
    }
    try:
        store = get_store()
        if store is not None:
            response["database"] = "✅ Connected & Working"
            response["connection_status"] = "Connected"
            response["collections"] = store.db.list_collection_names()
        else:
            response["database"] = "❌ Not Configured"
    except Exception as e:
        response["database"] = f"❌ Error: {str(e)[:80]}"
    return response


# -------------------------------
# Schedule catalog
# -------------------------------

@app.get("/api/schedule")
def catalog(date_str: Optional[str] = Query(None, alias="date")) -> List[ScheduleSlot]:
    if date_str is None:
        return DAILY_SCHEDULE
    return list_slots_for_date(date_str)


@app.get("/api/schedule/days")
def upcoming_days(count: int = Query(7, ge=1, le=30)) -> List[str]:
    return next_weekdays(date.today(), count)


# -------------------------------
# Users & session
# -------------------------------

class CreateUser(BaseModel):
    name: str
    email: EmailStr
    role: Role = "student"


class LoginRequest(BaseModel):
    email: EmailStr


@app.get("/api/users")
def users(role: Optional[Role] = None, store: Store = Depends(store_dep)) -> List[User]:
    return list_users(store, role)


@app.post("/api/users", status_code=201)
def add_user(payload: CreateUser, store: Store = Depends(store_dep)) -> User:
    return create_user(store, payload.name, payload.email, payload.role)


@app.post("/api/auth/login")
def auth_login(payload: LoginRequest, store: Store = Depends(store_dep)) -> User:
    return login(store, payload.email)


@app.post("/api/auth/logout")
def auth_logout(store: Store = Depends(store_dep)):
    logout(store)
    return {"message": "Logged out"}


@app.get("/api/auth/me")
def auth_me(store: Store = Depends(store_dep)):
    return {"user": current_user(store)}


# -------------------------------
# Settings
# -------------------------------

@app.get("/api/settings")
def read_settings(store: Store = Depends(store_dep)) -> GymSettings:
    return get_gym_settings(store)


@app.put("/api/settings")
def update_settings(payload: GymSettings, store: Store = Depends(store_dep)) -> GymSettings:
    return save_gym_settings(store, payload)


# -------------------------------
# Time slots
# -------------------------------

class CreateSlot(BaseModel):
    teacher_id: str
    date: str  # YYYY-MM-DD
    schedule_slot_id: int
    capacity: int = Field(10, ge=1, le=50)


class UpdateSlot(BaseModel):
    teacher_id: str
    capacity: int = Field(..., ge=1, le=50)
    date: Optional[str] = None
    schedule_slot_id: Optional[int] = None


class AvailabilityPayload(BaseModel):
    teacher_id: str
    is_available: bool


@app.get("/api/slots")
def slots(
    date_str: Optional[str] = Query(None, alias="date"),
    teacher_id: Optional[str] = None,
    available_only: bool = False,
    store: Store = Depends(store_dep),
) -> List[Dict[str, Any]]:
    manager = SlotManager(store)
    return [
        {**s.model_dump(), "booked": manager.booked_count(s.id)}
        for s in manager.list_slots(date_str, teacher_id, available_only)
    ]


@app.post("/api/slots", status_code=201)
def create_slot(payload: CreateSlot, store: Store = Depends(store_dep)) -> TimeSlot:
    require_role(store, payload.teacher_id, "teacher")
    schedule_slot = resolve_schedule_slot(payload.schedule_slot_id)
    return SlotManager(store).create_or_update_slot(
        payload.teacher_id, payload.date, schedule_slot, payload.capacity)


@app.put("/api/slots/{slot_id}")
def update_slot(slot_id: str, payload: UpdateSlot, store: Store = Depends(store_dep)) -> TimeSlot:
    manager = SlotManager(store)
    current = manager.get_slot(slot_id)
    if payload.schedule_slot_id is not None:
        schedule_slot = resolve_schedule_slot(payload.schedule_slot_id)
    else:
        schedule_slot = find_schedule_slot(current.start_time, current.end_time)
        if schedule_slot is None:
            raise ValidationError("Time slot does not match the schedule")
    return manager.create_or_update_slot(
        payload.teacher_id, payload.date or current.date, schedule_slot, payload.capacity, slot_id=slot_id)


@app.post("/api/slots/{slot_id}/availability")
def slot_availability(slot_id: str, payload: AvailabilityPayload, store: Store = Depends(store_dep)) -> TimeSlot:
    return SlotManager(store).set_availability(slot_id, payload.is_available, payload.teacher_id)


@app.delete("/api/slots/{slot_id}")
def delete_slot(slot_id: str, teacher_id: str = Query(...), store: Store = Depends(store_dep)):
    SlotManager(store).delete_slot(slot_id, teacher_id)
    return {"message": "Time slot deleted"}


@app.get("/api/slots/{slot_id}/bookings")
def slot_bookings(slot_id: str, store: Store = Depends(store_dep)) -> List[Booking]:
    SlotManager(store).get_slot(slot_id)
    return BookingManager(store).active_bookings_for_slot(slot_id)


@app.get("/api/teachers/{teacher_id}/slots")
def teacher_slots(teacher_id: str, store: Store = Depends(store_dep)):
    upcoming, past = partition_slots(SlotManager(store).list_teacher_slots(teacher_id))
    return {"upcoming": upcoming, "past": past}


@app.get("/api/teachers/{teacher_id}/overview")
def teacher_dashboard(teacher_id: str, store: Store = Depends(store_dep)):
    return teacher_overview(store, teacher_id)


# -------------------------------
# Bookings
# -------------------------------

class CreateBooking(BaseModel):
    student_id: str
    time_slot_id: str


class CancelBooking(BaseModel):
    student_id: str


@app.post("/api/bookings", status_code=201)
def create_booking(payload: CreateBooking, store: Store = Depends(store_dep)) -> Booking:
    require_role(store, payload.student_id, "student")
    time_slot = SlotManager(store).get_slot(payload.time_slot_id)
    return BookingManager(store).book(payload.student_id, time_slot)


@app.post("/api/bookings/{booking_id}/cancel")
def cancel_booking(booking_id: str, payload: CancelBooking, store: Store = Depends(store_dep)) -> Booking:
    manager = BookingManager(store)
    return manager.cancel(manager.get_booking(booking_id), payload.student_id)


@app.get("/api/students/{student_id}/bookings")
def student_bookings(student_id: str, store: Store = Depends(store_dep)):
    active, cancelled = BookingManager(store).bookings_for_student(student_id)
    return {"active": active, "cancelled": cancelled}


# -------------------------------
# Calendar & admin views
# -------------------------------

@app.get("/api/calendar/week")
def calendar_week(
    date_str: str = Query(..., alias="date"),
    teacher_id: Optional[str] = None,
    student_id: Optional[str] = None,
    store: Store = Depends(store_dep),
):
    return weekly_grid(store, date_str, teacher_id=teacher_id, student_id=student_id)


@app.get("/api/admin/overview")
def admin_overview(store: Store = Depends(store_dep)):
    return system_overview(store)


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
