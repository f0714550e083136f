from database import Store
from errors import ValidationError
from schemas import GymSettings


def get_gym_settings(store: Store) -> GymSettings:
    doc = store.get_settings_doc()
    return GymSettings(**doc) if doc else GymSettings()


def validate_gym_settings(settings: GymSettings) -> None:
    # HH:MM strings compare in time order
    if settings.opening_time >= settings.closing_time:
        raise ValidationError("Closing time must be after opening time")
    if not 15 <= settings.slot_duration <= 240:
        raise ValidationError("Slot duration must be between 15 and 240 minutes")
    if not 1 <= settings.max_slots_per_day <= 20:
        raise ValidationError("Maximum slots per day must be between 1 and 20")
    if not 1 <= settings.days_in_advance <= 30:
        raise ValidationError("Days in advance must be between 1 and 30")


def save_gym_settings(store: Store, settings: GymSettings) -> GymSettings:
    validate_gym_settings(settings)
    store.put_settings_doc(settings.model_dump())
    print(f"[SETTINGS] Updated {settings.model_dump()}")
    return settings
