import pytest

from errors import ConflictError, NotFoundError, ValidationError
from gym_settings import get_gym_settings, save_gym_settings
from schemas import GymSettings
from users import (
    create_user, current_user, get_user, list_users, login, logout,
    seed_defaults, users_by_role,
)


def test_seed_only_on_empty_store(store):
    assert seed_defaults(store) == 3
    assert seed_defaults(store) == 0
    grouped = users_by_role(store)
    assert [u.email for u in grouped["admin"]] == ["admin@gym.com"]
    assert len(grouped["teacher"]) == 1
    assert len(grouped["student"]) == 1


def test_duplicate_email_conflicts(store):
    create_user(store, "Ana", "ana@gym.com", "student")
    with pytest.raises(ConflictError):
        create_user(store, "Other Ana", "ana@gym.com", "teacher")
    assert len(list_users(store)) == 1


def test_blank_fields_rejected(store):
    with pytest.raises(ValidationError):
        create_user(store, "  ", "x@gym.com")


def test_user_round_trip(store):
    user = create_user(store, "Ana", "ana@gym.com", "teacher")
    assert get_user(store, user.id) == user
    assert list_users(store, "teacher") == [user]
    assert list_users(store, "student") == []


def test_login_logout(store):
    user = create_user(store, "Ana", "ana@gym.com", "student")
    assert current_user(store) is None
    assert login(store, "ana@gym.com") == user
    assert current_user(store) == user
    logout(store)
    assert current_user(store) is None


def test_login_unknown_email(store):
    with pytest.raises(NotFoundError):
        login(store, "ghost@gym.com")
    assert current_user(store) is None


def test_settings_default_then_saved(store):
    assert get_gym_settings(store) == GymSettings()
    updated = GymSettings(slot_duration=90, max_slots_per_day=6, opening_time="07:00",
                          closing_time="21:00", days_in_advance=14)
    save_gym_settings(store, updated)
    assert get_gym_settings(store) == updated


@pytest.mark.parametrize("changes", [
    {"opening_time": "20:00", "closing_time": "08:00"},
    {"opening_time": "09:00", "closing_time": "09:00"},
    {"slot_duration": 10},
    {"slot_duration": 300},
    {"max_slots_per_day": 0},
    {"max_slots_per_day": 21},
    {"days_in_advance": 0},
    {"days_in_advance": 31},
])
def test_settings_out_of_range(store, changes):
    with pytest.raises(ValidationError):
        save_gym_settings(store, GymSettings(**changes))
    assert get_gym_settings(store) == GymSettings()


def test_email_domain_case_is_a_duplicate(store):
    user = create_user(store, "Ana", "ana@gym.com")
    with pytest.raises(ConflictError):
        create_user(store, "Ana 2", "ana@GYM.com")
    assert len(list_users(store)) == 1
    assert login(store, "ana@GYM.com") == user


def test_invalid_email_rejected(store):
    with pytest.raises(ValidationError):
        create_user(store, "Ana", "not-an-email")
