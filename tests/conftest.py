import mongomock
import pytest
from fastapi.testclient import TestClient

import main
from database import Store
from schedule import get_schedule_slot
from users import create_user

MONDAY = "2030-01-07"
SATURDAY = "2024-01-06"


@pytest.fixture
def store():
    s = Store(mongomock.MongoClient().db)
    s.init()
    return s


@pytest.fixture
def teacher(store):
    return create_user(store, "John Teacher", "teacher@gym.com", "teacher")


@pytest.fixture
def students(store):
    return [
        create_user(store, "Ana Student", "ana@gym.com", "student"),
        create_user(store, "Ben Student", "ben@gym.com", "student"),
        create_user(store, "Cleo Student", "cleo@gym.com", "student"),
    ]


@pytest.fixture
def first_window():
    return get_schedule_slot(1)


@pytest.fixture
def client(store):
    main.app.dependency_overrides[main.store_dep] = lambda: store
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()
