"""
MongoDB access for the Gym Class Booking system

Records are stored one document per entity with the record id as ``_id``.
Every write replaces or deletes a single document, so a failed validation
never leaves a half-written change behind.
"""
import os
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from dotenv import load_dotenv
from pydantic import BaseModel
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_NAME = os.getenv("DATABASE_NAME")

USERS = "user"
TIMESLOTS = "timeslot"
BOOKINGS = "booking"
SETTINGS = "gymsettings"
SESSION = "session"

SETTINGS_ID = "default"
SESSION_ID = "current"

client: Optional[MongoClient] = None
db: Optional[Database] = None

if DATABASE_URL and DATABASE_NAME:
    client = MongoClient(DATABASE_URL)
    db = client[DATABASE_NAME]


def serialize_doc(doc: Optional[dict]) -> Optional[dict]:
    if not doc:
        return doc
    d = {**doc}
    if "_id" in d:
        d["id"] = str(d.pop("_id"))
    return d


class Store:
    """Record store over one Mongo database, passed explicitly to the managers."""

    def __init__(self, database: Database, client: Optional[MongoClient] = None):
        self.db = database
        self._client = client

    @staticmethod
    def new_id() -> str:
        return str(ObjectId())

    def init(self) -> None:
        self.db[USERS].create_index("email", unique=True)
        self.db[TIMESLOTS].create_index(
            [("teacher_id", ASCENDING), ("date", ASCENDING), ("start_time", ASCENDING), ("end_time", ASCENDING)],
            unique=True,
        )
        self.db[BOOKINGS].create_index([("time_slot_id", ASCENDING), ("status", ASCENDING)])
        self.db[BOOKINGS].create_index("student_id")

    def close(self) -> None:
        if self._client is not None:
            self._client.close()

    # -------------------------------
    # Generic record access
    # -------------------------------

    def save_document(self, collection_name: str, data: BaseModel) -> str:
        doc = data.model_dump(mode="json")
        _id = doc.pop("id")
        self.db[collection_name].replace_one({"_id": _id}, {"_id": _id, **doc}, upsert=True)
        return _id

    def get_document(self, collection_name: str, _id: str) -> Optional[Dict[str, Any]]:
        return serialize_doc(self.db[collection_name].find_one({"_id": _id}))

    def find_document(self, collection_name: str, filter_dict: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return serialize_doc(self.db[collection_name].find_one(filter_dict))

    def get_documents(
        self,
        collection_name: str,
        filter_dict: Optional[Dict[str, Any]] = None,
        sort: Optional[List[Tuple[str, int]]] = None,
    ) -> List[Dict[str, Any]]:
        cursor = self.db[collection_name].find(filter_dict or {})
        if sort:
            cursor = cursor.sort(sort)
        return [serialize_doc(d) for d in cursor]

    def count_documents(self, collection_name: str, filter_dict: Optional[Dict[str, Any]] = None) -> int:
        return self.db[collection_name].count_documents(filter_dict or {})

    def delete_document(self, collection_name: str, _id: str) -> bool:
        return self.db[collection_name].delete_one({"_id": _id}).deleted_count > 0

    # -------------------------------
    # Singletons
    # -------------------------------

    def get_settings_doc(self) -> Optional[Dict[str, Any]]:
        doc = self.db[SETTINGS].find_one({"_id": SETTINGS_ID})
        if doc:
            doc.pop("_id")
        return doc

    def put_settings_doc(self, data: Dict[str, Any]) -> None:
        self.db[SETTINGS].replace_one({"_id": SETTINGS_ID}, {**data, "_id": SETTINGS_ID}, upsert=True)

    def get_session_user_id(self) -> Optional[str]:
        doc = self.db[SESSION].find_one({"_id": SESSION_ID})
        return doc.get("user_id") if doc else None

    def set_session_user_id(self, user_id: Optional[str]) -> None:
        if user_id is None:
            self.db[SESSION].delete_one({"_id": SESSION_ID})
            return
        self.db[SESSION].replace_one({"_id": SESSION_ID}, {"_id": SESSION_ID, "user_id": user_id}, upsert=True)


def get_store() -> Optional[Store]:
    if db is None:
        return None
    return Store(db, client)
