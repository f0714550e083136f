from typing import Dict, List, Optional

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from database import Store, USERS
from errors import ConflictError, NotFoundError, ValidationError
from schemas import User, utcnow

# -------------------------------
# Data seeding
# -------------------------------

DEFAULT_USERS = [
    ("admin@gym.com", "Admin User", "admin"),
    ("teacher@gym.com", "John Teacher", "teacher"),
    ("student@gym.com", "Jane Student", "student"),
]


def seed_defaults(store: Store) -> int:
    """Create the default admin, teacher and student on an empty user collection."""
    if store.count_documents(USERS) > 0:
        return 0
    for email, name, role in DEFAULT_USERS:
        create_user(store, name, email, role)
    print(f"[SEED] Created {len(DEFAULT_USERS)} default users")
    return len(DEFAULT_USERS)


# -------------------------------
# Users
# -------------------------------

_email_adapter = TypeAdapter(EmailStr)


def normalize_email(email: str) -> str:
    """The form stored on User records (domain lowercased by the email validator)."""
    try:
        return _email_adapter.validate_python((email or "").strip())
    except PydanticValidationError:
        raise ValidationError("Invalid email address")


def create_user(store: Store, name: str, email: str, role: str = "student") -> User:
    name = (name or "").strip()
    if not name or not (email or "").strip():
        raise ValidationError("Please fill in all required fields")
    email = normalize_email(email)
    if store.find_document(USERS, {"email": email}):
        raise ConflictError("A user with this email already exists")
    user = User(id=store.new_id(), email=email, name=name, role=role, created_at=utcnow())
    store.save_document(USERS, user)
    return user


def get_user(store: Store, user_id: str) -> User:
    doc = store.get_document(USERS, user_id)
    if not doc:
        raise NotFoundError("User not found")
    return User(**doc)


def list_users(store: Store, role: Optional[str] = None) -> List[User]:
    filt = {"role": role} if role else {}
    return [User(**d) for d in store.get_documents(USERS, filt, sort=[("created_at", 1)])]


def users_by_role(store: Store) -> Dict[str, List[User]]:
    grouped: Dict[str, List[User]] = {"admin": [], "teacher": [], "student": []}
    for u in list_users(store):
        grouped[u.role].append(u)
    return grouped


# -------------------------------
# Session
# -------------------------------

def login(store: Store, email: str) -> User:
    # No password check: the session only picks which user is acting
    try:
        email = normalize_email(email)
    except ValidationError:
        raise NotFoundError("No user with this email")
    doc = store.find_document(USERS, {"email": email})
    if not doc:
        raise NotFoundError("No user with this email")
    user = User(**doc)
    store.set_session_user_id(user.id)
    return user


def logout(store: Store) -> None:
    store.set_session_user_id(None)


def current_user(store: Store) -> Optional[User]:
    user_id = store.get_session_user_id()
    if not user_id:
        return None
    doc = store.get_document(USERS, user_id)
    return User(**doc) if doc else None
