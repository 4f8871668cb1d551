from __future__ import annotations

from app.exceptions import AuthenticationError, DuplicateRecordError, MissingFieldError, ValidationError
from app.models.user import User
from app.utils.constants import Collection, Role
from app.utils.logger import get_logger
from app.utils.security import check_hash, generate_hash

log = get_logger(__name__)

ROLES = (Role.DIRECTOR, Role.STAFF, Role.OWNER, Role.CLIENT)

DEMO_USERS = (
    ("director@carhire.local", "Director123", "Demo Director", Role.DIRECTOR),
    ("staff@carhire.local", "Staff123", "Demo Staff", Role.STAFF),
    ("owner@carhire.local", "Owner123", "Demo Owner", Role.OWNER),
    ("client@carhire.local", "Client123", "Demo Client", Role.CLIENT),
)


class UserService:
    """Back-office logins: create, authenticate, demo accounts."""

    def __init__(self, store):
        self.store = store

    def find_user(self, email: str) -> dict | None:
        """Find a user by email (case-insensitive)."""
        email = (email or "").strip().lower()
        found = self.store.find(Collection.USERS, {"email": email})
        return found[0] if found else None

    def create_user(self, email: str, password: str, role: str, name: str = "") -> User:
        email = (email or "").strip().lower()
        role = (role or "").strip().lower()
        if not email or not password:
            raise MissingFieldError([f for f, v in (("email", email), ("password", password)) if not v])
        if role not in ROLES:
            raise ValidationError(f"Role must be one of {'/'.join(ROLES)}")
        if self.find_user(email):
            raise DuplicateRecordError("Email already registered")
        rec = self.store.insert(Collection.USERS, {
            "email": email,
            "name": name or email.split("@", 1)[0],
            "role": role,
            "passwordHash": generate_hash(password),
        })
        return User.from_dict(rec)

    def authenticate(self, email: str, password: str) -> User:
        rec = self.find_user(email)
        if not rec or not check_hash(password or "", rec.get("passwordHash", "")):
            raise AuthenticationError("Invalid credentials")
        return User.from_dict(rec)

    def get_user(self, user_id: str) -> User | None:
        rec = self.store.find_by_id(Collection.USERS, user_id)
        return User.from_dict(rec) if rec else None

    def ensure_demo_users(self) -> int:
        """Create the demo logins that do not exist yet; return how many were added."""
        added = 0
        for email, password, name, role in DEMO_USERS:
            if self.find_user(email) is None:
                self.create_user(email, password, role, name)
                added += 1
        if added:
            log.info("Created %d demo user(s)", added)
        return added
