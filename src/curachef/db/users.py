"""
CuraChef - User Store.

A flat list of user records kept in one JSON file. Every write rewrites
the whole file; concurrent writers are last-write-wins.

When the file does not exist yet (or cannot be read) the store is seeded
from an optional seed file, or starts empty.
"""

import json
import logging
from pathlib import Path

import bcrypt
from pydantic import ValidationError

from curachef.config import settings
from curachef.core.schemas import User, UserPreferences
from curachef.errors import AuthError

logger = logging.getLogger(__name__)

# Singleton store instance
_store: "JsonUserStore | None" = None


def _upgrade_seed_record(record: dict) -> dict:
    """Hash a plaintext `password` left in an older seed file."""
    if "password" not in record or "passwordHash" in record:
        return record
    record = dict(record)
    password = str(record.pop("password"))
    record["passwordHash"] = bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()
    return record


class JsonUserStore:
    """User records persisted as `{"users": [...]}` in a JSON file."""

    def __init__(self, path: Path | str, seed_path: Path | str | None = None):
        self.path = Path(path)
        self.seed_path = Path(seed_path) if seed_path else None

    # -------------------------------------------------------------------------
    # File access
    # -------------------------------------------------------------------------

    def _load_seed(self) -> list[User]:
        users: list[User] = []
        if self.seed_path is not None:
            try:
                data = json.loads(self.seed_path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.error(f"Failed to load initial users from {self.seed_path}: {e}")
                data = {}
            records = data.get("users", []) if isinstance(data, dict) else []
            for record in records:
                if not isinstance(record, dict):
                    logger.warning(f"Skipping malformed seed user record: {record!r}")
                    continue
                try:
                    users.append(User.model_validate(_upgrade_seed_record(record)))
                except ValidationError as e:
                    logger.warning(f"Skipping seed user {record.get('email', '?')}: {e}")
        self._save(users)
        return users

    def _save(self, users: list[User]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"users": [u.to_wire() for u in users]}
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    async def get_users(self) -> list[User]:
        """Get all users, seeding the store on first access."""
        if not self.path.exists():
            return self._load_seed()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return [User.model_validate(u) for u in data.get("users", [])]
        except (OSError, ValueError) as e:
            logger.warning(f"Error reading user store {self.path}, initializing new store: {e}")
            return self._load_seed()

    async def get_user(self, email: str) -> User | None:
        """Get a single user by email."""
        users = await self.get_users()
        return next((u for u in users if u.email == email), None)

    async def add_user(self, email: str, password_hash: str) -> User:
        """
        Add a new user with empty preferences.

        Raises:
            AuthError: If a user with this email already exists
        """
        users = await self.get_users()
        if any(u.email == email for u in users):
            raise AuthError("An account with this email already exists.")

        user = User(email=email, password_hash=password_hash, preferences=UserPreferences())
        self._save([*users, user])
        logger.info(f"Added user {email}")
        return user

    async def update_preferences(self, email: str, preferences: UserPreferences) -> User | None:
        """
        Replace a user's preferences.

        Returns:
            The updated user, or None if no user has this email
        """
        users = await self.get_users()

        updated: User | None = None
        new_users = []
        for user in users:
            if user.email == email:
                updated = user.model_copy(update={"preferences": preferences})
                new_users.append(updated)
            else:
                new_users.append(user)

        if updated is not None:
            self._save(new_users)
        return updated


def get_user_store() -> JsonUserStore:
    """
    Get the user store configured in settings.

    Uses singleton pattern.
    """
    global _store

    if _store is None:
        _store = JsonUserStore(settings.curachef_user_store, settings.curachef_seed_users)

    return _store
