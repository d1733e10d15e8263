"""
CuraChef - Authentication.

Sign-up, sign-in, sign-out and preference saving against the user store.
AuthError stays inside this flow; it never touches generation state.
"""

import logging

import bcrypt

from curachef.core.schemas import User, UserPreferences
from curachef.db.users import JsonUserStore, get_user_store
from curachef.errors import AuthError

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password."
MIN_PASSWORD_LENGTH = 6


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def check_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


class AuthService:
    """Tracks the signed-in user for one session."""

    def __init__(self, store: JsonUserStore | None = None):
        self.store = store or get_user_store()
        self.current_user: User | None = None

    @property
    def is_signed_in(self) -> bool:
        return self.current_user is not None

    async def sign_up(self, email: str, password: str, confirm_password: str | None = None) -> User:
        """
        Create an account and sign it in.

        Raises:
            AuthError: Password too short, confirmation mismatch or email taken
        """
        email = email.strip()
        if confirm_password is not None and password != confirm_password:
            raise AuthError("Passwords do not match.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")

        user = await self.store.add_user(email, hash_password(password))
        self.current_user = user
        return user

    async def sign_in(self, email: str, password: str) -> User:
        """
        Sign in with email and password.

        Re-reads the store so users added elsewhere are visible.

        Raises:
            AuthError: Unknown email or wrong password
        """
        user = await self.store.get_user(email.strip())
        if user is None or not check_password(password, user.password_hash):
            logger.info(f"Failed sign-in for {email}")
            raise AuthError(INVALID_CREDENTIALS)

        self.current_user = user
        return user

    def sign_out(self) -> None:
        self.current_user = None

    async def save_preferences(self, preferences: UserPreferences) -> User | None:
        """Persist preferences for the signed-in user. No-op when signed out."""
        if self.current_user is None:
            return None

        updated = await self.store.update_preferences(self.current_user.email, preferences)
        if updated is not None:
            self.current_user = updated
        return updated
