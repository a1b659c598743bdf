from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from taskhub.core.core import Service
from taskhub.core.modules.user.models import User
from taskhub.core.modules.user.passwords import DUMMY_PASSWORD_HASH, hash_password, verify_password
from taskhub.core.modules.user.validators import validate_email, validate_full_name, validate_password
from taskhub.errors import ConflictError, NotFoundError
from taskhub.utils import normalize_email

logger = structlog.get_logger(__name__)


class UserService(Service):
    """Manages users with in-memory cache."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")
        self._users: dict[UUID, User] = {}

    def get_user(self, user_id: UUID) -> User:
        """Get user by ID from cache."""
        if user_id not in self._users:
            raise NotFoundError(f"User '{user_id}' not found")
        return self._users[user_id]

    def find_user_by_email(self, email: str) -> User | None:
        """Find user by email (case-insensitive) or return None."""
        email = normalize_email(email)
        return next((u for u in self._users.values() if u.email == email), None)

    def get_user_by_email(self, email: str) -> User:
        """Get user by email from cache."""
        user = self.find_user_by_email(email)
        if user is None:
            raise NotFoundError(f"User '{email}' not found")
        return user

    def has_user(self, user_id: UUID) -> bool:
        """Check if user exists by ID."""
        return user_id in self._users

    def has_email(self, email: str) -> bool:
        """Check if email is already registered."""
        return self.find_user_by_email(email) is not None

    async def create_user(self, full_name: str, email: str, password: str) -> User:
        """Register a user with a hashed password."""
        email = normalize_email(email)
        validate_full_name(full_name)
        validate_email(email)
        validate_password(password)
        if self.has_email(email):
            raise ConflictError("User with this email already exists")

        user = User(email=email, name=full_name.strip(), password_hash=hash_password(password))
        res = await self._collection.insert_one(user.to_mongo())
        logger.info("user_registered", user_id=str(user.id))
        return await self.update_user_cache(res.inserted_id)

    def authenticate(self, email: str, password: str) -> User | None:
        """Return the user when the password matches, None otherwise.

        Unknown emails are checked against a dummy hash so the two failure
        cases are indistinguishable to the caller.
        """
        user = self.find_user_by_email(email)
        if user is None:
            verify_password(password, DUMMY_PASSWORD_HASH)
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    async def update_all_users_cache(self) -> None:
        """Reload all users cache from database."""
        users = await User.list_cursor(self._collection.find())
        self._users = {user.id: user for user in users}

    async def update_user_cache(self, user_id: UUID) -> User:
        """Reload a specific user cache from database."""
        user = await User.find_one(self._collection, {"_id": user_id})
        if user is None:
            raise NotFoundError(f"User '{user_id}' not found")
        self._users[user_id] = user
        return user

    async def on_start(self) -> None:
        """Initialize indexes and cache."""
        await self._collection.create_index([("email", 1)], unique=True)
        await self.update_all_users_cache()
        logger.debug("user_service_started", user_count=len(self._users))
