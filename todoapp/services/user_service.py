from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from todoapp.errors import ServiceError, service_operation
from todoapp.models.user import User
from todoapp.repositories.user_repo import UserRepository
from todoapp.schemas.user import UserCreate, UserOut, UserStatistics, UserUpdate
from todoapp.security import get_password_hash
from todoapp.services.validation import (
    check_password,
    normalize_email,
    normalize_username,
    require_id,
    require_text,
)

DUPLICATE_USER_MESSAGE = "Username or email already exists"


class UserService:
    def __init__(self):
        self.repo = UserRepository()

    async def _get_existing(self, db: AsyncSession, user_id: int) -> User:
        user = await self.repo.get(db, user_id)
        if user is None:
            raise ServiceError.not_found(f"User not found with id: {user_id}")
        return user

    @service_operation("Error saving user data", conflict_message=DUPLICATE_USER_MESSAGE)
    async def register_user(self, db: AsyncSession, user_in: UserCreate) -> UserOut:
        """Validate, check uniqueness and persist a new user with a hashed password."""
        if user_in is None:
            raise ServiceError.invalid("User data cannot be null")
        username = normalize_username(user_in.username)
        email = normalize_email(user_in.email)
        password = check_password(user_in.password)

        if await self.repo.exists_by_username(db, username):
            raise ServiceError.invalid(f"Username already exists: {username}")
        if await self.repo.exists_by_email(db, email):
            raise ServiceError.invalid(f"Email already exists: {email}")

        user = User(username=username, email=email, hashed_password=get_password_hash(password))
        await self.repo.create(db, user)
        await db.commit()
        await db.refresh(user)
        return UserOut.model_validate(user)

    @service_operation("Error accessing user data")
    async def get_user(self, db: AsyncSession, user_id: int) -> UserOut:
        require_id(user_id, "User")
        return UserOut.model_validate(await self._get_existing(db, user_id))

    @service_operation("Error searching user by username")
    async def get_user_by_username(self, db: AsyncSession, username: str) -> Optional[UserOut]:
        username = require_text(username, "Username cannot be null or empty")
        user = await self.repo.find_by_username(db, username)
        return UserOut.model_validate(user) if user else None

    @service_operation("Error searching user by email")
    async def get_user_by_email(self, db: AsyncSession, email: str) -> Optional[UserOut]:
        email = require_text(email, "Email cannot be null or empty").lower()
        user = await self.repo.find_by_email(db, email)
        return UserOut.model_validate(user) if user else None

    @service_operation("Error retrieving all users")
    async def list_users(self, db: AsyncSession) -> list[UserOut]:
        return [UserOut.model_validate(u) for u in await self.repo.list(db)]

    @service_operation("Error updating user data", conflict_message=DUPLICATE_USER_MESSAGE)
    async def update_user(self, db: AsyncSession, user_id: int, user_in: UserUpdate) -> UserOut:
        """
        Apply a partial update. Only fields that are present and differ from
        the stored value are validated and checked for uniqueness; nothing is
        written unless every changed field passes.
        """
        require_id(user_id, "User")
        if user_in is None:
            raise ServiceError.invalid("User data cannot be null")
        user = await self._get_existing(db, user_id)

        changes = {}
        if user_in.username is not None:
            username = normalize_username(user_in.username)
            if username != user.username:
                if await self.repo.exists_by_username(db, username, exclude_id=user.id):
                    raise ServiceError.invalid(f"Username already exists: {username}")
                changes["username"] = username
        if user_in.email is not None:
            email = normalize_email(user_in.email)
            if email != user.email:
                if await self.repo.exists_by_email(db, email, exclude_id=user.id):
                    raise ServiceError.invalid(f"Email already exists: {email}")
                changes["email"] = email

        if changes:
            for field, value in changes.items():
                setattr(user, field, value)
            await self.repo.save(db, user)
            await db.commit()
            await db.refresh(user)
        return UserOut.model_validate(user)

    @service_operation("Error deleting user")
    async def delete_user(self, db: AsyncSession, user_id: int) -> None:
        require_id(user_id, "User")
        if not await self.repo.exists(db, id=user_id):
            raise ServiceError.not_found(f"User not found with id: {user_id}")
        await self.repo.delete(db, user_id)
        await db.commit()

    @service_operation("Error checking username existence")
    async def exists_by_username(self, db: AsyncSession, username: str) -> bool:
        username = require_text(username, "Username cannot be null or empty")
        return await self.repo.exists_by_username(db, username)

    @service_operation("Error checking email existence")
    async def exists_by_email(self, db: AsyncSession, email: str) -> bool:
        email = require_text(email, "Email cannot be null or empty").lower()
        return await self.repo.exists_by_email(db, email)

    @service_operation("Error counting users")
    async def count_users(self, db: AsyncSession) -> int:
        return await self.repo.count(db)

    @service_operation("Error counting users by date")
    async def count_users_created_after(self, db: AsyncSession, date: datetime) -> int:
        if date is None:
            raise ServiceError.invalid("Date cannot be null")
        # created_at is stored as naive UTC; naive cutoffs are taken as UTC already
        if date.tzinfo is not None:
            date = date.astimezone(timezone.utc).replace(tzinfo=None)
        return await self.repo.count_created_after(db, date)

    @service_operation("Error searching users")
    async def search_users(self, db: AsyncSession, term: str) -> list[UserOut]:
        term = require_text(term, "Search term cannot be null or empty")
        return [UserOut.model_validate(u) for u in await self.repo.search(db, term)]

    @service_operation("Error checking user activity")
    async def is_user_active(self, db: AsyncSession, user_id: int) -> bool:
        """A user is active when it exists and has a non-blank username and email."""
        require_id(user_id, "User")
        user = await self.repo.get(db, user_id)
        if user is None:
            return False
        return bool(user.username and user.username.strip() and user.email and user.email.strip())

    @service_operation("Error retrieving user statistics")
    async def get_user_statistics(self, db: AsyncSession) -> UserStatistics:
        total = await self.repo.count(db)
        active = await self.repo.count_active(db)
        return UserStatistics(total_users=total, active_users=active, inactive_users=total - active)
