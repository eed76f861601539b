from datetime import datetime

from sqlalchemy import and_, delete as sa_delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from todoapp.models.todo import Todo
from todoapp.models.user import User
from todoapp.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self):
        super().__init__(User)

    async def find_by_username(self, db: AsyncSession, username: str) -> User | None:
        result = await db.execute(select(User).where(User.username == username))
        return result.scalars().first()

    async def find_by_email(self, db: AsyncSession, email: str) -> User | None:
        result = await db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def exists_by_username(self, db: AsyncSession, username: str, *, exclude_id: int | None = None) -> bool:
        return await self._exists_where(db, User.username == username, exclude_id)

    async def exists_by_email(self, db: AsyncSession, email: str, *, exclude_id: int | None = None) -> bool:
        return await self._exists_where(db, User.email == email, exclude_id)

    async def _exists_where(self, db: AsyncSession, clause, exclude_id: int | None) -> bool:
        if exclude_id is not None:
            clause = and_(clause, User.id != exclude_id)
        result = await db.execute(select(func.count()).select_from(User).where(clause))
        return result.scalar_one() > 0

    async def count_created_after(self, db: AsyncSession, date: datetime) -> int:
        result = await db.execute(
            select(func.count()).select_from(User).where(User.created_at >= date)
        )
        return int(result.scalar_one())

    async def search(self, db: AsyncSession, term: str) -> list[User]:
        """Case-insensitive substring match on username or email."""
        needle = term.lower()
        stmt = (
            select(User)
            .where(
                or_(
                    func.lower(User.username).contains(needle, autoescape=True),
                    func.lower(User.email).contains(needle, autoescape=True),
                )
            )
            .order_by(User.id)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def count_active(self, db: AsyncSession) -> int:
        stmt = select(func.count()).select_from(User).where(
            User.username.is_not(None),
            func.trim(User.username) != "",
            User.email.is_not(None),
            func.trim(User.email) != "",
        )
        result = await db.execute(stmt)
        return int(result.scalar_one())

    async def delete(self, db: AsyncSession, user_id: int) -> bool:
        # owned todos go first so backends without ON DELETE CASCADE behave the same
        await db.execute(sa_delete(Todo).where(Todo.user_id == user_id))
        return await super().delete(db, user_id)
