from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from todoapp.models.todo import Todo
from todoapp.repositories.base import BaseRepository


class TodoRepository(BaseRepository[Todo]):
    def __init__(self):
        super().__init__(Todo)

    async def find_by_user(self, db: AsyncSession, user_id: int) -> list[Todo]:
        return await self.list(db, where={"user_id": user_id})

    async def find_by_user_and_done(self, db: AsyncSession, user_id: int, done: bool) -> list[Todo]:
        return await self.list(db, where={"user_id": user_id, "done": done})

    async def count_by_done(self, db: AsyncSession, done: bool) -> int:
        return await self.count(db, done=done)

    async def count_by_user(self, db: AsyncSession, user_id: int) -> int:
        return await self.count(db, user_id=user_id)

    async def count_by_user_and_done(self, db: AsyncSession, user_id: int, done: bool) -> int:
        result = await db.execute(
            select(func.count())
            .select_from(Todo)
            .where(Todo.user_id == user_id, Todo.done == done)
        )
        return int(result.scalar_one())
