from sqlalchemy.ext.asyncio import AsyncSession

from todoapp.errors import ServiceError, service_operation
from todoapp.models.todo import Todo
from todoapp.repositories.todo_repo import TodoRepository
from todoapp.repositories.user_repo import UserRepository
from todoapp.schemas.todo import TodoCreate, TodoOut, TodoStatistics, TodoUpdate
from todoapp.services.validation import normalize_description, normalize_title, require_id


class TodoService:
    def __init__(self):
        self.repo = TodoRepository()
        self.users = UserRepository()

    async def _require_user(self, db: AsyncSession, user_id: int) -> None:
        require_id(user_id, "User")
        if not await self.users.exists(db, id=user_id):
            raise ServiceError.not_found(f"User not found with id: {user_id}")

    async def _get_existing(self, db: AsyncSession, todo_id: int) -> Todo:
        require_id(todo_id, "Todo")
        todo = await self.repo.get(db, todo_id)
        if todo is None:
            raise ServiceError.not_found(f"Todo not found with id: {todo_id}")
        return todo

    @service_operation("Error creating todo")
    async def create_todo(self, db: AsyncSession, todo_in: TodoCreate, user_id: int) -> TodoOut:
        if todo_in is None:
            raise ServiceError.invalid("Todo data cannot be null")
        require_id(user_id, "User")
        title = normalize_title(todo_in.title)
        description = normalize_description(todo_in.description)

        await self._require_user(db, user_id)
        todo = Todo(title=title, description=description, done=bool(todo_in.done), user_id=user_id)
        await self.repo.create(db, todo)
        await db.commit()
        await db.refresh(todo)
        return TodoOut.model_validate(todo)

    @service_operation("Error accessing todo data")
    async def get_todo(self, db: AsyncSession, todo_id: int) -> TodoOut:
        return TodoOut.model_validate(await self._get_existing(db, todo_id))

    @service_operation("Error retrieving todos for user")
    async def list_todos_by_user(self, db: AsyncSession, user_id: int) -> list[TodoOut]:
        await self._require_user(db, user_id)
        return [TodoOut.model_validate(t) for t in await self.repo.find_by_user(db, user_id)]

    @service_operation("Error retrieving todos by status")
    async def list_todos_by_user_and_status(self, db: AsyncSession, user_id: int, done: bool) -> list[TodoOut]:
        await self._require_user(db, user_id)
        todos = await self.repo.find_by_user_and_done(db, user_id, done)
        return [TodoOut.model_validate(t) for t in todos]

    @service_operation("Error retrieving all todos")
    async def list_todos(self, db: AsyncSession) -> list[TodoOut]:
        return [TodoOut.model_validate(t) for t in await self.repo.list(db)]

    @service_operation("Error updating todo")
    async def update_todo(self, db: AsyncSession, todo_id: int, todo_in: TodoUpdate) -> TodoOut:
        if todo_in is None:
            raise ServiceError.invalid("Todo data cannot be null")
        todo = await self._get_existing(db, todo_id)

        changes = {}
        if todo_in.title is not None:
            title = normalize_title(todo_in.title)
            if title != todo.title:
                changes["title"] = title
        if todo_in.description is not None:
            description = normalize_description(todo_in.description)
            if description != todo.description:
                changes["description"] = description
        if todo_in.done is not None and todo_in.done != todo.done:
            changes["done"] = todo_in.done

        if changes:
            for field, value in changes.items():
                setattr(todo, field, value)
            await self.repo.save(db, todo)
            await db.commit()
            await db.refresh(todo)
        return TodoOut.model_validate(todo)

    @service_operation("Error toggling todo status")
    async def toggle_todo(self, db: AsyncSession, todo_id: int) -> TodoOut:
        todo = await self._get_existing(db, todo_id)
        todo.done = not todo.done
        await self.repo.save(db, todo)
        await db.commit()
        await db.refresh(todo)
        return TodoOut.model_validate(todo)

    @service_operation("Error deleting todo")
    async def delete_todo(self, db: AsyncSession, todo_id: int) -> None:
        require_id(todo_id, "Todo")
        if not await self.repo.exists(db, id=todo_id):
            raise ServiceError.not_found(f"Todo not found with id: {todo_id}")
        await self.repo.delete(db, todo_id)
        await db.commit()

    @service_operation("Error deleting todos for user")
    async def delete_todos_by_user(self, db: AsyncSession, user_id: int) -> int:
        """Remove every todo owned by ``user_id``; returns how many were removed."""
        await self._require_user(db, user_id)
        todos = await self.repo.find_by_user(db, user_id)
        removed = await self.repo.delete_all(db, todos)
        await db.commit()
        return removed

    @service_operation("Error counting todos")
    async def count_todos(self, db: AsyncSession) -> int:
        return await self.repo.count(db)

    @service_operation("Error counting todos for user")
    async def count_todos_by_user(self, db: AsyncSession, user_id: int) -> int:
        await self._require_user(db, user_id)
        return await self.repo.count_by_user(db, user_id)

    @service_operation("Error counting done todos for user")
    async def count_done_todos_by_user(self, db: AsyncSession, user_id: int) -> int:
        await self._require_user(db, user_id)
        return await self.repo.count_by_user_and_done(db, user_id, True)

    @service_operation("Error retrieving overall todo statistics")
    async def get_todo_statistics(self, db: AsyncSession) -> TodoStatistics:
        total = await self.repo.count(db)
        done = await self.repo.count_by_done(db, True)
        rate = 0.0 if total == 0 else done / total * 100
        return TodoStatistics(
            total_todos=total,
            done_todos=done,
            pending_todos=total - done,
            completion_rate=rate,
        )
