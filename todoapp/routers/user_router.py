from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from todoapp.database import get_db
from todoapp.errors import ServiceError
from todoapp.schemas.todo import TodoCreate, TodoOut
from todoapp.schemas.user import UserCreate, UserOut, UserStatistics, UserUpdate
from todoapp.services.todo_service import TodoService
from todoapp.services.user_service import UserService

router = APIRouter()
service = UserService()
todo_service = TodoService()


@router.post("/", response_model=UserOut, status_code=201)
async def register_user(user_in: UserCreate, db: AsyncSession = Depends(get_db)):
    return await service.register_user(db, user_in)


@router.get("/", response_model=list[UserOut])
async def list_users(q: Optional[str] = None, db: AsyncSession = Depends(get_db)):
    if q is not None:
        return await service.search_users(db, q)
    return await service.list_users(db)


@router.get("/stats", response_model=UserStatistics)
async def user_statistics(db: AsyncSession = Depends(get_db)):
    return await service.get_user_statistics(db)


@router.get("/count")
async def count_users(created_after: Optional[datetime] = None, db: AsyncSession = Depends(get_db)):
    if created_after is not None:
        return {"count": await service.count_users_created_after(db, created_after)}
    return {"count": await service.count_users(db)}


@router.get("/exists")
async def user_exists(
    username: Optional[str] = None,
    email: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    if username is not None:
        return {"exists": await service.exists_by_username(db, username)}
    if email is not None:
        return {"exists": await service.exists_by_email(db, email)}
    raise ServiceError.invalid("Either username or email is required")


@router.get("/by-username/{username}", response_model=UserOut)
async def get_user_by_username(username: str, db: AsyncSession = Depends(get_db)):
    user = await service.get_user_by_username(db, username)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/by-email/{email}", response_model=UserOut)
async def get_user_by_email(email: str, db: AsyncSession = Depends(get_db)):
    user = await service.get_user_by_email(db, email)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/{user_id}", response_model=UserOut)
async def get_user(user_id: int, db: AsyncSession = Depends(get_db)):
    return await service.get_user(db, user_id)


@router.patch("/{user_id}", response_model=UserOut)
async def update_user(user_id: int, user_in: UserUpdate, db: AsyncSession = Depends(get_db)):
    return await service.update_user(db, user_id, user_in)


@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: int, db: AsyncSession = Depends(get_db)):
    await service.delete_user(db, user_id)


@router.get("/{user_id}/active")
async def user_active(user_id: int, db: AsyncSession = Depends(get_db)):
    return {"active": await service.is_user_active(db, user_id)}


# ---- todos owned by a user ----

@router.post("/{user_id}/todos", response_model=TodoOut, status_code=201)
async def create_todo(user_id: int, todo_in: TodoCreate, db: AsyncSession = Depends(get_db)):
    return await todo_service.create_todo(db, todo_in, user_id)


@router.get("/{user_id}/todos", response_model=list[TodoOut])
async def list_user_todos(user_id: int, done: Optional[bool] = None, db: AsyncSession = Depends(get_db)):
    if done is not None:
        return await todo_service.list_todos_by_user_and_status(db, user_id, done)
    return await todo_service.list_todos_by_user(db, user_id)


@router.delete("/{user_id}/todos")
async def delete_user_todos(user_id: int, db: AsyncSession = Depends(get_db)):
    return {"deleted": await todo_service.delete_todos_by_user(db, user_id)}


@router.get("/{user_id}/todos/count")
async def count_user_todos(user_id: int, db: AsyncSession = Depends(get_db)):
    return {
        "total": await todo_service.count_todos_by_user(db, user_id),
        "done": await todo_service.count_done_todos_by_user(db, user_id),
    }
