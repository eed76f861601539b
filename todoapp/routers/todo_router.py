from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from todoapp.schemas.todo import TodoOut, TodoStatistics, TodoUpdate
from todoapp.services.todo_service import TodoService
from todoapp.database import get_db

router = APIRouter()
service = TodoService()


@router.get("/", response_model=list[TodoOut])
async def list_todos(db: AsyncSession = Depends(get_db)):
    return await service.list_todos(db)


@router.get("/stats", response_model=TodoStatistics)
async def todo_statistics(db: AsyncSession = Depends(get_db)):
    return await service.get_todo_statistics(db)


@router.get("/count")
async def count_todos(db: AsyncSession = Depends(get_db)):
    return {"count": await service.count_todos(db)}


@router.get("/{todo_id}", response_model=TodoOut)
async def get_todo(todo_id: int, db: AsyncSession = Depends(get_db)):
    return await service.get_todo(db, todo_id)


@router.patch("/{todo_id}", response_model=TodoOut)
async def update_todo(todo_id: int, todo_in: TodoUpdate, db: AsyncSession = Depends(get_db)):
    return await service.update_todo(db, todo_id, todo_in)


@router.post("/{todo_id}/toggle", response_model=TodoOut)
async def toggle_todo(todo_id: int, db: AsyncSession = Depends(get_db)):
    return await service.toggle_todo(db, todo_id)


@router.delete("/{todo_id}", status_code=204)
async def delete_todo(todo_id: int, db: AsyncSession = Depends(get_db)):
    await service.delete_todo(db, todo_id)
