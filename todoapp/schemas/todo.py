from typing import Optional

from pydantic import BaseModel, ConfigDict

from todoapp.schemas.common import UtcDatetime


class TodoBase(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None


class TodoCreate(TodoBase):
    done: bool = False


class TodoUpdate(TodoBase):
    done: Optional[bool] = None


class TodoOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    done: bool
    user_id: int
    created_at: Optional[UtcDatetime] = None
    updated_at: Optional[UtcDatetime] = None

    model_config = ConfigDict(from_attributes=True)


class TodoStatistics(BaseModel):
    total_todos: int
    done_todos: int
    pending_todos: int
    completion_rate: float
