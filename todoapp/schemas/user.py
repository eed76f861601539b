from typing import Optional

from pydantic import BaseModel, ConfigDict

from todoapp.schemas.common import UtcDatetime


# Input shapes stay permissive: UserService owns every validation rule so that
# HTTP callers and direct callers get the same errors.
class UserCreate(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class UserUpdate(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None


class UserOut(BaseModel):
    """Public view of a user; the password hash never leaves the service."""

    id: int
    username: str
    email: str
    created_at: Optional[UtcDatetime] = None
    updated_at: Optional[UtcDatetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserStatistics(BaseModel):
    total_users: int
    active_users: int
    inactive_users: int
