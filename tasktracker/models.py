"""Task Tracker — request/response models."""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field


class TaskStatus(str, Enum):
    pending = "pending"
    in_progress = "in-progress"
    completed = "completed"


class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


# --------------- Users ---------------

class UserRegister(BaseModel):
    username: str = Field(min_length=1)
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserLogin(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class PublicUser(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str


class RegisterResponse(BaseModel):
    message: str
    user: PublicUser


class LoginResponse(BaseModel):
    success: bool
    message: str
    token: str
    user: PublicUser


# --------------- Tasks ---------------

def _blank_date_to_none(value):
    # the dashboard form posts "" when no due date is picked
    if isinstance(value, str) and not value.strip():
        return None
    return value


DueDate = Annotated[Optional[date], BeforeValidator(_blank_date_to_none)]


def _as_utc(value: datetime) -> datetime:
    # SQLite hands datetimes back without tzinfo; they were written as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDateTime = Annotated[datetime, AfterValidator(_as_utc)]


class TaskCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, validate_default=True)

    title: str = Field(min_length=1)
    description: str = ""
    status: TaskStatus = TaskStatus.pending
    priority: TaskPriority = TaskPriority.medium
    due_date: DueDate = Field(default=None, alias="dueDate")
    user: Optional[str] = None


class TaskUpdate(BaseModel):
    """Partial update; fields left out are not touched. Unknown keys
    (``_id``, ``user``, timestamps) are ignored."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: DueDate = Field(default=None, alias="dueDate")

    def changes(self) -> dict:
        changes = self.model_dump(exclude_unset=True)
        # title, status and priority cannot be cleared
        for key in ("title", "status", "priority"):
            if key in changes and changes[key] is None:
                del changes[key]
        return changes


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str = Field(alias="_id")
    title: str
    description: Optional[str] = ""
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[date] = Field(default=None, alias="dueDate")
    user: str
    created_at: UtcDateTime = Field(alias="createdAt")
    updated_at: UtcDateTime = Field(alias="updatedAt")


class TaskListResponse(BaseModel):
    userTasks: List[TaskOut]


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    service: str
