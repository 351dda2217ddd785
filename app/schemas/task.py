"""Pydantic schemas for task request/response validation."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime, timezone
from typing import Optional, List


# Les dates sont stockées en UTC naïf
def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class TaskCreate(BaseModel):
    # title optionnel ici: le service renvoie le message 400 attendu
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    due_date: Optional[datetime] = None
    reminder: Optional[datetime] = None

    @field_validator("due_date", "reminder")
    @classmethod
    def normalize_dates(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class TaskUpdate(BaseModel):
    """Schema for updating an existing task.

    Seuls les champs présents dans le body sont appliqués (exclude_unset).
    Les champs inconnus, dont `user`, sont refusés.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    due_date: Optional[datetime] = None
    reminder: Optional[datetime] = None
    completed: Optional[bool] = None

    @field_validator("due_date", "reminder")
    @classmethod
    def normalize_dates(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class TaskResponse(BaseModel):
    """Schema for task responses from API."""

    id: int
    user: int = Field(validation_alias=AliasChoices("user", "user_id"))
    title: str
    description: str
    priority: str
    due_date: Optional[datetime]
    reminder: Optional[datetime]
    completed: bool
    created_at: datetime

    @field_validator("due_date", "reminder", "created_at")
    @classmethod
    def mark_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # valeurs en base = UTC naïf, renvoyées avec leur offset
        if value is None or value.tzinfo is not None:
            return value
        return value.replace(tzinfo=timezone.utc)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Enveloppes de réponse

class TaskListEnvelope(BaseModel):
    success: bool = True
    count: int
    data: List[TaskResponse]


class TaskDetailEnvelope(BaseModel):
    success: bool = True
    data: TaskResponse


class TaskEnvelope(TaskDetailEnvelope):
    message: str


class MessageEnvelope(BaseModel):
    success: bool = True
    message: str
