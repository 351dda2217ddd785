from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import Optional

from app.core.auth import get_current_user
from app.core.database import get_db
from app.models.user import User
from app.schemas.task import (
    TaskCreate,
    TaskUpdate,
    TaskResponse,
    TaskListEnvelope,
    TaskDetailEnvelope,
    TaskEnvelope,
    MessageEnvelope,
)
from app.services import task_service

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=TaskListEnvelope)
def list_tasks(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    filter: Optional[str] = Query(None, description="completed | pending"),
    search: Optional[str] = Query(None, description="Recherche dans titre et description"),
    sort: Optional[str] = Query(None, description="dueDate | priority"),
):
    tasks = task_service.list_tasks(db, current_user, filter=filter, search=search, sort=sort)
    return TaskListEnvelope(
        count=len(tasks),
        data=[TaskResponse.model_validate(t) for t in tasks]
    )


@router.post("", response_model=TaskEnvelope, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    task = task_service.create_task(db, current_user, task_data)
    return TaskEnvelope(data=TaskResponse.model_validate(task), message="Task created successfully")


@router.get("/{task_id}", response_model=TaskDetailEnvelope)
def get_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    task = task_service.get_task(db, current_user, task_id)
    return TaskDetailEnvelope(data=TaskResponse.model_validate(task))


@router.put("/{task_id}", response_model=TaskEnvelope)
def update_task(
    task_id: int,
    task_data: TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    task = task_service.update_task(db, current_user, task_id, task_data)
    return TaskEnvelope(data=TaskResponse.model_validate(task), message="Task updated successfully")


@router.delete("/{task_id}", response_model=MessageEnvelope)
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    task_service.delete_task(db, current_user, task_id)
    return MessageEnvelope(message="Task deleted successfully")
