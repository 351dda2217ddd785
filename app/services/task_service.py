"""Task service: requêtes scopées par propriétaire, contrôle d'accès et mutations.

Toutes les fonctions reçoivent la session et l'utilisateur appelant. Les erreurs
SQLAlchemy sont journalisées puis converties en StorageUnavailable avec un
message générique par opération.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import case, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import NotFound, StorageUnavailable, Unauthorized, ValidationError
from app.models.task import Task
from app.models.user import User
from app.schemas.task import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

FILTER_COMPLETED = "completed"
FILTER_PENDING = "pending"

SORT_DUE_DATE = "dueDate"
SORT_PRIORITY = "priority"

DEFAULT_PRIORITY = "Medium"

# High=0, Medium=1, Low=2, autres valeurs en dernier
_priority_rank = case(
    (Task.priority == "High", 0),
    (Task.priority == "Medium", 1),
    (Task.priority == "Low", 2),
    else_=3,
)

# Champs non nullables: un null explicite dans un patch est refusé
_NOT_NULL_FIELDS = ("title", "completed", "description", "priority")


@contextmanager
def _storage(db: Session, operation: str, message: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"{operation} error")
        raise StorageUnavailable(message)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _get_owned_task(db: Session, caller: User, task_id: int, action: str) -> Task:
    task = db.get(Task, task_id)
    if task is None:
        logger.info(f"Task {task_id} not found for user {caller.id}")
        raise NotFound("Task not found")
    if task.user_id != caller.id:
        logger.warning(f"User {caller.id} tried to {action} task {task_id} owned by {task.user_id}")
        raise Unauthorized(f"Not authorized to {action} this task")
    return task


def list_tasks(
    db: Session,
    caller: User,
    filter: Optional[str] = None,
    search: Optional[str] = None,
    sort: Optional[str] = None,
) -> List[Task]:
    query = db.query(Task).filter(Task.user_id == caller.id)

    if filter == FILTER_COMPLETED:
        query = query.filter(Task.completed == True)
    elif filter == FILTER_PENDING:
        query = query.filter(Task.completed == False)

    if search:
        pattern = f"%{_escape_like(search)}%"
        query = query.filter(or_(
            Task.title.ilike(pattern, escape="\\"),
            Task.description.ilike(pattern, escape="\\"),
        ))

    if sort == SORT_DUE_DATE:
        query = query.order_by(Task.due_date.is_(None), Task.due_date.asc(), Task.created_at.desc(), Task.id.desc())
    elif sort == SORT_PRIORITY:
        query = query.order_by(_priority_rank, Task.created_at.desc(), Task.id.desc())
    else:
        query = query.order_by(Task.created_at.desc(), Task.id.desc())

    with _storage(db, "Get tasks", "Server error while fetching tasks"):
        return query.all()


def get_task(db: Session, caller: User, task_id: int) -> Task:
    with _storage(db, "Get task", "Server error while fetching task"):
        return _get_owned_task(db, caller, task_id, "view")


def create_task(db: Session, caller: User, task_data: TaskCreate) -> Task:
    if task_data.title is None or not task_data.title.strip():
        raise ValidationError("Please provide a task title")

    new_task = Task(
        user_id=caller.id,
        title=task_data.title,
        description=task_data.description or "",
        priority=task_data.priority or DEFAULT_PRIORITY,
        due_date=task_data.due_date,
        reminder=task_data.reminder,
        completed=False,
    )
    with _storage(db, "Create task", "Server error while creating task"):
        db.add(new_task)
        db.commit()
        db.refresh(new_task)

    logger.info(f"Task {new_task.id} created by user {caller.id}")
    return new_task


def update_task(db: Session, caller: User, task_id: int, task_data: TaskUpdate) -> Task:
    update_data = task_data.model_dump(exclude_unset=True)

    with _storage(db, "Update task", "Server error while updating task"):
        task = _get_owned_task(db, caller, task_id, "update")
        for field in _NOT_NULL_FIELDS:
            if field in update_data and update_data[field] is None:
                raise ValidationError(f"{field} cannot be null")
        for field, value in update_data.items():
            setattr(task, field, value)
        db.commit()
        db.refresh(task)

    logger.info(f"Task {task_id} updated by user {caller.id}: {sorted(update_data)}")
    return task


def delete_task(db: Session, caller: User, task_id: int) -> None:
    with _storage(db, "Delete task", "Server error while deleting task"):
        task = _get_owned_task(db, caller, task_id, "delete")
        db.delete(task)
        db.commit()

    logger.info(f"Task {task_id} deleted by user {caller.id}")
