"""
Task API — ownership-checked CRUD over the task store.

``subject`` is always the user id recovered from the caller's token; it is the
only source of truth for who owns a task.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .database import DBTask, utcnow
from .exceptions import Forbidden, InvalidInput, ServerError, TaskNotFound
from .models import TaskCreate, TaskUpdate

log = logging.getLogger(__name__)


def _check_owner(task: DBTask, subject: str):
    if task.user != subject:
        log.warning("User %s denied access to task %s", subject, task.id)
        raise Forbidden()


def _get_owned_task(db: Session, task_id: str, subject: str) -> DBTask:
    task = db.get(DBTask, task_id)
    if task is None:
        raise TaskNotFound()
    _check_owner(task, subject)
    return task


def list_tasks(db: Session, user_id: Optional[str], subject: str) -> List[DBTask]:
    if not user_id:
        raise InvalidInput("User ID is required")
    if user_id != subject:
        log.warning("User %s denied listing tasks of %s", subject, user_id)
        raise Forbidden()

    try:
        return (
            db.query(DBTask)
            .filter(DBTask.user == subject)
            .order_by(DBTask.created_at, DBTask.id)
            .all()
        )
    except SQLAlchemyError:
        log.exception("Error fetching tasks for %s", subject)
        raise ServerError("Error fetching tasks")


def create_task(db: Session, fields: TaskCreate, subject: str) -> DBTask:
    if fields.user is not None and fields.user != subject:
        log.warning("User %s tried to create a task for %s", subject, fields.user)
        raise Forbidden()

    now = utcnow()
    task = DBTask(
        title=fields.title,
        description=fields.description,
        status=fields.status,
        priority=fields.priority,
        due_date=fields.due_date,
        user=subject,
        created_at=now,
        updated_at=now,
    )
    try:
        db.add(task)
        db.commit()
        db.refresh(task)
    except SQLAlchemyError:
        db.rollback()
        log.exception("Error creating task for %s", subject)
        raise ServerError("Error creating task")
    return task


def update_task(db: Session, task_id: str, patch: TaskUpdate, subject: str) -> DBTask:
    try:
        task = _get_owned_task(db, task_id, subject)
        for key, value in patch.changes().items():
            setattr(task, key, value)
        task.updated_at = utcnow()
        db.commit()
        db.refresh(task)
    except SQLAlchemyError:
        db.rollback()
        log.exception("Error updating task %s", task_id)
        raise ServerError("Error updating task")
    return task


def delete_task(db: Session, task_id: str, subject: str):
    try:
        task = _get_owned_task(db, task_id, subject)
        db.delete(task)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        log.exception("Error deleting task %s", task_id)
        raise ServerError("Error deleting task")
