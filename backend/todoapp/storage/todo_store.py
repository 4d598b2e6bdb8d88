from datetime import datetime, timezone
from typing import Any, Dict, List
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from todoapp.models.todo import Todo
from todoapp.storage.errors import NotFoundError, StoreError

logger = logging.getLogger(__name__)


class TodoStore:
    """
    Todo persistence scoped to one owner.

    Every query filters on user_id and excludes soft-deleted rows, so a todo
    belonging to someone else looks exactly like a missing one.
    """

    def __init__(self, db: Session):
        self.db = db

    def _live(self, user_id: int):
        return self.db.query(Todo).filter(
            Todo.user_id == user_id,
            Todo.deleted_at.is_(None),
        )

    def create(self, todo: Todo) -> Todo:
        try:
            self.db.add(todo)
            self.db.commit()
            self.db.refresh(todo)
            return todo
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"failed to create todo: {exc}") from exc

    def find_all(self, user_id: int) -> List[Todo]:
        try:
            return self._live(user_id).order_by(Todo.created_at.desc(), Todo.id.desc()).all()
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to list todos: {exc}") from exc

    def find_by_id(self, user_id: int, todo_id: int) -> Todo:
        try:
            todo = self._live(user_id).filter(Todo.id == todo_id).first()
        except (SQLAlchemyError, OverflowError) as exc:
            raise StoreError(f"failed to get todo {todo_id}: {exc}") from exc
        if todo is None:
            raise NotFoundError(f"no todo {todo_id} for user {user_id}")
        return todo

    def update(self, todo: Todo, updates: Dict[str, Any]) -> Todo:
        try:
            for field, value in updates.items():
                setattr(todo, field, value)
            self.db.commit()
            self.db.refresh(todo)
            return todo
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"failed to update todo {todo.id}: {exc}") from exc

    def soft_delete(self, user_id: int, todo_id: int) -> None:
        try:
            affected = self._live(user_id).filter(Todo.id == todo_id).update(
                {Todo.deleted_at: datetime.now(timezone.utc)},
                synchronize_session=False,
            )
            self.db.commit()
        except (SQLAlchemyError, OverflowError) as exc:
            self.db.rollback()
            raise StoreError(f"failed to delete todo {todo_id}: {exc}") from exc
        if affected == 0:
            raise NotFoundError(f"no todo {todo_id} for user {user_id}")

    def purge_deleted(self, older_than: datetime) -> int:
        """Hard-delete todos soft-deleted before older_than; returns the row count"""
        try:
            purged = self.db.query(Todo).filter(
                Todo.deleted_at.is_not(None),
                Todo.deleted_at < older_than,
            ).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"failed to purge deleted todos: {exc}") from exc
        if purged:
            logger.info(f"Purged {purged} soft-deleted todos")
        return purged
