from typing import List, Optional
import logging

from todoapp.core.errors import AppError, ErrorKind, infrastructure_error
from todoapp.models.todo import Todo
from todoapp.schemas.todo import FIELD_MESSAGES, TodoCreate, TodoUpdate, TodoView
from todoapp.schemas.validation import validate_model
from todoapp.storage.errors import NotFoundError, StoreError
from todoapp.storage.todo_store import TodoStore

logger = logging.getLogger(__name__)

TODO_NOT_FOUND_MESSAGE = "Todo not found"


class TodoService:
    """Todo CRUD for the authenticated user"""

    def __init__(self, store: TodoStore):
        self.store = store

    def create(self, user_id: int, title: Optional[str], description: Optional[str] = None) -> TodoView:
        request = validate_model(
            TodoCreate, FIELD_MESSAGES, title=title, description=description or ""
        )
        todo = Todo(
            user_id=user_id,
            title=request.title,
            description=request.description,
            completed=False,
        )
        try:
            todo = self.store.create(todo)
        except StoreError as exc:
            logger.error(f"Failed to create todo: {exc}")
            raise infrastructure_error("Failed to create todo") from exc
        logger.info(f"Todo created successfully: todo_id={todo.id}")
        return TodoView.model_validate(todo)

    def list(self, user_id: int) -> List[TodoView]:
        try:
            todos = self.store.find_all(user_id)
        except StoreError as exc:
            logger.error(f"Failed to get todos: {exc}")
            raise infrastructure_error("Failed to get todos") from exc
        return [TodoView.model_validate(todo) for todo in todos]

    def get(self, user_id: int, todo_id: int) -> TodoView:
        return TodoView.model_validate(self._find(user_id, todo_id, "Failed to get todo"))

    def update(
        self,
        user_id: int,
        todo_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> TodoView:
        request = validate_model(
            TodoUpdate, FIELD_MESSAGES, title=title, description=description, completed=completed
        )
        todo = self._find(user_id, todo_id, "Failed to update todo")

        # None means "leave unchanged"
        updates = request.model_dump(exclude_none=True)
        if updates:
            try:
                todo = self.store.update(todo, updates)
            except StoreError as exc:
                logger.error(f"Failed to update todo: {exc}")
                raise infrastructure_error("Failed to update todo") from exc
        logger.info(f"Todo updated successfully: todo_id={todo_id}")
        return TodoView.model_validate(todo)

    def delete(self, user_id: int, todo_id: int) -> None:
        try:
            self.store.soft_delete(user_id, todo_id)
        except NotFoundError as exc:
            raise AppError(ErrorKind.NOT_FOUND, TODO_NOT_FOUND_MESSAGE) from exc
        except StoreError as exc:
            logger.error(f"Failed to delete todo: {exc}")
            raise infrastructure_error("Failed to delete todo") from exc
        logger.info(f"Todo deleted successfully: todo_id={todo_id}")

    def _find(self, user_id: int, todo_id: int, failure_message: str) -> Todo:
        try:
            return self.store.find_by_id(user_id, todo_id)
        except NotFoundError as exc:
            raise AppError(ErrorKind.NOT_FOUND, TODO_NOT_FOUND_MESSAGE) from exc
        except StoreError as exc:
            logger.error(f"{failure_message}: {exc}")
            raise infrastructure_error(failure_message) from exc
