from fastapi import APIRouter, Depends, status
from todoapp.api.dependencies import get_current_identity, get_todo_service
from todoapp.core.errors import validation_error
from todoapp.core.security import Identity
from todoapp.schemas.todo import TodoCreateBody, TodoUpdateBody
from todoapp.services.todo_service import TodoService

router = APIRouter(prefix="/todos", tags=["todos"])


# Ids are unsigned 32-bit, as issued by the todos table
MAX_TODO_ID = 2 ** 32 - 1


def parse_todo_id(raw: str) -> int:
    """Path ids must be unsigned 32-bit integers; anything else is a 400, not a 404"""
    if not (raw.isascii() and raw.isdigit()) or int(raw) > MAX_TODO_ID:
        raise validation_error({"id": "Invalid todo ID"}, message="Invalid todo ID")
    return int(raw)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_todo(
    body: TodoCreateBody,
    identity: Identity = Depends(get_current_identity),
    service: TodoService = Depends(get_todo_service),
):
    """Create a new todo"""
    todo = service.create(identity.user_id, body.title, body.description)
    return {"message": "Todo created successfully", "todo": todo.model_dump()}


@router.get("")
def list_todos(
    identity: Identity = Depends(get_current_identity),
    service: TodoService = Depends(get_todo_service),
):
    """List all todos for the current user, newest first"""
    return {"todos": [todo.model_dump() for todo in service.list(identity.user_id)]}


@router.get("/{todo_id}")
def get_todo(
    todo_id: str,
    identity: Identity = Depends(get_current_identity),
    service: TodoService = Depends(get_todo_service),
):
    """Get a specific todo"""
    todo = service.get(identity.user_id, parse_todo_id(todo_id))
    return {"todo": todo.model_dump()}


@router.put("/{todo_id}")
def update_todo(
    todo_id: str,
    body: TodoUpdateBody,
    identity: Identity = Depends(get_current_identity),
    service: TodoService = Depends(get_todo_service),
):
    """Update a todo; omitted fields are left unchanged"""
    todo = service.update(
        identity.user_id,
        parse_todo_id(todo_id),
        title=body.title,
        description=body.description,
        completed=body.completed,
    )
    return {"message": "Todo updated successfully", "todo": todo.model_dump()}


@router.delete("/{todo_id}")
def delete_todo(
    todo_id: str,
    identity: Identity = Depends(get_current_identity),
    service: TodoService = Depends(get_todo_service),
):
    """Delete a todo (soft delete; purged later by the scheduler)"""
    service.delete(identity.user_id, parse_todo_id(todo_id))
    return {"message": "Todo deleted successfully"}
