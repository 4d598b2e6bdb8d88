from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_serializer

TITLE_MAX_LENGTH = 255

FIELD_MESSAGES = {
    "title": f"Title must be between 1 and {TITLE_MAX_LENGTH} characters",
    "description": "Description must be a string",
    "completed": "Completed must be a boolean",
}


class TodoCreate(BaseModel):
    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = ""


class TodoUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = None
    completed: Optional[bool] = None


class TodoView(BaseModel):
    id: int
    title: str
    description: str
    completed: bool
    user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer('created_at')
    def serialize_created_at(self, value: Optional[datetime], _info):
        return value.isoformat() if value else None

    @field_serializer('updated_at')
    def serialize_updated_at(self, value: Optional[datetime], _info):
        return value.isoformat() if value else None


class TodoCreateBody(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None


class TodoUpdateBody(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None
