from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_serializer, field_validator
from todoapp.core.security import MAX_PASSWORD_BYTES

MIN_PASSWORD_LENGTH = 6

FIELD_MESSAGES = {
    "email": "Invalid email format",
    "password": f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
    "name": "Name is required",
}


def _check_password(value: str) -> str:
    # Byte length, not character length: bcrypt truncates at 72 bytes
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    name: str = Field(min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password(value)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Name is required")
        return value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        return _check_password(value)


class UserView(BaseModel):
    """Public projection of a user record - never carries the password digest"""
    id: int
    email: str
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer('created_at')
    def serialize_created_at(self, value: Optional[datetime], _info):
        return value.isoformat() if value else None

    @field_serializer('updated_at')
    def serialize_updated_at(self, value: Optional[datetime], _info):
        return value.isoformat() if value else None


class AuthResult(BaseModel):
    user: UserView
    token: str


# Request bodies as accepted on the wire. Every field is optional so that
# missing fields reach the service and come back as a per-field 400 rather
# than FastAPI's generic 422.

class RegisterBody(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class LoginBody(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
