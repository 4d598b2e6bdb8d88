from typing import Optional
import logging

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from todoapp.core.config import Settings, get_settings
from todoapp.core.database import get_db
from todoapp.core.errors import unauthenticated
from todoapp.core.security import Identity, InvalidTokenError, PasswordHasher, TokenService
from todoapp.services.auth_service import AuthService
from todoapp.services.todo_service import TodoService
from todoapp.storage.todo_store import TodoStore
from todoapp.storage.user_store import SqlUserStore

logger = logging.getLogger(__name__)

BEARER_SCHEME = "Bearer"

# bcrypt context is stateless after construction; share one per process
_password_hasher = PasswordHasher()


def get_password_hasher() -> PasswordHasher:
    return _password_hasher


def get_token_service(settings: Settings = Depends(get_settings)) -> TokenService:
    return TokenService(
        secret=settings.JWT_SECRET,
        expiry_hours=settings.JWT_EXPIRY_HOURS,
        algorithm=settings.JWT_ALGORITHM,
    )


def get_auth_service(
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(SqlUserStore(db), hasher, tokens)


def get_todo_service(db: Session = Depends(get_db)) -> TodoService:
    return TodoService(TodoStore(db))


def parse_bearer(authorization: Optional[str]) -> str:
    """
    Extract the token from an Authorization header value.

    The header must be exactly "Bearer <token>": case-sensitive scheme, one
    space. Anything else is rejected before the token is looked at.
    """
    if not authorization:
        raise unauthenticated("Authorization header is required")
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0] != BEARER_SCHEME or not parts[1]:
        raise unauthenticated("Authorization header format must be Bearer {token}")
    return parts[1]


def authenticate(authorization: Optional[str], tokens: TokenService) -> Identity:
    token = parse_bearer(authorization)
    try:
        claims = tokens.verify(token)
    except InvalidTokenError as exc:
        logger.info(f"Rejected bearer token: {exc}")
        raise unauthenticated("Invalid or expired token") from exc
    return Identity(user_id=claims.user_id, email=claims.email)


async def get_current_identity(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    """
    Gate for protected routes.

    Verifies the bearer token and attaches the caller's identity to
    request.state before any handler logic runs. Does not hit the database.
    """
    identity = authenticate(authorization, tokens)
    request.state.identity = identity
    return identity


async def get_bearer_token(authorization: Optional[str] = Header(default=None)) -> str:
    """Raw bearer token, for endpoints that re-sign it (refresh)"""
    return parse_bearer(authorization)
